"""Field-wise diffing of configuration snapshots.

Compares a statically declared field list instead of serialized forms, so
ordering of dict keys, None-vs-missing and bool-vs-int never produce
spurious changes.
"""

import dataclasses

from src.admin.models import ConfigurationSnapshot

SETTINGS_FIELDS: tuple[str, ...] = tuple(f.name for f in dataclasses.fields(ConfigurationSnapshot))


def fields_equal(a, b) -> bool:
    """Structural equality for one settings value.

    Sequences compare in order (same length, same elements). None and a
    missing value are the same thing.
    """
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        if not isinstance(a, (list, tuple)) or not isinstance(b, (list, tuple)):
            return False
        return len(a) == len(b) and all(fields_equal(x, y) for x, y in zip(a, b))
    return a == b


def _copy_value(value):
    return list(value) if isinstance(value, (list, tuple)) else value


def diff(base: ConfigurationSnapshot, candidate: ConfigurationSnapshot) -> dict:
    """Return only the fields whose value in `candidate` differs from `base`."""
    delta = {}
    for name in SETTINGS_FIELDS:
        new_value = getattr(candidate, name, None)
        if not fields_equal(getattr(base, name, None), new_value):
            delta[name] = _copy_value(new_value)
    return delta


def merge(snapshot: ConfigurationSnapshot, delta: dict) -> ConfigurationSnapshot:
    """Overwrite the fields named in `delta`, leaving every other field as is."""
    unknown = set(delta) - set(SETTINGS_FIELDS)
    if unknown:
        raise KeyError(f"Unknown settings fields: {sorted(unknown)}")
    return dataclasses.replace(snapshot, **{k: _copy_value(v) for k, v in delta.items()})


def copy_snapshot(snapshot: ConfigurationSnapshot) -> ConfigurationSnapshot:
    """A snapshot sharing no list objects with the original."""
    return dataclasses.replace(snapshot, **{name: _copy_value(getattr(snapshot, name)) for name in SETTINGS_FIELDS})
