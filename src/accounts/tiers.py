"""Account tier <-> capability tag mapping.

The tier is never stored; it is recomputed from the capability tags every
time. Writing a tier back replaces the whole tag list, so tags this module
does not recognize are dropped.
"""

from collections.abc import Iterable
from enum import Enum

BASE_CAPABILITY = "chat"
PRO_CAPABILITY = "claude_pro"
MAX_CAPABILITY = "claude_max"


class AccountTier(str, Enum):
    NONE = ""
    NORMAL = "Normal"
    PRO = "Pro"
    MAX = "Max"


def tier_of(capabilities: Iterable[str] | None) -> AccountTier:
    caps = list(capabilities or [])
    if not caps:
        return AccountTier.NONE
    if MAX_CAPABILITY in caps:
        return AccountTier.MAX
    if PRO_CAPABILITY in caps:
        return AccountTier.PRO
    return AccountTier.NORMAL


def capabilities_of(tier: AccountTier) -> list[str] | None:
    """Canonical tags for a tier. None means "leave capabilities alone"."""
    if tier is AccountTier.NONE:
        return None
    if tier is AccountTier.NORMAL:
        return [BASE_CAPABILITY]
    if tier is AccountTier.PRO:
        return [BASE_CAPABILITY, PRO_CAPABILITY]
    if tier is AccountTier.MAX:
        return [BASE_CAPABILITY, MAX_CAPABILITY]
    raise ValueError(f"Unknown account tier: {tier}")
