"""Process-wide admin session: the credential every outbound call carries.

Written only at login and cleared at logout. The gateway reads it through
a zero-argument accessor and never mutates it.
"""

import json
import os
from abc import ABC, abstractmethod
from collections.abc import Callable

from src.config.settings import get_settings


class CredentialStore(ABC):
    """Abstract base for persisting the admin credential between runs."""

    @abstractmethod
    def load(self) -> str | None:
        ...

    @abstractmethod
    def save(self, credential: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class JSONCredentialStore(CredentialStore):
    """Keeps the credential in a small JSON file."""

    def __init__(self, path: str):
        self._path = path

    def load(self) -> str | None:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        credential = data.get("admin_key")
        return credential or None

    def save(self, credential: str) -> None:
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump({"admin_key": credential}, f)

    def clear(self) -> None:
        try:
            os.remove(self._path)
        except FileNotFoundError:
            pass


class SessionState:
    """Holds the admin credential with an explicit login/logout lifecycle."""

    def __init__(self, store: CredentialStore | None = None):
        self._store = store
        self._credential: str | None = store.load() if store else None

    @property
    def credential(self) -> str | None:
        return self._credential

    @property
    def is_authenticated(self) -> bool:
        return bool(self._credential)

    def login(self, credential: str) -> None:
        self._credential = credential
        if self._store:
            self._store.save(credential)

    def logout(self) -> None:
        self._credential = None
        if self._store:
            self._store.clear()

    def accessor(self) -> Callable[[], str | None]:
        """Read-only view handed to the request gateway."""
        return lambda: self._credential


_session: SessionState | None = None


def get_session() -> SessionState:
    """Get the process-wide session singleton."""
    global _session
    if _session is not None:
        return _session

    settings = get_settings()
    store = JSONCredentialStore(settings.credential_file) if settings.credential_file else None
    _session = SessionState(store)
    return _session
