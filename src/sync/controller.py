"""Commit controller: persists draft edits as minimal partial updates.

Each commit diffs the draft against the confirmed snapshot, PUTs only the
changed fields and, once acknowledged, merges them into `confirmed`.
Progress is exposed as a SyncStatus that decays from Saved/Error back to
Idle on a timer.
"""

import asyncio
import dataclasses
import secrets
import string
from collections.abc import Callable

from src.admin.api import SettingsApi
from src.admin.models import ConfigurationSnapshot, coerce_padtxt_length
from src.config.settings import get_settings
from src.gateway.errors import GatewayError
from src.logging.audit import get_audit_logger
from src.sync.diff import diff
from src.sync.status import SyncEvent, SyncStatus, transition
from src.sync.store import ConfigurationStore

KEY_ALPHABET = string.ascii_letters + string.digits
KEY_PREFIX = "sk-"
KEY_LENGTH = 48

KEY_LIST_FIELDS = ("api_keys", "admin_api_keys")
OPTIONAL_TEXT_FIELDS = ("proxy_url", "custom_prompt")  # cleared input means unset


def generate_key() -> str:
    return KEY_PREFIX + "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_LENGTH))


class SyncController:
    """Drives SyncStatus and the commit cycle for one settings entity."""

    def __init__(
        self,
        store: ConfigurationStore,
        settings_api: SettingsApi,
        saved_delay: float | None = None,
        error_delay: float | None = None,
        serialize: bool | None = None,
    ):
        settings = get_settings()
        self._store = store
        self._api = settings_api
        self._saved_delay = settings.saved_status_delay if saved_delay is None else saved_delay
        self._error_delay = settings.error_status_delay if error_delay is None else error_delay
        serialize = settings.serialize_commits if serialize is None else serialize
        self._lock: asyncio.Lock | None = asyncio.Lock() if serialize else None

        self._status = SyncStatus.IDLE
        self._timer: asyncio.TimerHandle | None = None
        self._in_flight = 0
        self._batch: set[SyncEvent] = set()  # outcomes of overlapping commits
        self._listeners: list[Callable[[SyncStatus], None]] = []

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    def add_listener(self, callback: Callable[[SyncStatus], None]) -> None:
        self._listeners.append(callback)

    def _fire(self, event: SyncEvent) -> None:
        previous = self._status
        self._status = transition(self._status, event)
        get_audit_logger().debug(
            "Sync status",
            extra={"audit_data": {"from": previous.value, "event": event.value, "to": self._status.value}},
        )
        for listener in self._listeners:
            listener(self._status)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_decay(self, delay: float) -> None:
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().call_later(delay, self._on_timeout)

    def _on_timeout(self) -> None:
        self._timer = None
        if self._status in (SyncStatus.SAVED, SyncStatus.ERROR):
            self._fire(SyncEvent.TIMEOUT)

    async def commit(self, new_draft: ConfigurationSnapshot) -> bool:
        """Persist whatever differs between `new_draft` and `confirmed`.

        Returns True when the changes were saved (or there were none) and
        False when the service call failed. Failures leave both snapshots
        untouched and are never retried here. Any other exception, including
        cancellation, settles the commit as failed before propagating.
        """
        self._cancel_timer()
        self._store.set_draft(new_draft)
        self._in_flight += 1
        self._fire(SyncEvent.COMMIT)

        outcome = SyncEvent.FAILURE
        try:
            if self._lock is None:
                outcome = await self._run(new_draft)
            else:
                async with self._lock:
                    outcome = await self._run(new_draft)
        finally:
            self._resolve(outcome)
        return outcome is not SyncEvent.FAILURE

    async def _run(self, new_draft: ConfigurationSnapshot) -> SyncEvent:
        logger = get_audit_logger()
        delta = diff(self._store.confirmed, new_draft)
        if not delta:
            return SyncEvent.NOOP

        try:
            await self._api.update(delta)
        except GatewayError as e:
            logger.warning(
                "Settings commit failed",
                extra={"audit_data": {"fields": sorted(delta), "reason": e.message}},
            )
            return SyncEvent.FAILURE

        self._store.apply_confirmed(delta)
        logger.info("Settings committed", extra={"audit_data": {"fields": sorted(delta)}})
        return SyncEvent.SUCCESS

    def _resolve(self, outcome: SyncEvent) -> None:
        """Settle one commit; status leaves Saving only once none are pending."""
        self._in_flight -= 1
        self._batch.add(outcome)
        if self._in_flight > 0:
            return

        if SyncEvent.FAILURE in self._batch:
            outcome = SyncEvent.FAILURE
        elif SyncEvent.SUCCESS in self._batch:
            outcome = SyncEvent.SUCCESS
        self._batch.clear()
        self._fire(outcome)

        if self._status is SyncStatus.SAVED:
            self._schedule_decay(self._saved_delay)
        elif self._status is SyncStatus.ERROR:
            self._schedule_decay(self._error_delay)

    # Field and list edits

    async def update_field(self, **changes) -> bool:
        """Apply edits to the current draft and commit (a field blur)."""
        if "padtxt_length" in changes:
            changes["padtxt_length"] = coerce_padtxt_length(changes["padtxt_length"])
        for name in OPTIONAL_TEXT_FIELDS:
            if name in changes:
                changes[name] = changes[name] or None
        draft = dataclasses.replace(self._current_draft(), **changes)
        return await self.commit(draft)

    async def add_api_key(self, key: str) -> bool:
        return await self._add_key("api_keys", key)

    async def remove_api_key(self, key: str) -> bool:
        return await self._remove_key("api_keys", key)

    async def add_admin_key(self, key: str) -> bool:
        return await self._add_key("admin_api_keys", key)

    async def remove_admin_key(self, key: str) -> bool:
        return await self._remove_key("admin_api_keys", key)

    async def _add_key(self, field_name: str, key: str) -> bool:
        draft = self._current_draft()
        keys = getattr(draft, field_name)
        if not key or key in keys:
            return False
        return await self.commit(dataclasses.replace(draft, **{field_name: [*keys, key]}))

    async def _remove_key(self, field_name: str, key: str) -> bool:
        draft = self._current_draft()
        keys = [k for k in getattr(draft, field_name) if k != key]
        return await self.commit(dataclasses.replace(draft, **{field_name: keys}))

    def _current_draft(self) -> ConfigurationSnapshot:
        draft = self._store.draft
        if draft is None:
            raise RuntimeError("Settings have not been loaded")
        return draft

    def close(self) -> None:
        self._cancel_timer()
