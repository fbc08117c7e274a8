"""Confirmed and draft copies of the service settings."""

from src.admin.api import SettingsApi
from src.admin.models import ConfigurationSnapshot
from src.logging.audit import get_audit_logger
from src.sync.diff import copy_snapshot, diff, merge


class ConfigurationStore:
    """Sole owner of the two settings snapshots.

    `confirmed` is the last value known to be persisted remotely; `draft`
    is what the editor currently shows. Both stay None until the first
    successful load.
    """

    def __init__(self, settings_api: SettingsApi):
        self._api = settings_api
        self._confirmed: ConfigurationSnapshot | None = None
        self._draft: ConfigurationSnapshot | None = None

    @property
    def confirmed(self) -> ConfigurationSnapshot | None:
        return self._confirmed

    @property
    def draft(self) -> ConfigurationSnapshot | None:
        return self._draft

    @property
    def loaded(self) -> bool:
        return self._confirmed is not None

    async def load(self) -> ConfigurationSnapshot:
        """Replace both snapshots with a fresh copy from the service.

        On failure the previous state is kept and the error propagates.
        """
        snapshot = await self._api.get()
        self._confirmed = snapshot
        self._draft = copy_snapshot(snapshot)
        get_audit_logger().info("Settings loaded")
        return snapshot

    def _require_loaded(self) -> None:
        if self._confirmed is None:
            raise RuntimeError("Settings have not been loaded")

    def set_draft(self, snapshot: ConfigurationSnapshot) -> None:
        self._require_loaded()
        self._draft = copy_snapshot(snapshot)

    def apply_confirmed(self, delta: dict) -> ConfigurationSnapshot:
        """Merge an acknowledged delta into `confirmed`, field by field."""
        self._require_loaded()
        self._confirmed = merge(self._confirmed, delta)
        return self._confirmed

    def pending_delta(self) -> dict:
        """Fields edited in the draft but not yet persisted."""
        self._require_loaded()
        return diff(self._confirmed, self._draft)
