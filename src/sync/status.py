"""Save-status state machine.

Idle -> Saving on every commit; Saving resolves to Saved, Error, or back
to Idle for an empty delta; Saved and Error decay to Idle on a timer.
"""

from enum import Enum


class SyncStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class SyncEvent(str, Enum):
    COMMIT = "commit"
    NOOP = "noop"
    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


class InvalidTransition(Exception):
    def __init__(self, state: SyncStatus, event: SyncEvent):
        super().__init__(f"No transition from {state.value} on {event.value}")
        self.state = state
        self.event = event


_TRANSITIONS: dict[tuple[SyncStatus, SyncEvent], SyncStatus] = {
    (SyncStatus.IDLE, SyncEvent.COMMIT): SyncStatus.SAVING,
    (SyncStatus.SAVING, SyncEvent.COMMIT): SyncStatus.SAVING,
    (SyncStatus.SAVED, SyncEvent.COMMIT): SyncStatus.SAVING,
    (SyncStatus.ERROR, SyncEvent.COMMIT): SyncStatus.SAVING,
    (SyncStatus.SAVING, SyncEvent.NOOP): SyncStatus.IDLE,
    (SyncStatus.SAVING, SyncEvent.SUCCESS): SyncStatus.SAVED,
    (SyncStatus.SAVING, SyncEvent.FAILURE): SyncStatus.ERROR,
    (SyncStatus.SAVED, SyncEvent.TIMEOUT): SyncStatus.IDLE,
    (SyncStatus.ERROR, SyncEvent.TIMEOUT): SyncStatus.IDLE,
}


def transition(state: SyncStatus, event: SyncEvent) -> SyncStatus:
    try:
        return _TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(state, event) from None
