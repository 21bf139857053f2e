"""Session-related data models."""

from dataclasses import dataclass, replace
from enum import Enum


class SessionState(Enum):
    """Listening state of the recognition session."""
    IDLE = "idle"
    STARTING = "starting"
    LISTENING = "listening"
    SUSPENDED = "suspended"


class SessionTrigger(Enum):
    """Inputs that drive the session state machine."""
    START_REQUESTED = "start_requested"
    BACKEND_STARTED = "backend_started"
    BACKEND_ENDED = "backend_ended"
    RESTART_DUE = "restart_due"
    STOP_REQUESTED = "stop_requested"
    INACTIVITY_TIMEOUT = "inactivity_timeout"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session; each transition produces a new one."""
    state: SessionState = SessionState.IDLE
    auto_stop_minutes: int = 5
    intends_to_listen: bool = False

    @property
    def is_listening(self) -> bool:
        return self.state is SessionState.LISTENING

    def evolve(self, **changes) -> "SessionSnapshot":
        return replace(self, **changes)
