"""Session controller that keeps the speech backend continuously listening.

Backends end recognition sessions on their own (silence, utterance
limits, our own aborts). While the user wants to listen, every such end is
answered with a debounced restart. An inactivity timer stops listening
after ``auto_stop_minutes`` without recognized speech.

Transitions::

    IDLE       --start_requested-->     STARTING   (backend.start after settle delay)
    STARTING   --backend_started-->     LISTENING  (inactivity timer armed)
    LISTENING  --backend_ended-->       SUSPENDED
    STARTING   --backend_ended-->       SUSPENDED
    SUSPENDED  --restart_due-->         STARTING   (backend.start after restart delay)
    any active --stop_requested-->      IDLE
    LISTENING  --inactivity_timeout-->  IDLE
    any active --fatal_error-->         IDLE       (no further restarts)
"""

import logging
from typing import Callable, Optional

from ..models.session import SessionSnapshot, SessionState, SessionTrigger
from ..scheduling import NamedTimer, Scheduler
from ..transcription.base import (
    BENIGN_ERRORS,
    FATAL_ERRORS,
    AbstractSpeechBackend,
    SpeechBackendError,
)

logger = logging.getLogger(__name__)

_ACTIVE_STATES = (SessionState.STARTING, SessionState.LISTENING, SessionState.SUSPENDED)

_TRANSITIONS = {
    (SessionState.IDLE, SessionTrigger.START_REQUESTED): SessionState.STARTING,
    (SessionState.STARTING, SessionTrigger.BACKEND_STARTED): SessionState.LISTENING,
    (SessionState.LISTENING, SessionTrigger.BACKEND_ENDED): SessionState.SUSPENDED,
    (SessionState.STARTING, SessionTrigger.BACKEND_ENDED): SessionState.SUSPENDED,
    (SessionState.SUSPENDED, SessionTrigger.RESTART_DUE): SessionState.STARTING,
    (SessionState.LISTENING, SessionTrigger.INACTIVITY_TIMEOUT): SessionState.IDLE,
}
for _state in _ACTIVE_STATES:
    _TRANSITIONS[(_state, SessionTrigger.STOP_REQUESTED)] = SessionState.IDLE
    _TRANSITIONS[(_state, SessionTrigger.FATAL_ERROR)] = SessionState.IDLE


def validate_auto_stop_minutes(minutes) -> int:
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise ValueError(f"auto_stop_minutes must be a positive integer, got {minutes!r}")
    return minutes


class SessionController:
    """Drives the start/restart/stop lifecycle of a speech backend."""

    def __init__(self,
                 backend: AbstractSpeechBackend,
                 scheduler: Scheduler,
                 auto_stop_minutes: int = 5,
                 settle_delay: float = 0.3,
                 restart_delay: float = 0.1,
                 max_restart_delay: float = 5.0,
                 on_state_change: Optional[Callable[[SessionSnapshot], None]] = None,
                 on_failure: Optional[Callable[[str, str], None]] = None,
                 on_auto_stop: Optional[Callable[[], None]] = None):
        """Initialize session controller.

        Args:
            backend: Speech backend to keep running
            scheduler: Scheduler for the restart and inactivity timers
            auto_stop_minutes: Minutes without speech before listening stops
            settle_delay: Seconds to wait before the first start so a
                previous session can tear down
            restart_delay: Seconds between a backend end and the restart
            max_restart_delay: Ceiling for backoff after failed starts
            on_state_change: Called with every new snapshot
            on_failure: Called with (code, message) on fatal errors
            on_auto_stop: Called before an inactivity timeout stops the
                session, while it is still listening
        """
        self.backend = backend
        self.settle_delay = settle_delay
        self.restart_delay = restart_delay
        self.max_restart_delay = max_restart_delay
        self.on_state_change = on_state_change
        self.on_failure = on_failure
        self.on_auto_stop = on_auto_stop

        self.snapshot = SessionSnapshot(
            auto_stop_minutes=validate_auto_stop_minutes(auto_stop_minutes))
        self.restart_timer = NamedTimer("restart-settle", scheduler)
        self.inactivity_timer = NamedTimer("inactivity", scheduler)
        self.failed_starts = 0

    @property
    def state(self) -> SessionState:
        return self.snapshot.state

    @property
    def is_listening(self) -> bool:
        return self.snapshot.is_listening

    # User actions

    def request_start(self) -> bool:
        """Start listening. Returns False if a session is already active."""
        if not self._transition(SessionTrigger.START_REQUESTED, intends_to_listen=True):
            logger.debug(f"Start ignored in state {self.state.value}")
            return False
        self.failed_starts = 0
        self.restart_timer.arm(self.settle_delay, self._start_backend)
        return True

    def request_stop(self) -> bool:
        """Stop listening. Returns False if already idle."""
        if not self._go_idle(SessionTrigger.STOP_REQUESTED):
            return False
        self.backend.stop()
        return True

    def set_auto_stop_minutes(self, minutes: int) -> None:
        minutes = validate_auto_stop_minutes(minutes)
        self.snapshot = self.snapshot.evolve(auto_stop_minutes=minutes)
        logger.info(f"Auto-stop set to {minutes} minute(s)")
        if self.state is SessionState.LISTENING:
            self._arm_inactivity()
        self._notify()

    # Backend events

    def on_backend_start(self) -> None:
        if not self.snapshot.intends_to_listen:
            logger.info("Backend started after stop was requested; stopping it")
            self.backend.stop()
            return
        if self._transition(SessionTrigger.BACKEND_STARTED):
            self.failed_starts = 0
            self._arm_inactivity()

    def on_backend_end(self) -> None:
        if not self.snapshot.intends_to_listen:
            logger.debug("Backend ended after stop; no restart")
            return
        if self.state not in (SessionState.STARTING, SessionState.LISTENING):
            return
        self.inactivity_timer.cancel()
        self.restart_timer.cancel()
        self._transition(SessionTrigger.BACKEND_ENDED)
        logger.info("Backend ended unexpectedly; restarting")
        self._transition(SessionTrigger.RESTART_DUE)
        self.restart_timer.arm(self.restart_delay, self._start_backend)

    def on_backend_error(self, code: str) -> None:
        if code in FATAL_ERRORS:
            logger.error(f"Fatal speech backend error: {code}")
            if self._go_idle(SessionTrigger.FATAL_ERROR):
                self.backend.abort()
            if self.on_failure:
                self.on_failure(code, f"Speech recognition is not permitted ({code})")
        elif code in BENIGN_ERRORS:
            logger.debug(f"Ignoring benign speech backend error: {code}")
        else:
            logger.warning(f"Unknown speech backend error '{code}'; relying on restart")

    def on_activity(self) -> None:
        """Recognized speech keeps the session alive."""
        if self.state is SessionState.LISTENING:
            self._arm_inactivity()

    # Internals

    def _start_backend(self) -> None:
        if self.state is not SessionState.STARTING:
            return
        try:
            self.backend.start()
        except SpeechBackendError as e:
            self.failed_starts += 1
            delay = min(self.restart_delay * (2 ** self.failed_starts), self.max_restart_delay)
            logger.warning(f"Backend start failed ({e}); retry {self.failed_starts} in {delay:.2f}s")
            self.restart_timer.arm(delay, self._start_backend)

    def _arm_inactivity(self) -> None:
        self.inactivity_timer.arm(self.snapshot.auto_stop_minutes * 60, self._on_inactivity)

    def _on_inactivity(self) -> None:
        logger.info(f"No speech for {self.snapshot.auto_stop_minutes} minute(s); stopping")
        if self.on_auto_stop:
            self.on_auto_stop()
        if self._go_idle(SessionTrigger.INACTIVITY_TIMEOUT):
            self.backend.stop()

    def _go_idle(self, trigger: SessionTrigger) -> bool:
        if self.state is SessionState.IDLE:
            return False
        self.restart_timer.cancel()
        self.inactivity_timer.cancel()
        return self._transition(trigger, intends_to_listen=False)

    def _transition(self, trigger: SessionTrigger, **changes) -> bool:
        next_state = _TRANSITIONS.get((self.state, trigger))
        if next_state is None:
            logger.debug(f"No transition from {self.state.value} on {trigger.value}")
            return False
        previous = self.state
        self.snapshot = self.snapshot.evolve(state=next_state, **changes)
        logger.info(f"Session {previous.value} -> {next_state.value} ({trigger.value})")
        self._notify()
        return True

    def _notify(self) -> None:
        if self.on_state_change:
            self.on_state_change(self.snapshot)
