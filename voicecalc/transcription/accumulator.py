"""Transcript accumulator that decides when recognized text is committed.

Final segments commit immediately. Interim segments replace each other and
re-arm a short forced-commit timer; if no final segment arrives before it
fires, the latest interim text is committed anyway and the backend is asked
to discard its current utterance so recognition restarts with a fresh
window. Some backends never mark long continuous input as final, and this
is what keeps amounts flowing in that case.

Every committed text reaches the commit callback exactly once.
"""

import logging
from typing import Callable, Optional, Sequence

from ..models.transcription import TranscriptSegment
from ..scheduling import NamedTimer, Scheduler

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_DELAY_SECONDS = 0.6


class TranscriptAccumulator:
    """Buffers interim text and commits segments once they are done."""

    def __init__(self,
                 scheduler: Scheduler,
                 commit_callback: Callable[[str], None],
                 discard_callback: Optional[Callable[[], None]] = None,
                 commit_delay: float = DEFAULT_COMMIT_DELAY_SECONDS):
        """Initialize the accumulator.

        Args:
            scheduler: Scheduler for the forced-commit timer
            commit_callback: Called with each committed text
            discard_callback: Called after a forced commit to make the
                backend drop its current utterance
            commit_delay: Quiet period in seconds before interim text is
                force-committed
        """
        if commit_delay <= 0:
            raise ValueError(f"commit_delay must be positive, got {commit_delay}")
        self.commit_callback = commit_callback
        self.discard_callback = discard_callback
        self.commit_delay = commit_delay
        self.forced_commit_timer = NamedTimer("forced-commit", scheduler)

        self.pending_interim_text = ""
        # Text committed without a final segment; a late final repeating it is dropped.
        self.last_forced_text: Optional[str] = None
        self.commit_count = 0

    @property
    def has_pending(self) -> bool:
        return self.forced_commit_timer.active

    def on_result(self, segments: Sequence[TranscriptSegment], result_index: int = 0) -> None:
        """Handle a backend result event covering segments[result_index:]."""
        changed = list(segments[result_index:])
        interim_text = "".join(s.text for s in changed if not s.is_final)

        for segment in changed:
            if segment.is_final:
                self.on_segment(segment)
        if interim_text.strip():
            self.on_segment(TranscriptSegment(text=interim_text, is_final=False))

    def on_segment(self, segment: TranscriptSegment) -> None:
        text = segment.text.strip()

        if segment.is_final:
            self.forced_commit_timer.cancel()
            self.pending_interim_text = ""
            if self.last_forced_text is not None and text == self.last_forced_text:
                logger.info(f"Dropping final segment already force-committed: '{text}'")
                self.last_forced_text = None
                return
            self.last_forced_text = None
            self._commit(text, reason="final")
            return

        if not text:
            return
        if text == self.last_forced_text:
            logger.debug(f"Ignoring interim segment already force-committed: '{text}'")
            return
        self.last_forced_text = None
        self.pending_interim_text = text
        self.forced_commit_timer.arm(self.commit_delay, self._on_forced_commit)

    def flush(self) -> None:
        """Commit pending interim text now, e.g. when listening stops."""
        if not self.forced_commit_timer.cancel():
            return
        text = self._take_pending()
        self._commit(text, reason="flush")

    def reset(self) -> None:
        """Drop pending interim text without committing it."""
        self.forced_commit_timer.cancel()
        self.pending_interim_text = ""
        self.last_forced_text = None

    def _on_forced_commit(self) -> None:
        text = self._take_pending()
        self._commit(text, reason="forced")
        if self.discard_callback:
            self.discard_callback()

    def _take_pending(self) -> str:
        text = self.pending_interim_text
        self.pending_interim_text = ""
        self.last_forced_text = text or None
        return text

    def _commit(self, text: str, reason: str) -> None:
        if not text:
            return
        self.commit_count += 1
        logger.info(f"Committing transcript #{self.commit_count} ({reason}): '{text}'")
        self.commit_callback(text)
