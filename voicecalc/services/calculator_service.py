"""Voice calculator service wiring backend, accumulator, pipeline and ledger."""

import logging
from typing import Optional, Sequence, Tuple

from pubsub import pub

from ..config import VoiceCalcConfig
from ..models.entry import Entry
from ..models.events import (
    TOPIC_FEEDBACK,
    TOPIC_LEDGER_CHANGED,
    TOPIC_SESSION_FAILURE,
    TOPIC_SESSION_STATE,
    TOPIC_SUMMARY,
    FeedbackEvent,
    LedgerChangedEvent,
    LedgerSummary,
    SessionFailureEvent,
    define_topics,
)
from ..models.session import SessionSnapshot, SessionState
from ..models.transcription import TranscriptSegment
from ..numerals import Command, CommandDetector, ExtractionPipeline, MultiplierExpander, NumeralParser
from ..numerals.pipeline import ExtractionOutcome
from ..scheduling import Scheduler
from ..storage.ledger import EmptyLedgerError, EntryLedger
from ..transcription.accumulator import TranscriptAccumulator
from ..transcription.base import AbstractSpeechBackend, SpeechEventHandler
from .session_controller import SessionController

logger = logging.getLogger(__name__)


def format_amount(value: float) -> str:
    """Thousands-separated amount without a trailing .0."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


class VoiceCalculatorService(SpeechEventHandler):
    """Application facade for the presentation layer.

    Receives the backend's events, commits transcripts through the
    extraction pipeline into the ledger, and publishes ledger, summary,
    feedback and session events on pub/sub topics.
    """

    def __init__(self,
                 backend: AbstractSpeechBackend,
                 scheduler: Scheduler,
                 config: Optional[VoiceCalcConfig] = None,
                 ledger: Optional[EntryLedger] = None):
        """Initialize the service.

        Args:
            backend: Speech backend; this service binds itself as its handler
            scheduler: Scheduler driving all session timers
            config: Application configuration (defaults when None)
            ledger: Existing ledger to keep adding to
        """
        self.config = config or VoiceCalcConfig()
        define_topics()

        self.ledger = ledger if ledger is not None else EntryLedger()
        parser = NumeralParser()
        self.pipeline = ExtractionPipeline(
            detector=CommandDetector(
                delete_keywords=self.config.get('commands.delete_last'),
                summary_keywords=self.config.get('commands.show_summary'),
            ),
            expander=MultiplierExpander(parser, self.config.get('multiplier.max_quantity', 50)),
            parser=parser,
        )

        self.backend = backend
        self.backend.bind(self)
        self.accumulator = TranscriptAccumulator(
            scheduler,
            commit_callback=self._on_commit,
            discard_callback=self.backend.abort,
            commit_delay=self.config.get_commit_delay(),
        )
        self.session = SessionController(
            backend,
            scheduler,
            auto_stop_minutes=self.config.get_auto_stop_minutes(),
            settle_delay=self.config.get('session.settle_delay_seconds', 0.3),
            restart_delay=self.config.get('session.restart_delay_seconds', 0.1),
            max_restart_delay=self.config.get('session.max_restart_delay_seconds', 5.0),
            on_state_change=self._publish_state,
            on_failure=self._on_failure,
            on_auto_stop=self.accumulator.flush,
        )
        self.last_failure: Optional[SessionFailureEvent] = None
        logger.info("VoiceCalculatorService initialized")

    # Read access

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self.ledger.entries

    def count(self) -> int:
        return self.ledger.count()

    def total(self) -> float:
        return self.ledger.sum()

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def is_listening(self) -> bool:
        return self.session.is_listening

    # User actions

    def start(self) -> bool:
        self.last_failure = None
        return self.session.request_start()

    def stop(self) -> bool:
        self.accumulator.flush()
        return self.session.request_stop()

    def delete_last(self) -> Optional[Entry]:
        try:
            entry = self.ledger.remove_last()
        except EmptyLedgerError:
            logger.info("Delete requested on empty ledger")
            self._feedback("沒有資料可刪除", level="warning")
            return None
        self._publish_ledger("remove")
        self._feedback(f"已刪除 {format_amount(entry.value)}")
        return entry

    def delete_by_id(self, entry_id: str) -> Optional[Entry]:
        entry = self.ledger.remove_by_id(entry_id)
        if entry is not None:
            self._publish_ledger("remove")
        return entry

    def clear(self) -> int:
        removed = self.ledger.clear()
        logger.info(f"Cleared {removed} entries")
        self._publish_ledger("clear")
        return removed

    def show_summary(self) -> LedgerSummary:
        summary = LedgerSummary(count=self.ledger.count(), total=self.ledger.sum())
        logger.info(f"Summary: {summary.count} entries, total {summary.total}")
        pub.sendMessage(TOPIC_SUMMARY, event=summary)
        return summary

    def set_auto_stop_minutes(self, minutes: int) -> None:
        self.session.set_auto_stop_minutes(minutes)
        self.config.set('session.auto_stop_minutes', minutes)

    # Speech backend events

    def on_start(self) -> None:
        self.session.on_backend_start()

    def on_end(self) -> None:
        self.session.on_backend_end()

    def on_result(self, segments: Sequence[TranscriptSegment], result_index: int) -> None:
        self.session.on_activity()
        self.accumulator.on_result(segments, result_index)

    def on_error(self, code: str) -> None:
        self.session.on_backend_error(code)

    # Internals

    def _on_commit(self, text: str) -> None:
        try:
            outcome = self.pipeline.process(text)
        except Exception as e:
            logger.error(f"Failed to process transcript '{text}': {e}", exc_info=True)
            return
        self._apply(outcome)

    def _apply(self, outcome: ExtractionOutcome) -> None:
        if outcome.command is Command.DELETE_LAST:
            self.delete_last()
        elif outcome.command is Command.SHOW_SUMMARY:
            self.show_summary()
        elif outcome.values:
            for value in outcome.values:
                self.ledger.append(value)
            self._publish_ledger("append")

    def _on_failure(self, code: str, message: str) -> None:
        self.accumulator.reset()
        self.last_failure = SessionFailureEvent(code=code, message=message)
        pub.sendMessage(TOPIC_SESSION_FAILURE, event=self.last_failure)
        self._feedback(message, level="error")

    def _publish_state(self, snapshot: SessionSnapshot) -> None:
        pub.sendMessage(TOPIC_SESSION_STATE, event=snapshot)

    def _publish_ledger(self, action: str) -> None:
        event = LedgerChangedEvent(
            action=action,
            entries=self.ledger.entries,
            count=self.ledger.count(),
            total=self.ledger.sum(),
        )
        pub.sendMessage(TOPIC_LEDGER_CHANGED, event=event)

    def _feedback(self, message: str, level: str = "info") -> None:
        pub.sendMessage(TOPIC_FEEDBACK, event=FeedbackEvent(message=message, level=level))
