"""Data models for the voicecalc application."""

from .entry import Entry
from .transcription import TranscriptSegment
from .session import SessionState, SessionTrigger, SessionSnapshot
from .events import (
    LedgerChangedEvent,
    LedgerSummary,
    FeedbackEvent,
    SessionFailureEvent,
    define_topics,
)

__all__ = [
    "Entry",
    "TranscriptSegment",
    "SessionState",
    "SessionTrigger",
    "SessionSnapshot",
    # Pub/sub payloads
    "LedgerChangedEvent",
    "LedgerSummary",
    "FeedbackEvent",
    "SessionFailureEvent",
    "define_topics",
]
