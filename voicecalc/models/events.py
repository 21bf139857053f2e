"""Event models and topics for pub/sub notifications.

Every topic carries exactly one ``event`` keyword argument. Topics are
declared up front by :func:`define_topics` so that their accepted
arguments do not depend on who subscribes or publishes first.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

from pubsub import pub

from .entry import Entry

TOPIC_LEDGER_CHANGED = "ledger.changed"
TOPIC_SUMMARY = "calculator.summary"
TOPIC_FEEDBACK = "calculator.feedback"
TOPIC_SESSION_STATE = "session.state"
TOPIC_SESSION_FAILURE = "session.failure"

ALL_TOPICS = (
    TOPIC_LEDGER_CHANGED,
    TOPIC_SUMMARY,
    TOPIC_FEEDBACK,
    TOPIC_SESSION_STATE,
    TOPIC_SESSION_FAILURE,
)


@dataclass
class LedgerChangedEvent:
    """Ledger contents after an append, remove or clear."""
    action: str  # "append" | "remove" | "clear"
    entries: Tuple[Entry, ...]
    count: int
    total: float
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class LedgerSummary:
    """Count and total shown when the user asks for a summary."""
    count: int
    total: float
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class FeedbackEvent:
    """Short user-facing message, e.g. what was just deleted."""
    message: str
    level: str = "info"  # "info" | "warning" | "error"
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class SessionFailureEvent:
    """Terminal session failure such as a denied microphone permission."""
    code: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)


def _topic_prototype(event):
    pass


def define_topics() -> None:
    """Declare all voicecalc topics with their ``event`` argument."""
    topic_mgr = pub.getDefaultTopicMgr()
    for topic in ALL_TOPICS:
        topic_mgr.getOrCreateTopic(topic, _topic_prototype)
