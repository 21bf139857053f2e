"""Console presenter that renders calculator events with rich."""

import logging
from typing import Optional, Sequence

from pubsub import pub
from rich.console import Console
from rich.table import Table

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
from ..services.calculator_service import format_amount

logger = logging.getLogger(__name__)

_STATE_LABELS = {
    SessionState.IDLE: ("⏹️  點擊麥克風", "yellow"),
    SessionState.STARTING: ("⏳ 啟動中...", "blue"),
    SessionState.LISTENING: ("🎙️  聆聽中...", "bold green"),
    SessionState.SUSPENDED: ("🔄 重新連線...", "blue"),
}

_FEEDBACK_STYLES = {
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
}


class ConsolePresenter:
    """Subscribes to calculator topics and prints them."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._last_state: Optional[SessionState] = None
        self._subscribed = False

    def subscribe(self) -> None:
        define_topics()
        pub.subscribe(self.on_ledger_changed, TOPIC_LEDGER_CHANGED)
        pub.subscribe(self.on_summary, TOPIC_SUMMARY)
        pub.subscribe(self.on_feedback, TOPIC_FEEDBACK)
        pub.subscribe(self.on_session_state, TOPIC_SESSION_STATE)
        pub.subscribe(self.on_failure, TOPIC_SESSION_FAILURE)
        self._subscribed = True

    def unsubscribe(self) -> None:
        if not self._subscribed:
            return
        try:
            pub.unsubscribe(self.on_ledger_changed, TOPIC_LEDGER_CHANGED)
            pub.unsubscribe(self.on_summary, TOPIC_SUMMARY)
            pub.unsubscribe(self.on_feedback, TOPIC_FEEDBACK)
            pub.unsubscribe(self.on_session_state, TOPIC_SESSION_STATE)
            pub.unsubscribe(self.on_failure, TOPIC_SESSION_FAILURE)
        except Exception as e:
            logger.warning(f"Error during unsubscribe: {e}")
        self._subscribed = False

    def on_ledger_changed(self, event: LedgerChangedEvent) -> None:
        if event.action == "append":
            self.console.print(f"➕ {format_amount(event.entries[-1].value)}", style="green")
        self.console.print(f"總計 ({event.count} 筆): {format_amount(event.total)}", style="bold")

    def on_summary(self, event: LedgerSummary) -> None:
        self.console.print(f"\n🧾 共 {event.count} 筆，總計 {format_amount(event.total)}\n",
                           style="bold magenta")

    def on_feedback(self, event: FeedbackEvent) -> None:
        self.console.print(event.message, style=_FEEDBACK_STYLES.get(event.level, "cyan"))

    def on_session_state(self, event: SessionSnapshot) -> None:
        # Restart cycles are invisible unless they settle somewhere new.
        if event.state in (SessionState.STARTING, SessionState.SUSPENDED) and self._last_state is not SessionState.IDLE:
            return
        if event.state is self._last_state:
            return
        self._last_state = event.state
        label, style = _STATE_LABELS[event.state]
        self.console.print(label, style=style)

    def on_failure(self, event: SessionFailureEvent) -> None:
        self.console.print(f"❌ {event.message}", style="bold red")

    def render_ledger(self, entries: Sequence[Entry]) -> Table:
        table = Table(title="帳目")
        table.add_column("#", justify="right", style="dim")
        table.add_column("金額", justify="right")
        for index, entry in enumerate(entries, 1):
            table.add_row(str(index), format_amount(entry.value))
        total = sum(entry.value for entry in entries)
        table.add_section()
        table.add_row(f"{len(entries)} 筆", format_amount(total), style="bold")
        return table

    def print_ledger(self, entries: Sequence[Entry]) -> None:
        self.console.print(self.render_ledger(entries))
