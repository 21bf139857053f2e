"""Detection of spoken commands inside a committed transcript."""

import logging
from enum import Enum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class Command(Enum):
    DELETE_LAST = "delete_last"
    SHOW_SUMMARY = "show_summary"


DEFAULT_DELETE_KEYWORDS = ("刪除", "delete")
DEFAULT_SUMMARY_KEYWORDS = ("總共", "多少", "結算", "買單")


class CommandDetector:
    """Substring match against a fixed keyword vocabulary.

    Latin keywords match case-insensitively. Delete-last is checked before
    show-summary.
    """

    def __init__(self,
                 delete_keywords: Iterable[str] = DEFAULT_DELETE_KEYWORDS,
                 summary_keywords: Iterable[str] = DEFAULT_SUMMARY_KEYWORDS):
        self.vocabulary = (
            (Command.DELETE_LAST, tuple(k.lower() for k in delete_keywords)),
            (Command.SHOW_SUMMARY, tuple(k.lower() for k in summary_keywords)),
        )

    def detect(self, text: str) -> Optional[Command]:
        folded = text.lower()
        for command, keywords in self.vocabulary:
            for keyword in keywords:
                if keyword and keyword in folded:
                    logger.debug(f"Matched command {command.name} on keyword '{keyword}'")
                    return command
        return None
