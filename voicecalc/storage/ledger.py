"""Ordered, append-only ledger of parsed amounts."""

import logging
from typing import Iterator, List, Optional, Tuple

from ..models.entry import Entry

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for ledger errors."""


class EmptyLedgerError(LedgerError):
    """Raised when removing from a ledger that has no entries."""


class EntryLedger:
    """Entries in spoken order. Pure data structure, no I/O."""

    def __init__(self):
        self._entries: List[Entry] = []

    def append(self, value: float) -> Entry:
        """Create an entry for value and append it at the end.

        Args:
            value: Finite, non-zero parsed amount

        Returns:
            The new Entry
        """
        entry = Entry(value=value)
        self._entries.append(entry)
        logger.debug(f"Appended entry {entry.entry_id}: {value}")
        return entry

    def remove_last(self) -> Entry:
        """Remove and return the most recent entry.

        Raises:
            EmptyLedgerError: If the ledger has no entries
        """
        if not self._entries:
            raise EmptyLedgerError("Nothing to delete: ledger is empty")
        entry = self._entries.pop()
        logger.debug(f"Removed last entry {entry.entry_id}: {entry.value}")
        return entry

    def remove_by_id(self, entry_id: str) -> Optional[Entry]:
        """Remove the entry with entry_id; no-op returning None if absent."""
        for index, entry in enumerate(self._entries):
            if entry.entry_id == entry_id:
                del self._entries[index]
                logger.debug(f"Removed entry {entry_id}: {entry.value}")
                return entry
        return None

    def clear(self) -> int:
        """Remove all entries. Returns how many were removed."""
        removed = len(self._entries)
        self._entries.clear()
        return removed

    def sum(self) -> float:
        return sum(entry.value for entry in self._entries)

    def count(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(tuple(self._entries))
