"""Storage layer for voicecalc."""

from .ledger import EntryLedger, LedgerError, EmptyLedgerError

__all__ = [
    "EntryLedger",
    "LedgerError",
    "EmptyLedgerError",
]
