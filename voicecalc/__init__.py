"""Voice calculator: spoken amounts in, running ledger out."""

__version__ = "0.1.0"
