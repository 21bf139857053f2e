"""Ledger entry data model."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


def new_entry_id() -> str:
    """Generate a unique opaque entry identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Entry:
    """One parsed amount in the ledger. Never mutated once created."""
    value: float
    entry_id: str = field(default_factory=new_entry_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.entry_id,
            "value": self.value,
            "created_at": self.created_at.isoformat(),
        }
