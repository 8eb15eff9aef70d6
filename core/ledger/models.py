#!/usr/bin/env python3
"""
Ledger Models - read-side views of interaction records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from database.models import InteractionRecord, InteractionType, InvitationResponse

# Status implied by the most recent interaction of a buyer
LEDGER_STATUS = {
    InteractionType.INTEREST.value: 'accepted',
    InteractionType.VIEW.value: 'pending',
    InteractionType.REJECTED.value: 'rejected',
    InteractionType.COMPLETED.value: 'completed',
}

# View records carry the response the buyer held when the view happened
_SETTLED_RESPONSES = (InvitationResponse.ACCEPTED.value, InvitationResponse.REJECTED.value)

# (description, colour) shown in the seller's recent activity feed
ACTION_DESCRIPTIONS = {
    InteractionType.INTEREST.value: ("Activated Deal", "green"),
    InteractionType.REJECTED.value: ("Rejected Deal", "red"),
    InteractionType.VIEW.value: ("Set as Pending", "yellow"),
}
DEFAULT_ACTION = ("Other Action", "gray")


def ledger_status(interaction_type: str, metadata: Optional[Dict[str, Any]] = None) -> str:
    """Status implied by one interaction; a view does not demote a settled buyer to pending."""
    status = (metadata or {}).get('status')
    if interaction_type == InteractionType.VIEW.value and status in _SETTLED_RESPONSES:
        return status
    return LEDGER_STATUS.get(interaction_type, 'pending')


@dataclass
class LedgerEntry:
    id: int
    listing_id: str
    buyer_id: Optional[str]
    interaction_type: str
    timestamp: datetime
    notes: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    listing_title: Optional[str] = None

    @property
    def action_description(self) -> str:
        return ACTION_DESCRIPTIONS.get(self.interaction_type, DEFAULT_ACTION)[0]

    @property
    def action_color(self) -> str:
        return ACTION_DESCRIPTIONS.get(self.interaction_type, DEFAULT_ACTION)[1]

    @classmethod
    def from_record(cls, record: InteractionRecord, listing_title: Optional[str] = None) -> "LedgerEntry":
        return cls(
            id=record.id,
            listing_id=record.listing_id,
            buyer_id=record.buyer_id,
            interaction_type=record.interaction_type,
            timestamp=record.timestamp,
            notes=record.notes,
            metadata=dict(record.event_metadata or {}),
            listing_title=listing_title,
        )


@dataclass
class LedgerSummary:
    listing_id: str
    counts: Dict[str, int] = field(default_factory=dict)
    distinct_buyers: Dict[str, int] = field(default_factory=dict)
    unique_buyers: int = 0

    @property
    def total(self) -> int:
        return sum(self.counts.values())


@dataclass
class BuyerInteractionSummary:
    buyer_id: str
    current_status: str
    last_interaction_at: datetime
    total_interactions: int
    recent: List[LedgerEntry] = field(default_factory=list)
