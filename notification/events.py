#!/usr/bin/env python3
"""
Domain events emitted by the invitation state machine.

Events are plain dataclasses built inside the transaction and published
only after it commits, so subscribers never observe a rolled-back change.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional


@dataclass
class DomainEvent:
    listing_id: str
    occurred_at: datetime

    event_type: ClassVar[str] = "domain_event"

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload['occurred_at'] = self.occurred_at.isoformat()
        payload['event_type'] = self.event_type
        return payload


@dataclass
class BuyerTargeted(DomainEvent):
    buyer_id: str
    seller_id: str

    event_type: ClassVar[str] = "buyer_targeted"


@dataclass
class AccessRequested(DomainEvent):
    buyer_id: str
    seller_id: str

    event_type: ClassVar[str] = "access_requested"


@dataclass
class BuyerResponded(DomainEvent):
    buyer_id: str
    seller_id: str
    previous_response: Optional[str]
    response: str
    decision_by: str

    event_type: ClassVar[str] = "buyer_responded"


@dataclass
class ListingCompleted(DomainEvent):
    seller_id: str
    final_sale_price: Optional[float] = None
    winning_buyer_id: Optional[str] = None

    event_type: ClassVar[str] = "listing_completed"
