#!/usr/bin/env python3
"""
Reporting Models - seller-facing summaries.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from core.errors import ConsistencyIssue

SOURCE_INVITATION = 'invitation'
SOURCE_LEDGER = 'ledger'


@dataclass
class BuyerStatusEntry:
    buyer_id: str
    status: str  # active|pending|rejected
    response: Optional[str] = None
    decision_by: Optional[str] = None
    invited_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    notes: Optional[str] = None
    buyer_name: str = 'Unknown'
    buyer_email: Optional[str] = None
    company_name: Optional[str] = None
    source: str = SOURCE_INVITATION


@dataclass
class StatusSummary:
    """
    Buyers of one listing grouped into active, pending and rejected.

    ``degraded`` is True when the listing's stored views disagree; the
    buckets are then a best-effort reading and ``issues`` says why.
    """
    listing_id: str
    listing_status: str
    active: List[BuyerStatusEntry] = field(default_factory=list)
    pending: List[BuyerStatusEntry] = field(default_factory=list)
    rejected: List[BuyerStatusEntry] = field(default_factory=list)
    degraded: bool = False
    issues: List[ConsistencyIssue] = field(default_factory=list)

    @property
    def counts(self) -> Dict[str, int]:
        return {
            'active': len(self.active),
            'pending': len(self.pending),
            'rejected': len(self.rejected),
        }

    def bucket_of(self, buyer_id: str) -> Optional[str]:
        for name in ('active', 'pending', 'rejected'):
            if any(entry.buyer_id == buyer_id for entry in getattr(self, name)):
                return name
        return None


@dataclass
class SellerStatistics:
    seller_id: str
    total_listings: int = 0
    active_listings: int = 0
    completed_listings: int = 0
    draft_listings: int = 0
    total_interested: int = 0


@dataclass
class InteractionTypeStats:
    count: int = 0
    unique_buyers: int = 0


@dataclass
class DailyEngagement:
    day: date
    activations: int = 0
    rejections: int = 0
    views: int = 0


@dataclass
class ListingEngagement:
    listing_id: str
    title: str
    status: str
    total_interactions: int = 0
    activations: int = 0
    rejections: int = 0
    views: int = 0

    @property
    def engagement_rate(self) -> float:
        """Activations as a fraction of all interactions (0.0 when none)."""
        if not self.total_interactions:
            return 0.0
        return self.activations / self.total_interactions


@dataclass
class EngagementDashboard:
    seller_id: str
    generated_at: datetime
    total_listings: int = 0
    active_listings: int = 0
    completed_listings: int = 0
    by_type: Dict[str, InteractionTypeStats] = field(default_factory=dict)
    daily: List[DailyEngagement] = field(default_factory=list)
    top_listings: List[ListingEngagement] = field(default_factory=list)
    total_interactions: int = 0
    total_activations: int = 0
    total_rejections: int = 0
    total_views: int = 0
    unique_buyers: int = 0
