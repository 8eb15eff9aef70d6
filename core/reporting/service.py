#!/usr/bin/env python3
"""
Reporting Service - seller-facing aggregation over listings and the ledger.

Reads never raise on inconsistent data. Disagreements between a
listing's membership sets and its invitation records are logged and
returned as a degraded result so the reports stay available while the
data is repaired.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Set

from core.config_loader import ReportingConfig
from core.consistency import find_consistency_issues
from core.criteria.store import CriteriaStore
from core.errors import ConsistencyIssue
from core.invitations.segmentation import classify
from core.ledger.service import LedgerService
from core.reporting.models import (
    BuyerStatusEntry, StatusSummary, SellerStatistics, EngagementDashboard,
    InteractionTypeStats, DailyEngagement, ListingEngagement, SOURCE_LEDGER,
)
from database.listing_store import ListingStore
from database.models import BuyerBucket, InteractionType, ListingStatus, utcnow

logger = logging.getLogger(__name__)

# Buyer-facing bucket -> seller-facing summary bucket
_SUMMARY_BUCKET = {
    BuyerBucket.ACTIVE: 'active',
    BuyerBucket.COMPLETED: 'active',
    BuyerBucket.PENDING: 'pending',
    BuyerBucket.REJECTED: 'rejected',
}

# Ledger-derived status -> summary bucket
_LEDGER_BUCKET = {
    'accepted': 'active',
    'completed': 'active',
    'pending': 'pending',
    'rejected': 'rejected',
}

BUYER_ACTION_TYPES = (InteractionType.INTEREST, InteractionType.REJECTED, InteractionType.VIEW)


class ReportingService:
    def __init__(
        self,
        store: ListingStore,
        ledger: LedgerService,
        criteria_store: CriteriaStore,
        config: Optional[ReportingConfig] = None
    ):
        self.store = store
        self.ledger = ledger
        self.criteria_store = criteria_store
        self.config = config or ReportingConfig()

    def _entry(self, buyer_id: str, status: str, invitation=None, source: Optional[str] = None) -> BuyerStatusEntry:
        entry = BuyerStatusEntry(buyer_id=buyer_id, status=status)
        if source:
            entry.source = source
        if invitation is not None:
            entry.response = invitation.response
            entry.decision_by = invitation.decision_by
            entry.invited_at = invitation.invited_at
            entry.responded_at = invitation.responded_at
            entry.notes = invitation.notes

        profile = self.criteria_store.find_profile(buyer_id)
        if profile is None:
            logger.warning(f"No criteria profile for buyer {buyer_id}; reporting as Unknown")
        else:
            entry.buyer_name = profile.buyer_name or 'Unknown'
            entry.buyer_email = profile.buyer_email
            entry.company_name = profile.company_name
        return entry

    def status_summary(self, listing_id: str) -> StatusSummary:
        """
        Group a listing's buyers into active, pending and rejected.

        Targeted buyers are bucketed exactly as the buyer-facing
        segmentation does (completed counts as active). Buyers that appear
        only in the ledger are added from their latest interaction and
        flagged as an issue.
        """
        listing = self.store.get(listing_id)
        issues: List[ConsistencyIssue] = list(find_consistency_issues(listing))
        summary = StatusSummary(listing_id=listing.id, listing_status=listing.status)

        seen: Set[str] = set()
        for buyer_id in listing.targeted_buyers or []:
            if buyer_id in seen:
                continue
            seen.add(buyer_id)
            bucket = _SUMMARY_BUCKET[classify(listing, buyer_id)]
            entry = self._entry(buyer_id, bucket, listing.invitations.get(buyer_id))
            getattr(summary, bucket).append(entry)

        for interaction in self.ledger.buyer_interactions(listing_id):
            if interaction.buyer_id in seen:
                continue
            seen.add(interaction.buyer_id)
            bucket = _LEDGER_BUCKET.get(interaction.current_status, 'pending')
            getattr(summary, bucket).append(self._entry(interaction.buyer_id, bucket, source=SOURCE_LEDGER))
            issues.append(ConsistencyIssue(
                listing.id, interaction.buyer_id, 'ledger_only',
                "buyer has ledger interactions but is not targeted"
            ))

        if issues:
            summary.degraded = True
            summary.issues = issues
            logger.warning(f"Status summary for listing {listing.id} is degraded: "
                           f"{len(issues)} consistency issue(s)")
        return summary

    def seller_statistics(self, seller_id: str) -> SellerStatistics:
        listings = self.store.list_by_seller(seller_id)
        stats = SellerStatistics(seller_id=seller_id, total_listings=len(listings))
        for listing in listings:
            if listing.status == ListingStatus.ACTIVE:
                stats.active_listings += 1
            elif listing.status == ListingStatus.COMPLETED:
                stats.completed_listings += 1
            elif listing.status == ListingStatus.DRAFT:
                stats.draft_listings += 1
            stats.total_interested += len(set(listing.interested_buyers or []))
        return stats

    def recent_buyer_actions(self, seller_id: str, limit: Optional[int] = None):
        """Latest buyer actions (activations, rejections, pendings) across the seller's listings."""
        return self.ledger.recent_for_seller(
            seller_id, limit or self.config.recent_actions_limit, BUYER_ACTION_TYPES
        )

    def engagement_dashboard(self, seller_id: str, now: Optional[datetime] = None) -> EngagementDashboard:
        """
        Aggregate the seller's ledger into totals, a daily series and top listings.

        Totals and per-listing figures cover the whole history; the daily
        series covers the last ``dashboard_window_days`` days, today included.
        """
        now = now or utcnow()
        listings = self.store.list_by_seller(seller_id)
        dashboard = EngagementDashboard(
            seller_id=seller_id,
            generated_at=now,
            total_listings=len(listings),
            active_listings=sum(1 for listing in listings if listing.status == ListingStatus.ACTIVE),
            completed_listings=sum(1 for listing in listings if listing.status == ListingStatus.COMPLETED),
        )

        per_listing: Dict[str, ListingEngagement] = {
            listing.id: ListingEngagement(listing_id=listing.id, title=listing.title, status=listing.status)
            for listing in listings
        }
        window_days = self.config.dashboard_window_days
        first_day = (now - timedelta(days=window_days - 1)).date()
        daily: Dict = {}
        for offset in range(window_days):
            day = first_day + timedelta(days=offset)
            daily[day] = DailyEngagement(day=day)

        buyers_by_type: Dict[str, Set[str]] = {t.value: set() for t in InteractionType}
        counts_by_type: Dict[str, int] = {t.value: 0 for t in InteractionType}
        all_buyers: Set[str] = set()

        for entry in self.ledger.for_seller(seller_id):
            itype = entry.interaction_type
            counts_by_type[itype] = counts_by_type.get(itype, 0) + 1
            if entry.buyer_id is not None:
                buyers_by_type.setdefault(itype, set()).add(entry.buyer_id)
                all_buyers.add(entry.buyer_id)

            engagement = per_listing.get(entry.listing_id)
            if engagement is not None:
                engagement.total_interactions += 1
                if itype == InteractionType.INTEREST:
                    engagement.activations += 1
                elif itype == InteractionType.REJECTED:
                    engagement.rejections += 1
                elif itype == InteractionType.VIEW:
                    engagement.views += 1

            bucket = daily.get(entry.timestamp.date())
            if bucket is not None and entry.timestamp <= now:
                if itype == InteractionType.INTEREST:
                    bucket.activations += 1
                elif itype == InteractionType.REJECTED:
                    bucket.rejections += 1
                elif itype == InteractionType.VIEW:
                    bucket.views += 1

        dashboard.by_type = {
            itype: InteractionTypeStats(count=counts_by_type[itype], unique_buyers=len(buyers_by_type.get(itype, ())))
            for itype in counts_by_type
        }
        dashboard.daily = list(daily.values())
        engaged = [e for e in per_listing.values() if e.total_interactions > 0]
        engaged.sort(key=lambda e: (-e.engagement_rate, -e.total_interactions, e.listing_id))
        dashboard.top_listings = engaged[:self.config.top_listings]

        dashboard.total_interactions = sum(counts_by_type.values())
        dashboard.total_activations = counts_by_type[InteractionType.INTEREST.value]
        dashboard.total_rejections = counts_by_type[InteractionType.REJECTED.value]
        dashboard.total_views = counts_by_type[InteractionType.VIEW.value]
        dashboard.unique_buyers = len(all_buyers)
        return dashboard
