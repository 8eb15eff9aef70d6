#!/usr/bin/env python3
"""
Ledger Service - queries over the append-only interaction ledger.

Writes happen only through the invitation service, inside the same
transaction as the state change they describe.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import sessionmaker

from core.ledger.models import LedgerEntry, LedgerSummary, BuyerInteractionSummary, ledger_status
from database.database import db_session_scope
from database.models import InteractionType
from database.uow import UnitOfWork

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(self, session_factory: sessionmaker, interactions_per_buyer: int = 5):
        self.session_factory = session_factory
        self.interactions_per_buyer = interactions_per_buyer

    def recent_for_seller(
        self,
        seller_id: str,
        limit: int = 20,
        interaction_types: Optional[Iterable[InteractionType]] = None
    ) -> List[LedgerEntry]:
        """Most recent records across all of the seller's listings, newest first."""
        with db_session_scope(self.session_factory) as session:
            uow = UnitOfWork.for_session(session)
            titles = {listing.id: listing.title for listing in uow.listings.list_by_seller(seller_id)}
            records = uow.interactions.recent_for_seller(seller_id, limit, interaction_types)
            return [LedgerEntry.from_record(r, titles.get(r.listing_id)) for r in records]

    def summary_for_listing(self, listing_id: str) -> LedgerSummary:
        with db_session_scope(self.session_factory) as session:
            uow = UnitOfWork.for_session(session)
            counts = {t.value: 0 for t in InteractionType}
            counts.update(uow.interactions.counts_by_type(listing_id))
            distinct = {t.value: 0 for t in InteractionType}
            distinct.update(uow.interactions.distinct_buyers_by_type(listing_id))
            return LedgerSummary(
                listing_id=listing_id,
                counts=counts,
                distinct_buyers=distinct,
                unique_buyers=uow.interactions.distinct_buyer_count(listing_id),
            )

    def current_status_from_ledger(self, listing_id: str, buyer_id: str) -> Optional[str]:
        """
        Status implied by the buyer's latest interaction on the listing.

        Returns:
            'accepted', 'pending', 'rejected' or 'completed', or None when
            the buyer has no interactions on the listing
        """
        with db_session_scope(self.session_factory) as session:
            record = UnitOfWork.for_session(session).interactions.latest_for_buyer(listing_id, buyer_id)
            if record is None:
                return None
            return ledger_status(record.interaction_type, record.event_metadata)

    def buyer_interactions(self, listing_id: str) -> List[BuyerInteractionSummary]:
        """Per-buyer interaction history for a listing, most recently active buyer first."""
        with db_session_scope(self.session_factory) as session:
            records = UnitOfWork.for_session(session).interactions.for_listing(listing_id)
            entries = [LedgerEntry.from_record(r) for r in records]

        by_buyer: Dict[str, List[LedgerEntry]] = {}
        for entry in entries:
            if entry.buyer_id is None:
                continue
            by_buyer.setdefault(entry.buyer_id, []).append(entry)

        summaries = []
        for buyer_id, buyer_entries in by_buyer.items():
            latest = buyer_entries[0]
            summaries.append(BuyerInteractionSummary(
                buyer_id=buyer_id,
                current_status=ledger_status(latest.interaction_type, latest.metadata),
                last_interaction_at=latest.timestamp,
                total_interactions=len(buyer_entries),
                recent=buyer_entries[:self.interactions_per_buyer],
            ))
        summaries.sort(key=lambda s: (s.last_interaction_at, s.buyer_id), reverse=True)
        return summaries

    def for_seller(self, seller_id: str, since: Optional[datetime] = None) -> List[LedgerEntry]:
        """Every record for the seller's listings since ``since``, oldest first."""
        with db_session_scope(self.session_factory) as session:
            records = UnitOfWork.for_session(session).interactions.for_seller_since(seller_id, since)
            return [LedgerEntry.from_record(r) for r in records]
