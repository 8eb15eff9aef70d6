import logging
from datetime import datetime
from typing import List, Optional, Dict, Iterable

from sqlalchemy import select, func

from database.models import InteractionRecord, InteractionType
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class InteractionRepository(BaseRepository):
    """Append-only access to the interaction ledger."""

    def append(self, record: InteractionRecord) -> InteractionRecord:
        self.db.add(record)
        return record

    def recent_for_seller(
        self,
        seller_id: str,
        limit: int = 20,
        interaction_types: Optional[Iterable[InteractionType]] = None
    ) -> List[InteractionRecord]:
        stmt = select(InteractionRecord).where(InteractionRecord.seller_id == seller_id)
        if interaction_types is not None:
            stmt = stmt.where(InteractionRecord.interaction_type.in_([t.value for t in interaction_types]))
        stmt = stmt.order_by(InteractionRecord.timestamp.desc(), InteractionRecord.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def for_listing(self, listing_id: str) -> List[InteractionRecord]:
        stmt = (
            select(InteractionRecord)
            .where(InteractionRecord.listing_id == listing_id)
            .order_by(InteractionRecord.timestamp.desc(), InteractionRecord.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def for_listing_and_buyer(self, listing_id: str, buyer_id: str) -> List[InteractionRecord]:
        stmt = (
            select(InteractionRecord)
            .where(
                InteractionRecord.listing_id == listing_id,
                InteractionRecord.buyer_id == buyer_id
            )
            .order_by(InteractionRecord.timestamp.desc(), InteractionRecord.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def latest_for_buyer(self, listing_id: str, buyer_id: str) -> Optional[InteractionRecord]:
        stmt = (
            select(InteractionRecord)
            .where(
                InteractionRecord.listing_id == listing_id,
                InteractionRecord.buyer_id == buyer_id
            )
            .order_by(InteractionRecord.timestamp.desc(), InteractionRecord.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def counts_by_type(self, listing_id: str) -> Dict[str, int]:
        stmt = (
            select(InteractionRecord.interaction_type, func.count())
            .where(InteractionRecord.listing_id == listing_id)
            .group_by(InteractionRecord.interaction_type)
        )
        return {itype: count for itype, count in self.db.execute(stmt).all()}

    def distinct_buyers_by_type(self, listing_id: str) -> Dict[str, int]:
        stmt = (
            select(
                InteractionRecord.interaction_type,
                func.count(func.distinct(InteractionRecord.buyer_id))
            )
            .where(InteractionRecord.listing_id == listing_id)
            .group_by(InteractionRecord.interaction_type)
        )
        return {itype: count for itype, count in self.db.execute(stmt).all()}

    def distinct_buyer_count(self, listing_id: str) -> int:
        stmt = (
            select(func.count(func.distinct(InteractionRecord.buyer_id)))
            .where(InteractionRecord.listing_id == listing_id)
        )
        return self.db.execute(stmt).scalar_one()

    def for_seller_since(self, seller_id: str, since: Optional[datetime] = None) -> List[InteractionRecord]:
        stmt = select(InteractionRecord).where(InteractionRecord.seller_id == seller_id)
        if since is not None:
            stmt = stmt.where(InteractionRecord.timestamp >= since)
        stmt = stmt.order_by(InteractionRecord.timestamp, InteractionRecord.id)
        return list(self.db.execute(stmt).scalars().all())
