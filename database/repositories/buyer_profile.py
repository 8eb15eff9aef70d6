import logging
from typing import Optional, Dict, Any, Iterator

from sqlalchemy import select

from database.models import BuyerProfileRecord, utcnow
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class BuyerProfileRepository(BaseRepository):
    def get(self, buyer_id: str) -> Optional[BuyerProfileRecord]:
        stmt = select(BuyerProfileRecord).where(BuyerProfileRecord.buyer_id == buyer_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert(self, buyer_id: str, payload: Dict[str, Any]) -> BuyerProfileRecord:
        record = self.get(buyer_id)
        if record is None:
            record = BuyerProfileRecord(buyer_id=buyer_id, payload=payload)
            self.db.add(record)
        else:
            record.payload = payload
            record.updated_at = utcnow()
        return record

    def iter_all(self, batch_size: int = 500) -> Iterator[BuyerProfileRecord]:
        stmt = (
            select(BuyerProfileRecord)
            .order_by(BuyerProfileRecord.buyer_id)
            .execution_options(yield_per=batch_size)
        )
        for record in self.db.execute(stmt).scalars():
            yield record
