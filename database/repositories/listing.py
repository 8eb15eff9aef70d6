import logging
from typing import List, Optional, Iterable

from sqlalchemy import select

from core.errors import ListingNotFoundException
from database.models import Listing, ListingInvitation, ListingStatus
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ListingRepository(BaseRepository):
    def add(self, listing: Listing) -> Listing:
        self.db.add(listing)
        self.db.flush()
        return listing

    def find_by_id(self, listing_id: str, for_update: bool = False) -> Optional[Listing]:
        stmt = select(Listing).where(Listing.id == listing_id)
        if for_update:
            # Ignored by dialects without row locks (SQLite)
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_id(self, listing_id: str, for_update: bool = False) -> Listing:
        listing = self.find_by_id(listing_id, for_update=for_update)
        if listing is None:
            raise ListingNotFoundException(listing_id)
        return listing

    def list_by_seller(
        self,
        seller_id: str,
        statuses: Optional[Iterable[ListingStatus]] = None
    ) -> List[Listing]:
        stmt = select(Listing).where(Listing.seller_id == seller_id)
        if statuses:
            stmt = stmt.where(Listing.status.in_([s.value for s in statuses]))
        stmt = stmt.order_by(Listing.created_at.desc(), Listing.id)
        return list(self.db.execute(stmt).scalars().all())

    def seller_listing_ids(self, seller_id: str) -> List[str]:
        stmt = select(Listing.id).where(Listing.seller_id == seller_id)
        return list(self.db.execute(stmt).scalars().all())

    def list_for_buyer(self, buyer_id: str) -> List[Listing]:
        """Listings that target the buyer, most recently updated first.

        Candidates are found through the invitation table; the targeted
        set stays the authority on membership.
        """
        stmt = (
            select(Listing)
            .join(ListingInvitation, ListingInvitation.listing_id == Listing.id)
            .where(ListingInvitation.buyer_id == buyer_id)
            .order_by(Listing.updated_at.desc(), Listing.id)
        )
        listings = self.db.execute(stmt).scalars().unique().all()
        return [listing for listing in listings if listing.is_targeted(buyer_id)]

    def list_public(self, statuses: Iterable[ListingStatus] = (ListingStatus.ACTIVE,)) -> List[Listing]:
        stmt = select(Listing).where(
            Listing.is_public.is_(True),
            Listing.status.in_([s.value for s in statuses])
        ).order_by(Listing.updated_at.desc(), Listing.id)
        return list(self.db.execute(stmt).scalars().all())

    def all_ids(self) -> List[str]:
        stmt = select(Listing.id).order_by(Listing.id)
        return list(self.db.execute(stmt).scalars().all())

    def ids_with_response(self, response: str) -> List[str]:
        """Listings holding at least one invitation with ``response``."""
        stmt = (
            select(ListingInvitation.listing_id)
            .where(ListingInvitation.response == response)
            .distinct()
            .order_by(ListingInvitation.listing_id)
        )
        return list(self.db.execute(stmt).scalars().all())
