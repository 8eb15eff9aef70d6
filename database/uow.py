import contextlib
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from database.database import get_session_factory
from database.repositories import ListingRepository, InteractionRepository, BuyerProfileRepository

logger = logging.getLogger(__name__)


@dataclass
class UnitOfWork:
    """Repositories sharing one Session, hence one transaction."""
    session: Session
    listings: ListingRepository
    interactions: InteractionRepository
    buyer_profiles: BuyerProfileRepository

    @classmethod
    def for_session(cls, session: Session) -> "UnitOfWork":
        return cls(
            session=session,
            listings=ListingRepository(session),
            interactions=InteractionRepository(session),
            buyer_profiles=BuyerProfileRepository(session),
        )

    def flush(self) -> None:
        self.session.flush()


@contextlib.contextmanager
def listing_uow(session_factory: Optional[sessionmaker] = None):
    """Per-unit-of-work transaction scope.

    Yields a UnitOfWork bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with listing_uow(factory) as uow:
            listing = uow.listings.get_by_id(listing_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = (session_factory or get_session_factory())()
    try:
        yield UnitOfWork.for_session(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
