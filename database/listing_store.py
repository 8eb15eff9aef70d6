#!/usr/bin/env python3
"""
Listing Store - atomic read-modify-write for listing state.

Every mutation runs inside one unit of work: the listing is loaded, the
mutation applies its changes and queues its ledger records, the
invariants are validated, and everything commits together. Concurrent
writers are detected through the listing's version column; a conflicting
write is retried from a fresh read.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed, before_sleep_log

from core.consistency import assert_consistent
from core.errors import ConcurrentModificationException
from database.models import Listing
from database.uow import listing_uow, UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")

Mutation = Callable[[Listing, UnitOfWork], T]


class ListingStore:
    def __init__(
        self,
        session_factory: sessionmaker,
        max_attempts: int = 3,
        retry_wait_seconds: float = 0.05,
        lock_rows: bool = False,
        validator: Optional[Callable[[Listing], None]] = assert_consistent
    ):
        self.session_factory = session_factory
        self.max_attempts = max_attempts
        self.retry_wait_seconds = retry_wait_seconds
        self.lock_rows = lock_rows
        self.validator = validator

    def create(self, listing: Listing) -> Listing:
        with listing_uow(self.session_factory) as uow:
            if self.validator:
                self.validator(listing)
            uow.listings.add(listing)
        logger.info(f"Created listing {listing.id} for seller {listing.seller_id}")
        return listing

    def get(self, listing_id: str) -> Listing:
        with listing_uow(self.session_factory) as uow:
            return uow.listings.get_by_id(listing_id)

    def list_by_seller(self, seller_id: str) -> List[Listing]:
        with listing_uow(self.session_factory) as uow:
            return uow.listings.list_by_seller(seller_id)

    def list_for_buyer(self, buyer_id: str) -> List[Listing]:
        with listing_uow(self.session_factory) as uow:
            return uow.listings.list_for_buyer(buyer_id)

    def compare_and_swap(self, listing_id: str, mutation: Mutation) -> T:
        """Apply ``mutation`` to the current listing state atomically.

        The mutation may be called more than once if another writer
        commits first, so it must derive everything from the listing it
        is given.

        Raises:
            ListingNotFoundException: listing does not exist
            ConsistencyViolationException: mutation would break an invariant
            ConcurrentModificationException: conflict persisted after max_attempts
        """
        retrying = Retrying(
            retry=retry_if_exception_type(StaleDataError),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_wait_seconds),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    return self._apply(listing_id, mutation)
        except StaleDataError as e:
            raise ConcurrentModificationException(
                f"Listing {listing_id} was modified concurrently; gave up after {self.max_attempts} attempts"
            ) from e

    def _apply(self, listing_id: str, mutation: Mutation) -> T:
        with listing_uow(self.session_factory) as uow:
            listing = uow.listings.get_by_id(listing_id, for_update=self.lock_rows)
            result = mutation(listing, uow)
            if self.validator:
                self.validator(listing)
            uow.flush()
        return result
