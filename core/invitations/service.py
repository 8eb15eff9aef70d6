#!/usr/bin/env python3
"""
Invitation Service - runs state machine transitions against the store.

Each operation loads the listing, applies one transition, appends the
resulting ledger records and commits, all through
ListingStore.compare_and_swap. Domain events are published only after
the commit succeeded.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Union

from core.config_loader import InvitationConfig
from core.invitations import state_machine
from core.invitations.models import ActorContext, TargetResult, TransitionResult, LifecycleResult
from core.invitations.segmentation import classify
from database.listing_store import ListingStore
from database.models import (
    Listing, InteractionRecord, Decision, InvitationResponse, BuyerBucket, utcnow,
)
from database.uow import UnitOfWork
from notification.service import EventPublisher

logger = logging.getLogger(__name__)


class InvitationService:
    """
    Service for per-buyer invitations and the listing lifecycle.

    Args:
        store: ListingStore providing the atomic read-modify-write
        publisher: Receives events after commit; None disables publication
        config: InvitationConfig with request policy settings
        clock: Returns the current UTC time
    """

    def __init__(
        self,
        store: ListingStore,
        publisher: Optional[EventPublisher] = None,
        config: Optional[InvitationConfig] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.publisher = publisher
        self.config = config or InvitationConfig()
        self.clock = clock

    def _run(self, listing_id: str, transition: Callable[[Listing, datetime], object]):
        def mutation(listing: Listing, uow: UnitOfWork):
            result = transition(listing, self.clock())
            for record in _interactions_of(result):
                uow.interactions.append(record)
            return result

        result = self.store.compare_and_swap(listing_id, mutation)
        if self.publisher is not None:
            self.publisher.publish_all(_events_of(result))
        return result

    def target(self, listing_id: str, buyer_ids: Iterable[str], actor: ActorContext) -> TargetResult:
        buyer_ids = list(buyer_ids)
        result = self._run(
            listing_id,
            lambda listing, now: state_machine.target_buyers(listing, buyer_ids, actor, now)
        )
        logger.info(f"Listing {listing_id}: targeted {len(result.added)} new buyer(s), "
                    f"{len(result.already_targeted)} already targeted")
        return result

    def respond(
        self,
        listing_id: str,
        buyer_id: str,
        decision: Union[Decision, str],
        actor: ActorContext,
        notes: Optional[str] = None
    ) -> TransitionResult:
        result = self._run(
            listing_id,
            lambda listing, now: state_machine.respond(listing, buyer_id, decision, actor, now, notes)
        )
        logger.info(f"Listing {listing_id}: buyer {buyer_id} {result.previous_response} -> {result.response} "
                    f"by {actor.role.value}")
        return result

    def admin_override(
        self,
        listing_id: str,
        buyer_id: str,
        response: Union[Decision, InvitationResponse, str],
        actor: ActorContext,
        notes: Optional[str] = None
    ) -> TransitionResult:
        result = self._run(
            listing_id,
            lambda listing, now: state_machine.admin_override(listing, buyer_id, response, actor, now, notes)
        )
        logger.info(f"Listing {listing_id}: admin {actor.actor_id} set buyer {buyer_id} to {result.response}")
        return result

    def request_access(self, listing_id: str, buyer_id: str, actor: ActorContext) -> TransitionResult:
        allow_completed = self.config.allow_requests_on_completed
        result = self._run(
            listing_id,
            lambda listing, now: state_machine.request_access(listing, buyer_id, actor, now, allow_completed)
        )
        if result.changed:
            logger.info(f"Listing {listing_id}: buyer {buyer_id} requested access")
        return result

    def expire_stale_requests(self, listing_id: str) -> List[TransitionResult]:
        """Return requested invitations older than the configured age to pending.

        Does nothing when ``requested_expiry_days`` is not configured.
        """
        expiry_days = self.config.requested_expiry_days
        if expiry_days is None:
            return []

        def transition(listing: Listing, now: datetime):
            return state_machine.expire_requests(listing, now - timedelta(days=expiry_days), now)

        results = self._run(listing_id, transition)
        if results:
            logger.info(f"Listing {listing_id}: expired {len(results)} stale access request(s)")
        return results

    def publish(self, listing_id: str, actor: ActorContext) -> LifecycleResult:
        result = self._run(listing_id, lambda listing, now: state_machine.publish(listing, actor, now))
        if result.changed:
            logger.info(f"Listing {listing_id} published")
        return result

    def complete(
        self,
        listing_id: str,
        actor: ActorContext,
        final_sale_price: Optional[float] = None,
        winning_buyer_id: Optional[str] = None,
        notes: Optional[str] = None
    ) -> LifecycleResult:
        result = self._run(
            listing_id,
            lambda listing, now: state_machine.complete(
                listing, actor, now, final_sale_price, winning_buyer_id, notes
            )
        )
        if result.changed:
            logger.info(f"Listing {listing_id} completed (winning buyer: {winning_buyer_id})")
        return result

    def record_view(self, listing_id: str, buyer_id: str, actor: ActorContext) -> InteractionRecord:
        return self._run(
            listing_id,
            lambda listing, now: state_machine.record_view(listing, buyer_id, actor, now)
        )

    def buyer_listings(self, buyer_id: str, bucket: Union[BuyerBucket, str]) -> List[Listing]:
        """Listings targeting ``buyer_id`` whose segmentation puts the buyer in ``bucket``."""
        bucket = BuyerBucket(bucket)
        return [
            listing for listing in self.store.list_for_buyer(buyer_id)
            if classify(listing, buyer_id) == bucket
        ]


def _interactions_of(result) -> List[InteractionRecord]:
    if isinstance(result, InteractionRecord):
        return [result]
    if isinstance(result, list):
        return [record for item in result for record in item.interactions]
    return list(result.interactions)


def _events_of(result) -> list:
    if isinstance(result, InteractionRecord):
        return []
    if isinstance(result, list):
        return [event for item in result for event in item.events]
    return list(result.events)
