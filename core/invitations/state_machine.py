#!/usr/bin/env python3
"""
Invitation State Machine - per-buyer responses and listing lifecycle.

Functions here mutate a loaded Listing in memory and return the ledger
records and domain events the change produced. They do not touch the
database: the caller runs them inside ListingStore.compare_and_swap so
the listing update, its ledger records and the invariant check commit
together.

Membership sets are always replaced with new lists, never mutated in
place, so the ORM sees every change to the JSON columns.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Union

from core.errors import PermissionDeniedException, InvalidTransitionException
from core.invitations.models import ActorContext, TargetResult, TransitionResult, LifecycleResult
from database.models import (
    Listing, ListingInvitation, InteractionRecord, ListingStatus, InvitationResponse,
    Decision, ActorRole, InteractionType, RESPONSE_TO_INTERACTION,
)
from notification.events import BuyerTargeted, BuyerResponded, AccessRequested, ListingCompleted

logger = logging.getLogger(__name__)


def _with_member(members: Optional[List[str]], buyer_id: str) -> List[str]:
    members = list(members or [])
    if buyer_id not in members:
        members.append(buyer_id)
    return members


def _without_member(members: Optional[List[str]], buyer_id: str) -> List[str]:
    return [m for m in (members or []) if m != buyer_id]


def _decision_label(response: InvitationResponse) -> str:
    return Decision.ACTIVE.value if response == InvitationResponse.ACCEPTED else response.value


def coerce_response(value: Union[Decision, InvitationResponse, str]) -> InvitationResponse:
    """Accept a decision ("active") or a stored response ("accepted")."""
    if isinstance(value, InvitationResponse):
        return value
    if isinstance(value, Decision):
        return value.to_response()
    if value == Decision.ACTIVE.value:
        return InvitationResponse.ACCEPTED
    try:
        return InvitationResponse(value)
    except ValueError:
        raise InvalidTransitionException(f"Unknown response {value!r}")


def _require_owner(listing: Listing, actor: ActorContext, action: str) -> None:
    if actor.is_admin:
        return
    if actor.role == ActorRole.SELLER and actor.actor_id == listing.seller_id:
        return
    raise PermissionDeniedException(
        f"{actor.role.value} {actor.actor_id} may not {action} listing {listing.id}"
    )


def _require_buyer_or_admin(actor: ActorContext, buyer_id: str, action: str) -> None:
    if actor.is_admin:
        return
    if actor.role == ActorRole.BUYER and actor.actor_id == buyer_id:
        return
    raise PermissionDeniedException(
        f"{actor.role.value} {actor.actor_id} may not {action} on behalf of buyer {buyer_id}"
    )


def target_buyers(listing: Listing, buyer_ids: Iterable[str], actor: ActorContext, now: datetime) -> TargetResult:
    """
    Add buyers to the targeted set with a pending invitation.

    Buyers already targeted are left untouched, including their response.
    """
    _require_owner(listing, actor, "target buyers on")
    result = TargetResult(listing_id=listing.id)
    targeted = list(listing.targeted_buyers or [])

    for buyer_id in buyer_ids:
        if buyer_id in targeted:
            if buyer_id not in result.already_targeted and buyer_id not in result.added:
                result.already_targeted.append(buyer_id)
            continue
        targeted.append(buyer_id)
        if buyer_id not in listing.invitations:
            listing.invitations[buyer_id] = ListingInvitation(
                buyer_id=buyer_id,
                invited_at=now,
                response=InvitationResponse.PENDING.value,
            )
        result.added.append(buyer_id)
        result.events.append(BuyerTargeted(
            listing_id=listing.id, occurred_at=now, buyer_id=buyer_id, seller_id=listing.seller_id
        ))

    if result.added:
        listing.targeted_buyers = targeted
        listing.updated_at = now
    return result


def apply_response(
    listing: Listing,
    buyer_id: str,
    response: InvitationResponse,
    actor: ActorContext,
    now: datetime,
    notes: Optional[str] = None
) -> TransitionResult:
    """
    Write a response and the membership sets it implies in one step.

    Accepted adds the buyer to the interested and ever-active sets; any
    other response removes it from the interested set. The ever-active
    set never shrinks.
    """
    invitation = listing.invitations.get(buyer_id)
    previous = invitation.response if invitation is not None else None
    if invitation is None:
        invitation = ListingInvitation(buyer_id=buyer_id, invited_at=now, response=response.value)
        listing.invitations[buyer_id] = invitation

    invitation.response = response.value
    invitation.responded_at = now
    invitation.decision_by = actor.role.value
    if notes is not None:
        invitation.notes = notes

    if response == InvitationResponse.ACCEPTED:
        listing.interested_buyers = _with_member(listing.interested_buyers, buyer_id)
        listing.ever_active_buyers = _with_member(listing.ever_active_buyers, buyer_id)
    elif listing.is_interested(buyer_id):
        listing.interested_buyers = _without_member(listing.interested_buyers, buyer_id)
    listing.updated_at = now

    previous_value = previous.value if isinstance(previous, InvitationResponse) else previous
    record = InteractionRecord(
        listing_id=listing.id,
        seller_id=listing.seller_id,
        buyer_id=buyer_id,
        interaction_type=RESPONSE_TO_INTERACTION[response].value,
        timestamp=now,
        notes=notes or f"Deal status changed to {_decision_label(response)}",
        event_metadata={
            'status': response.value,
            'previousStatus': previous_value,
            'decisionBy': actor.role.value,
            'actorId': actor.actor_id,
        },
    )
    event = BuyerResponded(
        listing_id=listing.id,
        occurred_at=now,
        buyer_id=buyer_id,
        seller_id=listing.seller_id,
        previous_response=previous_value,
        response=response.value,
        decision_by=actor.role.value,
    )
    return TransitionResult(
        listing_id=listing.id,
        buyer_id=buyer_id,
        changed=previous_value != response.value,
        previous_response=previous_value,
        response=response.value,
        interactions=[record],
        events=[event],
    )


def respond(
    listing: Listing,
    buyer_id: str,
    decision: Union[Decision, str],
    actor: ActorContext,
    now: datetime,
    notes: Optional[str] = None
) -> TransitionResult:
    """
    Record a decision by a targeted buyer (or an admin acting for them).

    Raises:
        PermissionDeniedException: actor is neither the buyer nor an admin,
            or the buyer is not targeted by the listing
        InvalidTransitionException: the decision is not a known value
    """
    _require_buyer_or_admin(actor, buyer_id, "respond")
    if not listing.is_targeted(buyer_id):
        raise PermissionDeniedException(f"Buyer {buyer_id} is not targeted by listing {listing.id}")
    try:
        decision = Decision(decision)
    except ValueError:
        raise InvalidTransitionException(f"Unknown decision {decision!r}")
    return apply_response(listing, buyer_id, decision.to_response(), actor, now, notes)


def admin_override(
    listing: Listing,
    buyer_id: str,
    response: Union[Decision, InvitationResponse, str],
    actor: ActorContext,
    now: datetime,
    notes: Optional[str] = None
) -> TransitionResult:
    """Set a buyer's response regardless of targeting; the buyer becomes targeted."""
    if not actor.is_admin:
        raise PermissionDeniedException(f"{actor.role.value} {actor.actor_id} is not an admin")
    response = coerce_response(response)
    if not listing.is_targeted(buyer_id):
        logger.info(f"Admin {actor.actor_id} targeting buyer {buyer_id} on listing {listing.id} via override")
        listing.targeted_buyers = _with_member(listing.targeted_buyers, buyer_id)
    return apply_response(listing, buyer_id, response, actor, now, notes)


def request_access(
    listing: Listing,
    buyer_id: str,
    actor: ActorContext,
    now: datetime,
    allow_on_completed: bool = False
) -> TransitionResult:
    """
    Buyer-initiated request to be targeted by a public listing.

    A buyer that is already targeted gets an unchanged result and no
    ledger record.
    """
    _require_buyer_or_admin(actor, buyer_id, "request access")
    if not listing.is_public:
        raise PermissionDeniedException(f"Listing {listing.id} is not public")
    if listing.status == ListingStatus.COMPLETED and not allow_on_completed:
        raise InvalidTransitionException(f"Listing {listing.id} is completed")

    if listing.is_targeted(buyer_id):
        current = listing.invitations.get(buyer_id)
        response = current.response if current is not None else None
        return TransitionResult(listing.id, buyer_id, False, response, response)

    listing.targeted_buyers = _with_member(listing.targeted_buyers, buyer_id)
    listing.invitations[buyer_id] = ListingInvitation(
        buyer_id=buyer_id,
        invited_at=now,
        responded_at=now,
        response=InvitationResponse.REQUESTED.value,
        decision_by=ActorRole.BUYER.value,
    )
    listing.updated_at = now

    record = InteractionRecord(
        listing_id=listing.id,
        seller_id=listing.seller_id,
        buyer_id=buyer_id,
        interaction_type=InteractionType.VIEW.value,
        timestamp=now,
        notes="Access requested",
        event_metadata={
            'status': InvitationResponse.REQUESTED.value,
            'previousStatus': None,
            'decisionBy': ActorRole.BUYER.value,
            'actorId': actor.actor_id,
        },
    )
    event = AccessRequested(listing_id=listing.id, occurred_at=now, buyer_id=buyer_id, seller_id=listing.seller_id)
    return TransitionResult(
        listing_id=listing.id,
        buyer_id=buyer_id,
        changed=True,
        previous_response=None,
        response=InvitationResponse.REQUESTED.value,
        interactions=[record],
        events=[event],
    )


def expire_requests(listing: Listing, cutoff: datetime, now: datetime) -> List[TransitionResult]:
    """Move requested invitations last touched before ``cutoff`` back to pending."""
    results = []
    for buyer_id in sorted(listing.invitations):
        invitation = listing.invitations[buyer_id]
        if invitation.response != InvitationResponse.REQUESTED:
            continue
        requested_at = invitation.responded_at or invitation.invited_at
        if requested_at is not None and requested_at < cutoff:
            results.append(apply_response(
                listing, buyer_id, InvitationResponse.PENDING, ActorContext.system(), now,
                notes="Access request expired"
            ))
    return results


def publish(listing: Listing, actor: ActorContext, now: datetime) -> LifecycleResult:
    """Draft -> Active. Publishing an active listing is a no-op."""
    _require_owner(listing, actor, "publish")
    previous = listing.status
    if previous == ListingStatus.COMPLETED:
        raise InvalidTransitionException(f"Listing {listing.id} is already completed")
    if previous == ListingStatus.ACTIVE:
        return LifecycleResult(listing.id, previous, previous, False)

    listing.status = ListingStatus.ACTIVE.value
    if listing.published_at is None:
        listing.published_at = now
    listing.updated_at = now
    return LifecycleResult(listing.id, previous, listing.status, True)


def complete(
    listing: Listing,
    actor: ActorContext,
    now: datetime,
    final_sale_price: Optional[float] = None,
    winning_buyer_id: Optional[str] = None,
    notes: Optional[str] = None
) -> LifecycleResult:
    """
    Active -> Completed. Completing a completed listing is a no-op.

    A winning buyer, when given, must be among the listing's interested buyers.
    """
    _require_owner(listing, actor, "complete")
    previous = listing.status
    if previous == ListingStatus.COMPLETED:
        return LifecycleResult(listing.id, previous, previous, False)
    if previous != ListingStatus.ACTIVE:
        raise InvalidTransitionException(f"Listing {listing.id} must be active to complete, not {previous}")
    if winning_buyer_id is not None and not listing.is_interested(winning_buyer_id):
        raise InvalidTransitionException(
            f"Winning buyer {winning_buyer_id} is not interested in listing {listing.id}"
        )

    listing.status = ListingStatus.COMPLETED.value
    listing.completed_at = now
    listing.updated_at = now
    if final_sale_price is not None:
        listing.final_sale_price = final_sale_price

    record = InteractionRecord(
        listing_id=listing.id,
        seller_id=listing.seller_id,
        buyer_id=winning_buyer_id,
        interaction_type=InteractionType.COMPLETED.value,
        timestamp=now,
        notes=notes or "Deal closed by seller",
        event_metadata={
            'finalSalePrice': final_sale_price,
            'winningBuyerId': winning_buyer_id,
            'actorId': actor.actor_id,
        },
    )
    event = ListingCompleted(
        listing_id=listing.id,
        occurred_at=now,
        seller_id=listing.seller_id,
        final_sale_price=final_sale_price,
        winning_buyer_id=winning_buyer_id,
    )
    return LifecycleResult(listing.id, previous, listing.status, True, [record], [event])


def record_view(listing: Listing, buyer_id: str, actor: ActorContext, now: datetime) -> InteractionRecord:
    """Ledger record for a targeted buyer opening the listing; no state change."""
    _require_buyer_or_admin(actor, buyer_id, "record a view")
    if not listing.is_targeted(buyer_id):
        raise PermissionDeniedException(f"Buyer {buyer_id} is not targeted by listing {listing.id}")
    invitation = listing.invitations.get(buyer_id)
    return InteractionRecord(
        listing_id=listing.id,
        seller_id=listing.seller_id,
        buyer_id=buyer_id,
        interaction_type=InteractionType.VIEW.value,
        timestamp=now,
        notes="Viewed deal",
        event_metadata={
            'status': invitation.response if invitation is not None else None,
            'actorId': actor.actor_id,
        },
    )
