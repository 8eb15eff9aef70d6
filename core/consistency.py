#!/usr/bin/env python3
"""
Consistency checks between a listing's membership sets and its
invitation records.

Rules checked:
- a buyer is interested iff their invitation response is ``accepted``
- every interested buyer is in the ever-active set
- every buyer with an invitation record is targeted
- no set holds the same buyer twice

Detected issues are reported, never repaired here.
"""

import logging
from collections import Counter
from typing import List

from core.errors import ConsistencyIssue, ConsistencyViolationException
from database.models import Listing, InvitationResponse

logger = logging.getLogger(__name__)


def find_consistency_issues(listing: Listing) -> List[ConsistencyIssue]:
    issues: List[ConsistencyIssue] = []
    targeted = listing.targeted_buyers or []
    interested = listing.interested_buyers or []
    ever_active = set(listing.ever_active_buyers or [])
    invitations = listing.invitations or {}

    for set_name, members in (
        ('targeted_buyers', targeted),
        ('interested_buyers', interested),
        ('ever_active_buyers', listing.ever_active_buyers or []),
    ):
        for buyer_id, count in Counter(members).items():
            if count > 1:
                issues.append(ConsistencyIssue(
                    listing.id, buyer_id, 'duplicate',
                    f"{buyer_id} appears {count} times in {set_name}"
                ))

    interested_set = set(interested)
    for buyer_id in interested_set:
        invitation = invitations.get(buyer_id)
        if invitation is None or invitation.response != InvitationResponse.ACCEPTED:
            response = invitation.response if invitation is not None else None
            issues.append(ConsistencyIssue(
                listing.id, buyer_id, 'interested_accepted',
                f"interested buyer has response {response!r}"
            ))
        if buyer_id not in ever_active:
            issues.append(ConsistencyIssue(
                listing.id, buyer_id, 'ever_active',
                "interested buyer missing from ever-active set"
            ))

    targeted_set = set(targeted)
    for buyer_id, invitation in invitations.items():
        if invitation.response == InvitationResponse.ACCEPTED and buyer_id not in interested_set:
            issues.append(ConsistencyIssue(
                listing.id, buyer_id, 'accepted_interested',
                "accepted buyer missing from interested set"
            ))
        if buyer_id not in targeted_set:
            issues.append(ConsistencyIssue(
                listing.id, buyer_id, 'targeted',
                "invitation record for a buyer that is not targeted"
            ))

    return issues


def assert_consistent(listing: Listing) -> None:
    """Raise ConsistencyViolationException if the listing breaks any rule."""
    issues = find_consistency_issues(listing)
    if issues:
        logger.warning(f"Listing {listing.id} failed consistency check: {issues}")
        raise ConsistencyViolationException(issues)
