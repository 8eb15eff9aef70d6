#!/usr/bin/env python3
"""
Buyer-facing segmentation of a listing's targeted buyers.

Every targeted buyer lands in exactly one bucket:
- interested on a completed listing -> completed
- interested otherwise -> active
- not interested, stored response rejected -> rejected
- anything else -> pending
"""

from typing import Dict, List, Optional

from database.models import Listing, ListingStatus, InvitationResponse, BuyerBucket


def classify(listing: Listing, buyer_id: str) -> Optional[BuyerBucket]:
    """Bucket for ``buyer_id``, or None when the listing does not target them."""
    if not listing.is_targeted(buyer_id):
        return None
    if listing.is_interested(buyer_id):
        if listing.status == ListingStatus.COMPLETED:
            return BuyerBucket.COMPLETED
        return BuyerBucket.ACTIVE
    invitation = listing.invitations.get(buyer_id)
    if invitation is not None and invitation.response == InvitationResponse.REJECTED:
        return BuyerBucket.REJECTED
    return BuyerBucket.PENDING


def segment(listing: Listing) -> Dict[BuyerBucket, List[str]]:
    buckets: Dict[BuyerBucket, List[str]] = {bucket: [] for bucket in BuyerBucket}
    for buyer_id in listing.targeted_buyers or []:
        buckets[classify(listing, buyer_id)].append(buyer_id)
    return buckets


def in_bucket(listing: Listing, buyer_id: str, bucket: BuyerBucket) -> bool:
    return classify(listing, buyer_id) == BuyerBucket(bucket)
