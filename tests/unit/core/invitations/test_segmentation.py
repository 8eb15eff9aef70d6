#!/usr/bin/env python3
"""
Test suite for buyer-facing segmentation.
"""

import itertools
import unittest

from core.invitations import ActorContext, classify, segment, in_bucket
from core.invitations import state_machine
from database.models import BuyerBucket, Decision, ListingStatus
from tests.fixtures.deal_fixtures import make_listing, FIXED_NOW

SELLER = ActorContext.seller("seller-1")
ADMIN = ActorContext.admin("admin-1")


class TestSegmentation(unittest.TestCase):

    def test_untargeted_buyer_has_no_bucket(self):
        self.assertIsNone(classify(make_listing(), "buyer-1"))

    def test_buckets_follow_responses(self):
        listing = make_listing()
        state_machine.target_buyers(listing, ["buyer-1", "buyer-2", "buyer-3"], SELLER, FIXED_NOW)
        state_machine.respond(listing, "buyer-1", Decision.ACTIVE, ADMIN, FIXED_NOW)
        state_machine.respond(listing, "buyer-2", Decision.REJECTED, ADMIN, FIXED_NOW)

        buckets = segment(listing)

        self.assertEqual(buckets[BuyerBucket.ACTIVE], ["buyer-1"])
        self.assertEqual(buckets[BuyerBucket.REJECTED], ["buyer-2"])
        self.assertEqual(buckets[BuyerBucket.PENDING], ["buyer-3"])
        self.assertEqual(buckets[BuyerBucket.COMPLETED], [])

    def test_completed_listing_moves_interested_to_completed(self):
        listing = make_listing()
        state_machine.target_buyers(listing, ["buyer-1", "buyer-2"], SELLER, FIXED_NOW)
        state_machine.respond(listing, "buyer-1", Decision.ACTIVE, ADMIN, FIXED_NOW)
        state_machine.respond(listing, "buyer-2", Decision.REJECTED, ADMIN, FIXED_NOW)
        state_machine.complete(listing, SELLER, FIXED_NOW)

        self.assertTrue(in_bucket(listing, "buyer-1", BuyerBucket.COMPLETED))
        self.assertFalse(in_bucket(listing, "buyer-1", BuyerBucket.ACTIVE))
        self.assertTrue(in_bucket(listing, "buyer-2", "rejected"))

    def test_requested_counts_as_pending(self):
        listing = make_listing(is_public=True)
        state_machine.request_access(listing, "buyer-1", ActorContext.buyer("buyer-1"), FIXED_NOW)
        self.assertEqual(classify(listing, "buyer-1"), BuyerBucket.PENDING)

    def test_every_targeted_buyer_in_exactly_one_bucket(self):
        """Exhaustive over decision histories of length two and every listing status."""
        decisions = [None, Decision.ACTIVE, Decision.PENDING, Decision.REJECTED]
        for status, first, second in itertools.product(ListingStatus, decisions, decisions):
            listing = make_listing()
            state_machine.target_buyers(listing, ["buyer-1"], SELLER, FIXED_NOW)
            for decision in (first, second):
                if decision is not None:
                    state_machine.respond(listing, "buyer-1", decision, ADMIN, FIXED_NOW)
            listing.status = status.value

            memberships = [bucket for bucket in BuyerBucket if in_bucket(listing, "buyer-1", bucket)]
            with self.subTest(status=status, first=first, second=second):
                self.assertEqual(len(memberships), 1)
                flat = [b for members in segment(listing).values() for b in members]
                self.assertEqual(flat, ["buyer-1"])


if __name__ == '__main__':
    unittest.main()
