#!/usr/bin/env python3
"""
Unit tests for ListingStore: atomic writes, invariant validation and
optimistic-concurrency retries.
"""

import os
import tempfile
import unittest

from sqlalchemy.orm.exc import StaleDataError

from core.errors import (
    ConcurrentModificationException, ConsistencyViolationException, ListingNotFoundException,
)
from database.listing_store import ListingStore
from database.models import InteractionRecord, ListingInvitation
from database.uow import listing_uow
from tests import build_test_database
from tests.fixtures.deal_fixtures import make_listing, FIXED_NOW


class TestListingStoreBasics(unittest.TestCase):

    def setUp(self):
        self.engine, self.session_factory = build_test_database()
        self.store = ListingStore(self.session_factory, retry_wait_seconds=0)

    def tearDown(self):
        self.engine.dispose()

    def test_create_and_get(self):
        self.store.create(make_listing(id="listing-1", targeted_buyers=["buyer-1"]))

        listing = self.store.get("listing-1")
        self.assertEqual(listing.seller_id, "seller-1")
        self.assertEqual(listing.targeted_buyers, ["buyer-1"])
        self.assertEqual(listing.version, 1)
        self.assertEqual(listing.created_at, FIXED_NOW)

    def test_get_missing_listing(self):
        with self.assertRaises(ListingNotFoundException):
            self.store.get("missing")

    def test_create_rejects_inconsistent_listing(self):
        with self.assertRaises(ConsistencyViolationException):
            self.store.create(make_listing(id="listing-1", interested_buyers=["buyer-1"]))
        with self.assertRaises(ListingNotFoundException):
            self.store.get("listing-1")

    def test_list_by_seller(self):
        self.store.create(make_listing(id="listing-1"))
        self.store.create(make_listing(id="listing-2", seller_id="seller-2"))
        self.assertEqual([listing.id for listing in self.store.list_by_seller("seller-1")], ["listing-1"])

    def test_compare_and_swap_commits_listing_and_ledger_together(self):
        self.store.create(make_listing(id="listing-1"))

        def mutation(listing, uow):
            listing.title = "Renamed"
            uow.interactions.append(InteractionRecord(
                listing_id=listing.id, seller_id=listing.seller_id, buyer_id=None,
                interaction_type="view", timestamp=FIXED_NOW,
            ))
            return "done"

        self.assertEqual(self.store.compare_and_swap("listing-1", mutation), "done")
        self.assertEqual(self.store.get("listing-1").title, "Renamed")
        with listing_uow(self.session_factory) as uow:
            self.assertEqual(len(uow.interactions.for_listing("listing-1")), 1)

    def test_violation_rolls_back_ledger_append(self):
        self.store.create(make_listing(id="listing-1"))

        def mutation(listing, uow):
            # Interested without an accepted invitation
            listing.interested_buyers = ["buyer-1"]
            uow.interactions.append(InteractionRecord(
                listing_id=listing.id, seller_id=listing.seller_id, buyer_id="buyer-1",
                interaction_type="interest", timestamp=FIXED_NOW,
            ))

        with self.assertRaises(ConsistencyViolationException) as ctx:
            self.store.compare_and_swap("listing-1", mutation)

        rules = {issue.rule for issue in ctx.exception.issues}
        self.assertIn("interested_accepted", rules)
        self.assertEqual(self.store.get("listing-1").interested_buyers, [])
        with listing_uow(self.session_factory) as uow:
            self.assertEqual(uow.interactions.for_listing("listing-1"), [])

    def test_invitation_for_untargeted_buyer_is_rejected(self):
        self.store.create(make_listing(id="listing-1"))

        def mutation(listing, uow):
            listing.invitations["buyer-1"] = ListingInvitation(
                buyer_id="buyer-1", invited_at=FIXED_NOW, response="pending"
            )

        with self.assertRaises(ConsistencyViolationException):
            self.store.compare_and_swap("listing-1", mutation)
        self.assertEqual(self.store.get("listing-1").invitations, {})


class TestListingStoreConcurrency(unittest.TestCase):
    """Uses a file database so concurrent sessions get separate connections."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        url = f"sqlite:///{os.path.join(self.tmpdir.name, 'store.db')}"
        self.engine, self.session_factory = build_test_database(url)
        self.store = ListingStore(self.session_factory, max_attempts=3, retry_wait_seconds=0)
        self.store.create(make_listing(id="listing-1"))

    def tearDown(self):
        self.engine.dispose()
        self.tmpdir.cleanup()

    def test_conflicting_writer_triggers_retry(self):
        calls = []

        def mutation(listing, uow):
            calls.append(listing.version)
            if len(calls) == 1:
                # Another writer commits between our read and our write
                with listing_uow(self.session_factory) as other:
                    competing = other.listings.get_by_id(listing.id)
                    competing.targeted_buyers = ["buyer-2"]
            listing.title = "Mine"

        self.store.compare_and_swap("listing-1", mutation)

        listing = self.store.get("listing-1")
        self.assertEqual(calls, [1, 2])
        self.assertEqual(listing.title, "Mine")
        self.assertEqual(listing.targeted_buyers, ["buyer-2"])
        self.assertEqual(listing.version, 3)

    def test_gives_up_after_max_attempts(self):
        calls = []

        def mutation(listing, uow):
            calls.append(1)
            raise StaleDataError("simulated conflict")

        with self.assertRaises(ConcurrentModificationException):
            self.store.compare_and_swap("listing-1", mutation)
        self.assertEqual(len(calls), 3)


if __name__ == '__main__':
    unittest.main()
