#!/usr/bin/env python3
"""
Test suite for MatcherService: mandatory gate, threshold and ranking.
"""

import unittest

from core.config_loader import MatchingConfig, MatcherConfig
from core.criteria import InMemoryCriteriaStore
from core.matcher import (
    MatcherService, check_mandatory_gates,
    GATE_STOPPED, GATE_GEOGRAPHY, GATE_INDUSTRY, GATE_MARKETED_DEAL,
)
from database.models import RewardLevel
from tests.fixtures.deal_fixtures import make_listing, make_profile

# With the constrained listing below only industry + geography remain (20/65 = 31%)
BELOW_THRESHOLD = {"revenue_min": 1e12, "revenue_growth": 1000, "min_years_in_business": 1000,
                   "ebitda_min": 1e12, "min_stake_percent": 100}


def constrained_listing(**overrides):
    fields = dict(
        trailing_ebitda=0,
        allowed_capital_types=["Fund"],
        allowed_company_types=["Strategic"],
        min_transaction_size=1_000_000,
        min_prior_acquisitions=2,
        stake_percentage=20,
    )
    fields.update(overrides)
    return make_listing(**fields)


def strong_profile(buyer_id, **overrides):
    """Passes every listing-side constraint of constrained_listing."""
    return make_profile(
        buyer_id,
        capital_entity="Fund",
        company_type="Strategic",
        average_deal_size=2_000_000,
        deals_completed_last_5_years=5,
        **overrides
    )


class TestMandatoryGates(unittest.TestCase):

    def test_eligible_profile_has_no_failures(self):
        self.assertEqual(check_mandatory_gates(make_listing(), make_profile()), [])

    def test_stop_sending_deals(self):
        profile = make_profile(preferences={"stop_sending_deals": True})
        self.assertEqual(check_mandatory_gates(make_listing(), profile), [GATE_STOPPED])

    def test_geography_outside_targets(self):
        profile = make_profile(target_criteria={"countries": ["Germany"]})
        self.assertEqual(check_mandatory_gates(make_listing(), profile), [GATE_GEOGRAPHY])

    def test_geography_matches_enclosing_region(self):
        profile = make_profile(target_criteria={"countries": ["Europe"]})
        self.assertEqual(check_mandatory_gates(make_listing(geography="France"), profile), [])

    def test_geography_matches_contained_country(self):
        profile = make_profile(target_criteria={"countries": ["France"]})
        self.assertEqual(check_mandatory_gates(make_listing(geography="Western Europe"), profile), [])

    def test_missing_listing_geography_fails(self):
        self.assertIn(GATE_GEOGRAPHY, check_mandatory_gates(make_listing(geography=None), make_profile()))

    def test_industry_not_targeted(self):
        listing = make_listing(industry_sector="Manufacturing")
        self.assertEqual(check_mandatory_gates(listing, make_profile()), [GATE_INDUSTRY])

    def test_marketed_deal_only_applies_to_seed(self):
        profile = make_profile(preferences={"do_not_send_marketed_deals": True})
        seed = make_listing(reward_level=RewardLevel.SEED.value)
        fruit = make_listing(reward_level=RewardLevel.FRUIT.value)
        self.assertEqual(check_mandatory_gates(seed, profile), [GATE_MARKETED_DEAL])
        self.assertEqual(check_mandatory_gates(fruit, profile), [])

    def test_reports_every_failed_clause(self):
        profile = make_profile(
            target_criteria={"countries": ["Japan"], "industry_sectors": ["Retail"]},
            preferences={"stop_sending_deals": True},
        )
        failures = check_mandatory_gates(make_listing(), profile)
        self.assertEqual(failures, [GATE_STOPPED, GATE_GEOGRAPHY, GATE_INDUSTRY])


class TestMatcherService(unittest.TestCase):

    def setUp(self):
        self.matcher = MatcherService(MatchingConfig())
        self.listing = constrained_listing()

    def test_gated_profile_is_ineligible_regardless_of_factors(self):
        profile = make_profile(
            target_criteria={"industry_sectors": ["Retail"]},
        )
        match = self.matcher.score(self.listing, profile)
        self.assertFalse(match.eligible)
        self.assertEqual(match.percentage, 0)
        self.assertEqual(match.gate_failures, [GATE_INDUSTRY])
        self.assertEqual(self.matcher.rank(self.listing, [profile]), [])

    def test_score_eligible_profile(self):
        match = self.matcher.score(self.listing, make_profile())
        self.assertTrue(match.eligible)
        self.assertEqual(match.max_score, 65)
        self.assertEqual(match.total_score, sum(match.breakdown.values()))
        self.assertEqual(match.percentage, round(match.total_score / 65 * 100))

    def test_rank_filters_below_threshold(self):
        weak = make_profile("buyer-weak", target_criteria=BELOW_THRESHOLD)
        strong = strong_profile("buyer-strong")

        self.assertEqual(self.matcher.score(self.listing, weak).percentage, 31)
        ranked = self.matcher.rank(self.listing, [weak, strong])

        self.assertEqual([m.buyer_id for m in ranked], ["buyer-strong"])

    def test_threshold_is_inclusive(self):
        config = MatchingConfig(matcher=MatcherConfig(min_match_percentage=31))
        weak = make_profile("buyer-weak", target_criteria=BELOW_THRESHOLD)
        ranked = MatcherService(config).rank(self.listing, [weak])
        self.assertEqual([m.buyer_id for m in ranked], ["buyer-weak"])

    def test_rank_orders_by_percentage_then_buyer_id(self):
        profiles = [
            strong_profile("buyer-c"),
            strong_profile("buyer-a", target_criteria={"revenue_growth": 50}),
            strong_profile("buyer-b"),
        ]
        ranked = self.matcher.rank(self.listing, profiles)

        self.assertEqual([m.buyer_id for m in ranked], ["buyer-b", "buyer-c", "buyer-a"])
        self.assertGreater(ranked[1].percentage, ranked[2].percentage)

    def test_max_results_keeps_best(self):
        config = MatchingConfig(matcher=MatcherConfig(max_results=2))
        profiles = (strong_profile(f"buyer-{i}") for i in range(5, 0, -1))
        ranked = MatcherService(config).rank(self.listing, profiles)
        self.assertEqual([m.buyer_id for m in ranked], ["buyer-1", "buyer-2"])

    def test_find_matching_buyers_uses_store(self):
        store = InMemoryCriteriaStore([
            strong_profile("buyer-1"),
            strong_profile("buyer-2", target_criteria={"countries": ["Europe"]}),
            make_profile("buyer-3", target_criteria={"countries": ["Brazil"]}),
            make_profile("buyer-4", preferences={"stop_sending_deals": True}),
        ])

        ranked = self.matcher.find_matching_buyers(self.listing, store)

        self.assertEqual([m.buyer_id for m in ranked], ["buyer-1", "buyer-2"])
        self.assertTrue(all(m.profile is not None for m in ranked))


if __name__ == '__main__':
    unittest.main()
