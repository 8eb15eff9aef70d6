#!/usr/bin/env python3
"""
Test suite for ScoringService and the per-factor rules.
"""

import unittest

from core.config_loader import ScorerConfig, FactorWeights
from core.scorer import ScoringService, FACTORS
from core.scorer import factors
from core.scorer.models import ScoreBreakdown
from tests.fixtures.deal_fixtures import make_listing, make_profile


class TestFactorRules(unittest.TestCase):
    """Each optional factor is all-or-nothing."""

    def setUp(self):
        self.weights = FactorWeights()

    def test_ebitda_zero_rule_rejects_zero_ebitda(self):
        listing = make_listing(trailing_ebitda=0)
        profile = make_profile(target_criteria={"ebitda_min": 0, "ebitda_max": 1_000_000})
        self.assertEqual(factors.ebitda_points(listing, profile, self.weights), 0)

    def test_ebitda_zero_rule_accepts_positive_ebitda(self):
        listing = make_listing(trailing_ebitda=1)
        profile = make_profile(target_criteria={"ebitda_min": 0, "ebitda_max": 1_000_000})
        self.assertEqual(factors.ebitda_points(listing, profile, self.weights), 8)

    def test_ebitda_zero_rule_treats_missing_ebitda_as_zero(self):
        listing = make_listing(trailing_ebitda=None)
        profile = make_profile(target_criteria={"ebitda_min": 0})
        self.assertEqual(factors.ebitda_points(listing, profile, self.weights), 0)

    def test_ebitda_nonzero_min_is_inclusive(self):
        profile = make_profile(target_criteria={"ebitda_min": 500})
        self.assertEqual(factors.ebitda_points(make_listing(trailing_ebitda=500), profile, self.weights), 8)
        self.assertEqual(factors.ebitda_points(make_listing(trailing_ebitda=499), profile, self.weights), 0)

    def test_ebitda_upper_bound(self):
        profile = make_profile(target_criteria={"ebitda_max": 1000})
        self.assertEqual(factors.ebitda_points(make_listing(trailing_ebitda=1001), profile, self.weights), 0)
        self.assertEqual(factors.ebitda_points(make_listing(trailing_ebitda=-50), profile, self.weights), 8)

    def test_revenue_bounds_are_wildcards_when_absent(self):
        listing = make_listing(trailing_revenue=2_000_000)
        self.assertEqual(factors.revenue_points(listing, make_profile(), self.weights), 8)
        only_max = make_profile(target_criteria={"revenue_max": 1_000_000})
        self.assertEqual(factors.revenue_points(listing, only_max, self.weights), 0)
        only_min = make_profile(target_criteria={"revenue_min": 1_000_000})
        self.assertEqual(factors.revenue_points(listing, only_min, self.weights), 8)

    def test_revenue_missing_on_listing_fails_a_minimum(self):
        listing = make_listing(trailing_revenue=None)
        profile = make_profile(target_criteria={"revenue_min": 1})
        self.assertEqual(factors.revenue_points(listing, profile, self.weights), 0)

    def test_revenue_growth_and_years(self):
        listing = make_listing(avg_revenue_growth=12, years_in_business=4)
        profile = make_profile(target_criteria={"revenue_growth": 10, "min_years_in_business": 5})
        self.assertEqual(factors.revenue_growth_points(listing, profile, self.weights), 5)
        self.assertEqual(factors.years_in_business_points(listing, profile, self.weights), 0)

    def test_business_model_awards_per_matching_flag(self):
        listing = make_listing(recurring_revenue=True, asset_light=True, asset_heavy=True)
        profile = make_profile(target_criteria={
            "preferred_business_models": ["Recurring Revenue", "Asset Light", "Project-Based"]
        })
        self.assertEqual(factors.business_model_points(listing, profile, self.weights), 6)

    def test_capital_and_company_type_restrictions(self):
        listing = make_listing(allowed_capital_types=["Fund"], allowed_company_types=["Strategic"])
        fund = make_profile(capital_entity="Fund", company_type="Private Equity")
        self.assertEqual(factors.capital_availability_points(listing, fund, self.weights), 4)
        self.assertEqual(factors.company_type_points(listing, fund, self.weights), 0)

        unrestricted = make_listing()
        self.assertEqual(factors.capital_availability_points(unrestricted, fund, self.weights), 4)
        self.assertEqual(factors.company_type_points(unrestricted, fund, self.weights), 4)

    def test_min_transaction_size_and_prior_acquisitions(self):
        listing = make_listing(min_transaction_size=1_000_000, min_prior_acquisitions=2)
        seasoned = make_profile(average_deal_size=1_000_000, deals_completed_last_5_years=2)
        novice = make_profile(average_deal_size=None, deals_completed_last_5_years=None)
        self.assertEqual(factors.min_transaction_size_points(listing, seasoned, self.weights), 5)
        self.assertEqual(factors.prior_acquisitions_points(listing, seasoned, self.weights), 5)
        self.assertEqual(factors.min_transaction_size_points(listing, novice, self.weights), 0)
        self.assertEqual(factors.prior_acquisitions_points(listing, novice, self.weights), 0)

    def test_stake_percentage(self):
        profile = make_profile(target_criteria={"min_stake_percent": 51})
        self.assertEqual(factors.stake_percentage_points(make_listing(stake_percentage=60), profile, self.weights), 4)
        self.assertEqual(factors.stake_percentage_points(make_listing(stake_percentage=20), profile, self.weights), 0)
        # No requirement on either side awards the factor
        self.assertEqual(factors.stake_percentage_points(make_listing(stake_percentage=None), profile, self.weights), 4)
        self.assertEqual(factors.stake_percentage_points(make_listing(stake_percentage=20), make_profile(), self.weights), 4)


class TestScoringService(unittest.TestCase):
    """Test ScoringService totals and percentages."""

    def setUp(self):
        self.scorer = ScoringService(ScorerConfig())

    def test_max_score_is_65(self):
        self.assertEqual(self.scorer.max_score, 65)

    def test_zero_ebitda_scenario_scores_43_percent(self):
        """France/SaaS listing with zero EBITDA; every other optional factor fails."""
        listing = make_listing(
            trailing_ebitda=0,
            allowed_capital_types=["Fund"],
            allowed_company_types=["Strategic"],
            min_transaction_size=5_000_000,
            min_prior_acquisitions=3,
            stake_percentage=20,
        )
        profile = make_profile(
            capital_entity="Family Office",
            company_type="Private Equity",
            target_criteria={
                "ebitda_min": 0,
                "ebitda_max": 1_000_000,
                "revenue_growth": 10,
                "min_years_in_business": 5,
                "min_stake_percent": 51,
            },
        )

        breakdown = self.scorer.score(listing, profile)

        self.assertEqual(breakdown.points["ebitda"], 0)
        self.assertEqual(breakdown.points["revenue"], 8)
        self.assertEqual(breakdown.total, 28)
        self.assertEqual(breakdown.percentage, 43)

    def test_zero_ebitda_with_wildcards_elsewhere(self):
        listing = make_listing(trailing_ebitda=0)
        profile = make_profile(target_criteria={"ebitda_min": 0, "ebitda_max": 1_000_000})

        breakdown = self.scorer.score(listing, profile)

        self.assertEqual(breakdown.total, 60)
        self.assertEqual(breakdown.percentage, 92)
        self.assertFalse(breakdown.matched["ebitda"])
        self.assertFalse(breakdown.matched["business_model"])

    def test_every_factor_awarded_scores_100(self):
        listing = make_listing(
            trailing_ebitda=100, recurring_revenue=True, project_based=True,
            asset_light=True, asset_heavy=True,
        )
        profile = make_profile(target_criteria={
            "ebitda_min": 0,
            "preferred_business_models": ["Recurring Revenue", "Project-Based", "Asset Light", "Asset Heavy"],
        })

        breakdown = self.scorer.score(listing, profile)

        self.assertEqual(breakdown.total, 65)
        self.assertEqual(breakdown.percentage, 100)
        self.assertTrue(all(breakdown.matched.values()))
        self.assertEqual(set(breakdown.points), set(FACTORS))

    def test_percentage_below_100_when_any_factor_missing(self):
        listing = make_listing(
            trailing_ebitda=100, recurring_revenue=True, project_based=True,
            asset_light=True, asset_heavy=False,
        )
        profile = make_profile(target_criteria={
            "ebitda_min": 0,
            "preferred_business_models": ["Recurring Revenue", "Project-Based", "Asset Light", "Asset Heavy"],
        })

        breakdown = self.scorer.score(listing, profile)

        self.assertEqual(breakdown.total, 62)
        self.assertEqual(breakdown.percentage, 95)

    def test_percentage_stays_in_range(self):
        for total in range(0, 66):
            breakdown = ScoreBreakdown(max_score=65, points={"industry": total})
            self.assertGreaterEqual(breakdown.percentage, 0)
            self.assertLessEqual(breakdown.percentage, 100)
            if total < 65:
                self.assertLess(breakdown.percentage, 100)

    def test_custom_weights_change_max_score(self):
        config = ScorerConfig(weights=FactorWeights(industry=20))
        scorer = ScoringService(config)
        self.assertEqual(scorer.max_score, 75)


if __name__ == '__main__':
    unittest.main()
