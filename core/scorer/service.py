#!/usr/bin/env python3
"""
Scoring Service - weighted optional factors for one listing/buyer pair.

Industry and geography are awarded unconditionally: the scorer is only
called for pairs that already passed the mandatory gate.
"""

from typing import Optional
import logging

from core.config_loader import ScorerConfig
from core.criteria.models import BuyerCriteriaProfile
from core.scorer import factors
from core.scorer.models import (
    ScoreBreakdown,
    FACTOR_INDUSTRY, FACTOR_GEOGRAPHY, FACTOR_REVENUE, FACTOR_EBITDA,
    FACTOR_REVENUE_GROWTH, FACTOR_YEARS, FACTOR_BUSINESS_MODEL, FACTOR_CAPITAL,
    FACTOR_COMPANY_TYPE, FACTOR_MIN_TRANSACTION, FACTOR_PRIOR_ACQUISITIONS, FACTOR_STAKE,
)
from database.models import Listing

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Service for weighted factor scoring.

    Every factor is all-or-nothing except the business model factor,
    which awards its per-flag weight for each listing flag the buyer
    prefers.
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    @property
    def max_score(self) -> int:
        return self.config.weights.max_score

    def score(self, listing: Listing, profile: BuyerCriteriaProfile) -> ScoreBreakdown:
        weights = self.config.weights
        points = {
            FACTOR_INDUSTRY: weights.industry,
            FACTOR_GEOGRAPHY: weights.geography,
            FACTOR_REVENUE: factors.revenue_points(listing, profile, weights),
            FACTOR_EBITDA: factors.ebitda_points(listing, profile, weights),
            FACTOR_REVENUE_GROWTH: factors.revenue_growth_points(listing, profile, weights),
            FACTOR_YEARS: factors.years_in_business_points(listing, profile, weights),
            FACTOR_BUSINESS_MODEL: factors.business_model_points(listing, profile, weights),
            FACTOR_CAPITAL: factors.capital_availability_points(listing, profile, weights),
            FACTOR_COMPANY_TYPE: factors.company_type_points(listing, profile, weights),
            FACTOR_MIN_TRANSACTION: factors.min_transaction_size_points(listing, profile, weights),
            FACTOR_PRIOR_ACQUISITIONS: factors.prior_acquisitions_points(listing, profile, weights),
            FACTOR_STAKE: factors.stake_percentage_points(listing, profile, weights),
        }
        breakdown = ScoreBreakdown(max_score=self.max_score, points=points)
        logger.debug(f"Listing {listing.id} / buyer {profile.buyer_id}: "
                     f"{breakdown.total}/{breakdown.max_score} ({breakdown.percentage}%)")
        return breakdown
