#!/usr/bin/env python3
"""
Factor Calculations - one all-or-nothing rule per optional factor.

Buyer-side bounds that are absent are wildcards. Listing-side figures
that are absent count as zero, except the stake percentage, where an
absent value on either side awards the factor.
"""

from typing import Optional

from core.config_loader import FactorWeights
from core.criteria.models import BuyerCriteriaProfile
from database.models import Listing, BUSINESS_MODEL_LABELS


def _or_zero(value) -> float:
    return float(value) if value is not None else 0.0


def _within_bounds(value: float, lower: Optional[float], upper: Optional[float]) -> bool:
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


def revenue_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    criteria = profile.target_criteria
    revenue = _or_zero(listing.trailing_revenue)
    return weights.revenue if _within_bounds(revenue, criteria.revenue_min, criteria.revenue_max) else 0


def ebitda_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    """EBITDA range; a buyer minimum of exactly 0 means "strictly profitable"."""
    criteria = profile.target_criteria
    ebitda = _or_zero(listing.trailing_ebitda)
    if criteria.ebitda_min is not None:
        if criteria.ebitda_min == 0:
            if not ebitda > 0:
                return 0
        elif ebitda < criteria.ebitda_min:
            return 0
    if criteria.ebitda_max is not None and ebitda > criteria.ebitda_max:
        return 0
    return weights.ebitda


def revenue_growth_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    minimum = profile.target_criteria.revenue_growth
    if minimum is None or _or_zero(listing.avg_revenue_growth) >= minimum:
        return weights.revenue_growth
    return 0


def years_in_business_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    minimum = profile.target_criteria.min_years_in_business
    if minimum is None or _or_zero(listing.years_in_business) >= minimum:
        return weights.years_in_business
    return 0


def business_model_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    preferred = set(profile.target_criteria.preferred_business_models or [])
    points = 0
    for flag, label in BUSINESS_MODEL_LABELS.items():
        if getattr(listing, flag, False) and label in preferred:
            points += weights.business_model_per_flag
    return points


def capital_availability_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    allowed = listing.allowed_capital_types or []
    if not allowed or profile.capital_entity in allowed:
        return weights.capital_availability
    return 0


def company_type_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    allowed = listing.allowed_company_types or []
    if not allowed or profile.company_type in allowed:
        return weights.company_type
    return 0


def min_transaction_size_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    required = listing.min_transaction_size
    if required is None or _or_zero(profile.average_deal_size) >= float(required):
        return weights.min_transaction_size
    return 0


def prior_acquisitions_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    required = listing.min_prior_acquisitions
    if required is None or _or_zero(profile.deals_completed_last_5_years) >= float(required):
        return weights.prior_acquisitions
    return 0


def stake_percentage_points(listing: Listing, profile: BuyerCriteriaProfile, weights: FactorWeights) -> int:
    minimum = profile.target_criteria.min_stake_percent
    offered = listing.stake_percentage
    if minimum is None or offered is None or float(offered) >= minimum:
        return weights.stake_percentage
    return 0
