#!/usr/bin/env python3
"""
Scoring Models - Data structures for weighted factor scores.
"""

from typing import Dict
from dataclasses import dataclass, field

FACTOR_INDUSTRY = 'industry'
FACTOR_GEOGRAPHY = 'geography'
FACTOR_REVENUE = 'revenue'
FACTOR_EBITDA = 'ebitda'
FACTOR_REVENUE_GROWTH = 'revenue_growth'
FACTOR_YEARS = 'years_in_business'
FACTOR_BUSINESS_MODEL = 'business_model'
FACTOR_CAPITAL = 'capital_availability'
FACTOR_COMPANY_TYPE = 'company_type'
FACTOR_MIN_TRANSACTION = 'min_transaction_size'
FACTOR_PRIOR_ACQUISITIONS = 'prior_acquisitions'
FACTOR_STAKE = 'stake_percentage'

FACTORS = (
    FACTOR_INDUSTRY,
    FACTOR_GEOGRAPHY,
    FACTOR_REVENUE,
    FACTOR_EBITDA,
    FACTOR_REVENUE_GROWTH,
    FACTOR_YEARS,
    FACTOR_BUSINESS_MODEL,
    FACTOR_CAPITAL,
    FACTOR_COMPANY_TYPE,
    FACTOR_MIN_TRANSACTION,
    FACTOR_PRIOR_ACQUISITIONS,
    FACTOR_STAKE,
)


@dataclass
class ScoreBreakdown:
    """Points awarded per factor and the resulting percentage."""
    max_score: int
    points: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.points.values())

    @property
    def percentage(self) -> int:
        if self.max_score <= 0:
            return 0
        return int(round(self.total / self.max_score * 100))

    @property
    def matched(self) -> Dict[str, bool]:
        return {name: self.points.get(name, 0) > 0 for name in FACTORS}
