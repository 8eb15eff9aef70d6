#!/usr/bin/env python3
"""
Matcher Models - Data structures for match results.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field

from core.criteria.models import BuyerCriteriaProfile

GATE_STOPPED = 'stop_sending_deals'
GATE_GEOGRAPHY = 'geography'
GATE_INDUSTRY = 'industry'
GATE_MARKETED_DEAL = 'marketed_deal'


@dataclass
class BuyerMatch:
    """
    Result of matching one buyer profile against a listing.

    ``eligible`` is False when any mandatory gate failed; the score fields
    are then zero and ``gate_failures`` names the failed clauses.
    """
    buyer_id: str
    eligible: bool
    total_score: int = 0
    max_score: int = 0
    percentage: int = 0
    breakdown: Dict[str, int] = field(default_factory=dict)
    matched: Dict[str, bool] = field(default_factory=dict)
    gate_failures: List[str] = field(default_factory=list)
    profile: Optional[BuyerCriteriaProfile] = None

    @property
    def rank_key(self):
        return (-self.percentage, self.buyer_id)
