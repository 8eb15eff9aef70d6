#!/usr/bin/env python3
"""
Mandatory gate: clauses a buyer must pass before any scoring happens.
"""

from typing import List, Optional

from core.criteria.models import BuyerCriteriaProfile
from core.geography import expand_country_or_region
from core.matcher.models import GATE_STOPPED, GATE_GEOGRAPHY, GATE_INDUSTRY, GATE_MARKETED_DEAL
from database.models import Listing, RewardLevel


def check_mandatory_gates(
    listing: Listing,
    profile: BuyerCriteriaProfile,
    expanded_geography: Optional[List[str]] = None
) -> List[str]:
    """
    Return the names of the failed gate clauses (empty means eligible).

    Args:
        listing: Listing being matched
        profile: Buyer profile under test
        expanded_geography: Precomputed expansion of ``listing.geography``;
            computed here when omitted
    """
    failures: List[str] = []
    criteria = profile.target_criteria
    preferences = profile.preferences

    if preferences.stop_sending_deals:
        failures.append(GATE_STOPPED)

    if expanded_geography is None:
        expanded_geography = expand_country_or_region(listing.geography)
    if not set(expanded_geography).intersection(criteria.countries):
        failures.append(GATE_GEOGRAPHY)

    if not listing.industry_sector or listing.industry_sector not in criteria.industry_sectors:
        failures.append(GATE_INDUSTRY)

    if preferences.do_not_send_marketed_deals and listing.reward_level == RewardLevel.SEED:
        failures.append(GATE_MARKETED_DEAL)

    return failures
