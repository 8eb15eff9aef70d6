#!/usr/bin/env python3
"""
Matcher Service - ranks buyer profiles for a listing.

Each profile goes through the mandatory gate first; profiles that pass
are scored on the optional factors, kept when their percentage reaches
the configured threshold, and returned best first. Ties are broken by
buyer id so the ranking is deterministic.
"""
from typing import Iterable, Iterator, List, Optional
import heapq
import logging

from core.config_loader import MatchingConfig
from core.criteria.models import BuyerCriteriaProfile
from core.criteria.store import CriteriaStore, ProfileFilter
from core.geography import expand_country_or_region
from core.matcher.gates import check_mandatory_gates
from core.matcher.models import BuyerMatch
from core.scorer import ScoringService
from database.models import Listing

logger = logging.getLogger(__name__)


class MatcherService:
    """
    Service for buyer matching.

    Pure with respect to its inputs: nothing is persisted and no events
    are published.
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()
        self.scorer = ScoringService(self.config.scorer)

    @property
    def threshold(self) -> int:
        return self.config.matcher.min_match_percentage

    def score(
        self,
        listing: Listing,
        profile: BuyerCriteriaProfile,
        expanded_geography: Optional[List[str]] = None
    ) -> BuyerMatch:
        """Gate and score a single profile. Gate failures produce an ineligible match."""
        failures = check_mandatory_gates(listing, profile, expanded_geography)
        if failures:
            logger.debug(f"Buyer {profile.buyer_id} gated out of listing {listing.id}: {failures}")
            return BuyerMatch(
                buyer_id=profile.buyer_id,
                eligible=False,
                max_score=self.scorer.max_score,
                gate_failures=failures,
                profile=profile,
            )

        breakdown = self.scorer.score(listing, profile)
        return BuyerMatch(
            buyer_id=profile.buyer_id,
            eligible=True,
            total_score=breakdown.total,
            max_score=breakdown.max_score,
            percentage=breakdown.percentage,
            breakdown=dict(breakdown.points),
            matched=breakdown.matched,
            profile=profile,
        )

    def _qualifying(self, listing: Listing, profiles: Iterable[BuyerCriteriaProfile]) -> Iterator[BuyerMatch]:
        expanded = expand_country_or_region(listing.geography)
        for profile in profiles:
            match = self.score(listing, profile, expanded)
            if match.eligible and match.percentage >= self.threshold:
                yield match

    def rank(self, listing: Listing, profiles: Iterable[BuyerCriteriaProfile]) -> List[BuyerMatch]:
        """
        Rank profiles for a listing.

        Profiles are consumed as a stream; when ``max_results`` is set only
        the best ``max_results`` matches are held in memory.

        Returns:
            Matches at or above the threshold, percentage descending then
            buyer id ascending
        """
        max_results = self.config.matcher.max_results
        qualifying = self._qualifying(listing, profiles)
        if max_results is not None:
            ranked = heapq.nsmallest(max_results, qualifying, key=lambda m: m.rank_key)
        else:
            ranked = sorted(qualifying, key=lambda m: m.rank_key)

        logger.info(f"Listing {listing.id}: {len(ranked)} buyer(s) at or above {self.threshold}%")
        return ranked

    def find_matching_buyers(self, listing: Listing, criteria_store: CriteriaStore) -> List[BuyerMatch]:
        """Rank every profile in ``criteria_store`` that could pass the gate."""
        profile_filter = ProfileFilter(
            countries=set(expand_country_or_region(listing.geography)),
            industry_sector=listing.industry_sector,
            exclude_stopped=True,
        )
        return self.rank(listing, criteria_store.list_profiles(profile_filter))
