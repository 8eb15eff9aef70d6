"""
Criteria Store - read-only access to buyer criteria profiles.

This module defines the interface the matching core depends on, plus an
in-memory implementation and one backed by the ``buyer_profile`` table.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Set

from sqlalchemy.orm import sessionmaker

from core.criteria.models import BuyerCriteriaProfile
from core.errors import BuyerProfileNotFoundException
from database.database import db_session_scope
from database.repositories import BuyerProfileRepository

logger = logging.getLogger(__name__)


@dataclass
class ProfileFilter:
    """Coarse pre-filter applied by the store before scoring.

    Mirrors the mandatory gate so the matcher does not see profiles that
    could never pass it. The matcher re-checks every gate clause.
    """
    countries: Optional[Set[str]] = None  # any-of against target countries
    industry_sector: Optional[str] = None
    exclude_stopped: bool = True

    def matches(self, profile: BuyerCriteriaProfile) -> bool:
        if self.exclude_stopped and profile.preferences.stop_sending_deals:
            return False
        criteria = profile.target_criteria
        if self.countries is not None and not self.countries.intersection(criteria.countries):
            return False
        if self.industry_sector is not None and self.industry_sector not in criteria.industry_sectors:
            return False
        return True


class CriteriaStore(ABC):
    """
    Abstract interface for buyer criteria providers.
    """

    @abstractmethod
    def get_profile(self, buyer_id: str) -> BuyerCriteriaProfile:
        """
        Return the buyer's profile.

        Raises:
            BuyerProfileNotFoundException: no profile for ``buyer_id``
        """
        pass

    @abstractmethod
    def list_profiles(self, profile_filter: Optional[ProfileFilter] = None) -> Iterator[BuyerCriteriaProfile]:
        """
        Stream profiles passing ``profile_filter`` (all profiles if None).
        """
        pass

    def find_profile(self, buyer_id: str) -> Optional[BuyerCriteriaProfile]:
        try:
            return self.get_profile(buyer_id)
        except BuyerProfileNotFoundException:
            return None


class InMemoryCriteriaStore(CriteriaStore):
    def __init__(self, profiles: Iterable[BuyerCriteriaProfile] = ()):
        self._profiles: Dict[str, BuyerCriteriaProfile] = {}
        for profile in profiles:
            self.put(profile)

    def put(self, profile: BuyerCriteriaProfile) -> None:
        self._profiles[profile.buyer_id] = profile

    def get_profile(self, buyer_id: str) -> BuyerCriteriaProfile:
        profile = self._profiles.get(buyer_id)
        if profile is None:
            raise BuyerProfileNotFoundException(buyer_id)
        return profile

    def list_profiles(self, profile_filter: Optional[ProfileFilter] = None) -> Iterator[BuyerCriteriaProfile]:
        for buyer_id in sorted(self._profiles):
            profile = self._profiles[buyer_id]
            if profile_filter is None or profile_filter.matches(profile):
                yield profile


class SqlCriteriaStore(CriteriaStore):
    """Criteria store reading validated profiles from ``buyer_profile``."""

    def __init__(self, session_factory: sessionmaker, batch_size: int = 500):
        self.session_factory = session_factory
        self.batch_size = batch_size

    def _to_profile(self, buyer_id: str, payload: dict) -> BuyerCriteriaProfile:
        data = dict(payload or {})
        data['buyer_id'] = buyer_id
        return BuyerCriteriaProfile.model_validate(data)

    def get_profile(self, buyer_id: str) -> BuyerCriteriaProfile:
        with db_session_scope(self.session_factory) as session:
            record = BuyerProfileRepository(session).get(buyer_id)
            if record is None:
                raise BuyerProfileNotFoundException(buyer_id)
            return self._to_profile(record.buyer_id, record.payload)

    def list_profiles(self, profile_filter: Optional[ProfileFilter] = None) -> Iterator[BuyerCriteriaProfile]:
        with db_session_scope(self.session_factory) as session:
            for record in BuyerProfileRepository(session).iter_all(batch_size=self.batch_size):
                profile = self._to_profile(record.buyer_id, record.payload)
                if profile_filter is None or profile_filter.matches(profile):
                    yield profile

    def save_profile(self, profile: BuyerCriteriaProfile) -> None:
        """Write a profile; used by the criteria provider and by fixtures."""
        payload = profile.model_dump(mode='json', exclude={'buyer_id'})
        with db_session_scope(self.session_factory) as session:
            BuyerProfileRepository(session).upsert(profile.buyer_id, payload)
