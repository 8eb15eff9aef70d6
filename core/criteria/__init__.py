"""Criteria Module - read-only buyer acquisition criteria."""
from core.criteria.models import BuyerCriteriaProfile, TargetCriteria, BuyerPreferences
from core.criteria.store import CriteriaStore, InMemoryCriteriaStore, SqlCriteriaStore, ProfileFilter

__all__ = [
    'BuyerCriteriaProfile', 'TargetCriteria', 'BuyerPreferences',
    'CriteriaStore', 'InMemoryCriteriaStore', 'SqlCriteriaStore', 'ProfileFilter',
]
