"""
Pydantic models for buyer acquisition criteria.

Profiles are owned by an external criteria store and are read-only to
the matching core; validation happens once when a profile is loaded.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class TargetCriteria(BaseModel):
    """What a buyer is looking for. Absent bounds mean "no constraint"."""
    model_config = ConfigDict(extra='ignore')

    countries: List[str] = Field(default_factory=list)
    industry_sectors: List[str] = Field(default_factory=list)
    revenue_min: Optional[float] = None
    revenue_max: Optional[float] = None
    ebitda_min: Optional[float] = None
    ebitda_max: Optional[float] = None
    transaction_size_min: Optional[float] = None
    transaction_size_max: Optional[float] = None
    revenue_growth: Optional[float] = None  # minimum average growth, percent
    min_years_in_business: Optional[float] = None
    min_stake_percent: Optional[float] = None
    preferred_business_models: List[str] = Field(default_factory=list)


class BuyerPreferences(BaseModel):
    model_config = ConfigDict(extra='ignore')

    stop_sending_deals: bool = False
    do_not_send_marketed_deals: bool = False
    allow_buyer_like_deals: bool = False


class BuyerCriteriaProfile(BaseModel):
    """A buyer's acquisition criteria plus the display data used in reports."""
    model_config = ConfigDict(extra='ignore')

    buyer_id: str
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    company_name: Optional[str] = None
    company_type: Optional[str] = None
    capital_entity: Optional[str] = None
    deals_completed_last_5_years: Optional[int] = None
    average_deal_size: Optional[float] = None
    target_criteria: TargetCriteria = Field(default_factory=TargetCriteria)
    preferences: BuyerPreferences = Field(default_factory=BuyerPreferences)
