from .base import Base, UTCDateTime, utcnow
from .enums import (
    ListingStatus, RewardLevel, InvitationResponse, Decision, ActorRole,
    InteractionType, BuyerBucket, RESPONSE_TO_INTERACTION, BUSINESS_MODEL_LABELS,
)
from .listing import Listing, ListingInvitation
from .interaction import InteractionRecord
from .buyer_profile import BuyerProfileRecord

__all__ = [
    'Base',
    'UTCDateTime',
    'utcnow',
    'ListingStatus',
    'RewardLevel',
    'InvitationResponse',
    'Decision',
    'ActorRole',
    'InteractionType',
    'BuyerBucket',
    'RESPONSE_TO_INTERACTION',
    'BUSINESS_MODEL_LABELS',
    'Listing',
    'ListingInvitation',
    'InteractionRecord',
    'BuyerProfileRecord',
]
