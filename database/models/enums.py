"""
Enumerations shared by the storage models and the domain services.

All enums subclass ``str`` so values read back from text columns compare
equal to the members (``"accepted" == InvitationResponse.ACCEPTED``).
"""

from enum import Enum


class ListingStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class RewardLevel(str, Enum):
    SEED = "Seed"
    BLOOM = "Bloom"
    FRUIT = "Fruit"


class InvitationResponse(str, Enum):
    """Stored per-buyer response on a listing."""
    PENDING = "pending"
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Decision(str, Enum):
    """Decision submitted by a buyer or an admin."""
    ACTIVE = "active"
    PENDING = "pending"
    REJECTED = "rejected"

    def to_response(self) -> InvitationResponse:
        if self is Decision.ACTIVE:
            return InvitationResponse.ACCEPTED
        return InvitationResponse(self.value)


class ActorRole(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"
    SYSTEM = "system"


class InteractionType(str, Enum):
    VIEW = "view"
    INTEREST = "interest"
    REJECTED = "rejected"
    COMPLETED = "completed"


class BuyerBucket(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    REJECTED = "rejected"
    COMPLETED = "completed"


RESPONSE_TO_INTERACTION = {
    InvitationResponse.ACCEPTED: InteractionType.INTEREST,
    InvitationResponse.REJECTED: InteractionType.REJECTED,
    InvitationResponse.PENDING: InteractionType.VIEW,
    InvitationResponse.REQUESTED: InteractionType.VIEW,
}

BUSINESS_MODEL_LABELS = {
    'recurring_revenue': "Recurring Revenue",
    'project_based': "Project-Based",
    'asset_light': "Asset Light",
    'asset_heavy': "Asset Heavy",
}
