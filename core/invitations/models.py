#!/usr/bin/env python3
"""
Invitation Models - actor context and transition results.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from database.models import ActorRole, InteractionRecord
from notification.events import DomainEvent


@dataclass(frozen=True)
class ActorContext:
    """Already-authenticated caller identity passed in by the transport layer."""
    actor_id: str
    role: ActorRole

    @classmethod
    def buyer(cls, buyer_id: str) -> "ActorContext":
        return cls(buyer_id, ActorRole.BUYER)

    @classmethod
    def seller(cls, seller_id: str) -> "ActorContext":
        return cls(seller_id, ActorRole.SELLER)

    @classmethod
    def admin(cls, admin_id: str) -> "ActorContext":
        return cls(admin_id, ActorRole.ADMIN)

    @classmethod
    def system(cls) -> "ActorContext":
        return cls("system", ActorRole.SYSTEM)

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN


@dataclass
class TargetResult:
    listing_id: str
    added: List[str] = field(default_factory=list)
    already_targeted: List[str] = field(default_factory=list)
    interactions: List[InteractionRecord] = field(default_factory=list)
    events: List[DomainEvent] = field(default_factory=list)


@dataclass
class TransitionResult:
    """
    Outcome of one per-buyer transition.

    ``changed`` is False when the stored response was already the
    requested one (the transition is still recorded in the ledger).
    """
    listing_id: str
    buyer_id: str
    changed: bool
    previous_response: Optional[str] = None
    response: Optional[str] = None
    interactions: List[InteractionRecord] = field(default_factory=list)
    events: List[DomainEvent] = field(default_factory=list)


@dataclass
class LifecycleResult:
    listing_id: str
    previous_status: str
    status: str
    changed: bool
    interactions: List[InteractionRecord] = field(default_factory=list)
    events: List[DomainEvent] = field(default_factory=list)
