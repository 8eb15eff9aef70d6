#!/usr/bin/env python3
"""
Service-layer exceptions for the matching and invitation core.

Transport layers map these to their own responses; the core never
retries or swallows them.
"""

from dataclasses import dataclass
from typing import List, Optional


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundException(ServiceException):
    """Raised when a listing or buyer profile does not exist."""
    pass


class ListingNotFoundException(NotFoundException):
    def __init__(self, listing_id: str):
        super().__init__(f"Listing with ID \"{listing_id}\" not found")
        self.listing_id = listing_id


class BuyerProfileNotFoundException(NotFoundException):
    def __init__(self, buyer_id: str):
        super().__init__(f"Buyer profile for \"{buyer_id}\" not found")
        self.buyer_id = buyer_id


class PermissionDeniedException(ServiceException):
    """Raised when the actor may not perform the operation."""
    pass


class InvalidTransitionException(ServiceException):
    """Raised when a lifecycle transition is attempted out of order."""
    pass


class ConcurrentModificationException(ServiceException):
    """Raised when an optimistic write keeps conflicting with other writers."""
    pass


@dataclass(frozen=True)
class ConsistencyIssue:
    """One detected divergence between a listing's sets and invitation map."""
    listing_id: str
    buyer_id: str
    rule: str  # duplicate|interested_accepted|accepted_interested|ever_active|targeted|ledger_only
    detail: str


class ConsistencyViolationException(ServiceException):
    """Raised when a write would leave the listing's denormalised views disagreeing."""

    def __init__(self, issues: List[ConsistencyIssue], message: Optional[str] = None):
        self.issues = list(issues)
        if message is None:
            rules = ", ".join(sorted({i.rule for i in self.issues}))
            message = f"{len(self.issues)} consistency issue(s): {rules}"
        super().__init__(message)
