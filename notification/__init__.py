"""
Notification Module

Domain events emitted by the listing core and the publisher that hands
them to an external notifier.

Usage:
    from notification import EventPublisher, BuyerResponded

    publisher = EventPublisher()
    publisher.subscribe(my_notifier)
"""

from notification.events import (
    DomainEvent,
    BuyerTargeted,
    AccessRequested,
    BuyerResponded,
    ListingCompleted,
)

from notification.service import EventPublisher

__all__ = [
    # Events
    'DomainEvent',
    'BuyerTargeted',
    'AccessRequested',
    'BuyerResponded',
    'ListingCompleted',
    # Publisher
    'EventPublisher',
]
