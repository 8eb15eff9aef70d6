from sqlalchemy import Column, Text, Integer, ForeignKey, Index

from .base import Base, JSONType, UTCDateTime, utcnow


class InteractionRecord(Base):
    """
    Append-only ledger entry for one buyer action or listing event.

    Rows are written in the same transaction as the state change that
    produced them and are never updated afterwards.
    """
    __tablename__ = 'interaction'

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(Text, ForeignKey('listing.id', ondelete='CASCADE'), nullable=False)
    seller_id = Column(Text, nullable=False)
    buyer_id = Column(Text, nullable=True)  # NULL for listing-level events

    interaction_type = Column(Text, nullable=False)  # view|interest|rejected|completed
    timestamp = Column(UTCDateTime, nullable=False, default=utcnow)
    notes = Column(Text)
    # "metadata" is reserved on declarative classes
    event_metadata = Column('metadata', JSONType, default=dict)

    __table_args__ = (
        Index('idx_interaction_listing', 'listing_id', 'timestamp'),
        Index('idx_interaction_seller', 'seller_id', 'timestamp'),
        Index('idx_interaction_listing_buyer', 'listing_id', 'buyer_id', 'timestamp'),
    )

    def __repr__(self) -> str:
        return f"<InteractionRecord {self.listing_id}/{self.buyer_id} {self.interaction_type}>"
