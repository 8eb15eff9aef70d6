import uuid

from sqlalchemy import Column, Text, Boolean, Integer, Numeric, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship, attribute_keyed_dict

from .base import Base, JSONType, UTCDateTime, utcnow
from .enums import ListingStatus, RewardLevel


def _new_id() -> str:
    return str(uuid.uuid4())


class Listing(Base):
    """
    A sell-side acquisition opportunity.

    Holds the matchable attributes used by the matching engine, the three
    buyer membership sets and the per-buyer invitation records. The
    ``version`` column is the optimistic-concurrency token: every flush
    that updates the row checks and bumps it.
    """
    __tablename__ = 'listing'

    id = Column(Text, primary_key=True, default=_new_id)
    seller_id = Column(Text, nullable=False)
    title = Column(Text, nullable=False, default='')

    status = Column(Text, nullable=False, default=ListingStatus.DRAFT.value)
    reward_level = Column(Text, nullable=False, default=RewardLevel.SEED.value)
    is_public = Column(Boolean, nullable=False, default=False)

    # Matchable attributes
    industry_sector = Column(Text)
    geography = Column(Text)
    years_in_business = Column(Numeric(asdecimal=False))
    stake_percentage = Column(Numeric(asdecimal=False))

    recurring_revenue = Column(Boolean, default=False)
    project_based = Column(Boolean, default=False)
    asset_light = Column(Boolean, default=False)
    asset_heavy = Column(Boolean, default=False)

    trailing_revenue = Column(Numeric(asdecimal=False))
    trailing_ebitda = Column(Numeric(asdecimal=False))
    avg_revenue_growth = Column(Numeric(asdecimal=False))
    asking_price = Column(Numeric(asdecimal=False))
    final_sale_price = Column(Numeric(asdecimal=False))

    # Buyer fit constraints
    allowed_capital_types = Column(JSONType, default=list)
    min_transaction_size = Column(Numeric(asdecimal=False))
    min_prior_acquisitions = Column(Integer)
    allowed_company_types = Column(JSONType, default=list)

    # Buyer membership sets (lists of buyer ids, no duplicates)
    targeted_buyers = Column(JSONType, nullable=False, default=list)
    interested_buyers = Column(JSONType, nullable=False, default=list)
    ever_active_buyers = Column(JSONType, nullable=False, default=list)

    # Timeline
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow)
    published_at = Column(UTCDateTime)
    completed_at = Column(UTCDateTime)

    version = Column(Integer, nullable=False)

    invitations = relationship(
        "ListingInvitation",
        collection_class=attribute_keyed_dict("buyer_id"),
        cascade="all, delete-orphan",
        back_populates="listing",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index('idx_listing_seller', 'seller_id'),
        Index('idx_listing_status', 'status'),
        Index('idx_listing_public', 'is_public', 'status'),
    )

    def __init__(self, **kwargs):
        # Column defaults only apply at flush; transient listings need them too
        kwargs.setdefault('status', ListingStatus.DRAFT.value)
        kwargs.setdefault('reward_level', RewardLevel.SEED.value)
        kwargs.setdefault('is_public', False)
        kwargs.setdefault('title', '')
        for name in ('targeted_buyers', 'interested_buyers', 'ever_active_buyers',
                     'allowed_capital_types', 'allowed_company_types'):
            kwargs.setdefault(name, [])
        for flag in ('recurring_revenue', 'project_based', 'asset_light', 'asset_heavy'):
            kwargs.setdefault(flag, False)
        kwargs.setdefault('created_at', utcnow())
        kwargs.setdefault('updated_at', kwargs['created_at'])
        super().__init__(**kwargs)

    def is_targeted(self, buyer_id: str) -> bool:
        return buyer_id in (self.targeted_buyers or [])

    def is_interested(self, buyer_id: str) -> bool:
        return buyer_id in (self.interested_buyers or [])

    def __repr__(self) -> str:
        return f"<Listing {self.id} status={self.status} v={self.version}>"


class ListingInvitation(Base):
    """
    Invitation record for one buyer on one listing.

    Fixed-shape replacement for a free-form per-buyer status map; the
    listing exposes these rows as a dict keyed by ``buyer_id``.
    """
    __tablename__ = 'listing_invitation'

    id = Column(Text, primary_key=True, default=_new_id)
    listing_id = Column(Text, ForeignKey('listing.id', ondelete='CASCADE'), nullable=False)
    buyer_id = Column(Text, nullable=False)

    invited_at = Column(UTCDateTime, nullable=False, default=utcnow)
    responded_at = Column(UTCDateTime)
    response = Column(Text, nullable=False)  # pending|requested|accepted|rejected
    decision_by = Column(Text)  # buyer|seller|admin|system
    notes = Column(Text)

    listing = relationship("Listing", back_populates="invitations")

    __table_args__ = (
        UniqueConstraint('listing_id', 'buyer_id', name='uq_listing_invitation_buyer'),
        Index('idx_invitation_buyer', 'buyer_id'),
        Index('idx_invitation_response', 'listing_id', 'response'),
    )

    def __repr__(self) -> str:
        return f"<ListingInvitation {self.listing_id}/{self.buyer_id} {self.response}>"
