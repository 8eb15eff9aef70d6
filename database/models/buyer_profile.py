from sqlalchemy import Column, Text

from .base import Base, JSONType, UTCDateTime, utcnow


class BuyerProfileRecord(Base):
    """
    Stored buyer criteria document, read by the SQL criteria store.

    The payload is validated into ``BuyerCriteriaProfile`` on read. Rows
    are written by the criteria provider, never by the invitation flow.
    """
    __tablename__ = 'buyer_profile'

    buyer_id = Column(Text, primary_key=True)
    payload = Column(JSONType, nullable=False, default=dict)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
