from database.repositories.base import BaseRepository
from database.repositories.listing import ListingRepository
from database.repositories.interaction import InteractionRepository
from database.repositories.buyer_profile import BuyerProfileRepository

__all__ = [
    'BaseRepository',
    'ListingRepository',
    'InteractionRepository',
    'BuyerProfileRepository',
]
