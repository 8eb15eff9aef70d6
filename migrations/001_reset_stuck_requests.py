#!/usr/bin/env python3
"""
Migration: return buyer access requests stuck in 'requested' to 'pending'.

Every converted invitation gets decision_by = 'system' and a ledger
record, through the same transition the scheduled expiry uses.

Usage:
    python migrations/001_reset_stuck_requests.py            # every request
    python migrations/001_reset_stuck_requests.py --days 14  # older than 14 days
"""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config_loader import InvitationConfig
from core.invitations import InvitationService
from database.database import get_session_factory
from database.listing_store import ListingStore
from database.models import InvitationResponse
from database.uow import listing_uow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def migrate(days: int = 0) -> int:
    """Reset requested invitations older than ``days``; returns how many changed."""
    session_factory = get_session_factory()
    service = InvitationService(
        ListingStore(session_factory),
        config=InvitationConfig(requested_expiry_days=days),
    )

    with listing_uow(session_factory) as uow:
        listing_ids = uow.listings.ids_with_response(InvitationResponse.REQUESTED.value)
    logger.info(f"Found {len(listing_ids)} listing(s) with requested invitations")

    converted = 0
    for listing_id in listing_ids:
        results = service.expire_stale_requests(listing_id)
        for result in results:
            logger.info(f"Listing {listing_id}: buyer {result.buyer_id} requested -> pending")
        converted += len(results)

    logger.info(f"Migration complete: {converted} invitation(s) reset")
    return converted


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--days", type=int, default=0, help="only reset requests older than this many days")
    args = parser.parse_args()
    try:
        migrate(args.days)
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        sys.exit(1)
