#!/usr/bin/env python3
"""
Audit every listing for disagreements between its buyer sets and its
invitation records.

Issues are reported, not repaired: fix the data deliberately (for
example with an admin override) once the cause is understood. Exits
with status 1 when any issue is found.
"""
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.consistency import find_consistency_issues
from database.database import get_session_factory
from database.uow import listing_uow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def audit() -> int:
    session_factory = get_session_factory()
    with listing_uow(session_factory) as uow:
        listing_ids = uow.listings.all_ids()

    total = 0
    for listing_id in listing_ids:
        with listing_uow(session_factory) as uow:
            issues = find_consistency_issues(uow.listings.get_by_id(listing_id))
        for issue in issues:
            logger.warning(f"Listing {issue.listing_id} buyer {issue.buyer_id}: {issue.rule} ({issue.detail})")
        total += len(issues)

    logger.info(f"Audited {len(listing_ids)} listing(s): {total} issue(s)")
    return total


if __name__ == "__main__":
    sys.exit(1 if audit() else 0)
