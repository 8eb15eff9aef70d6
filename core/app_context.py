from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import AppConfig
from core.criteria.store import CriteriaStore, SqlCriteriaStore
from core.invitations.service import InvitationService
from core.ledger.service import LedgerService
from core.matcher.service import MatcherService
from core.reporting.service import ReportingService
from database.database import build_engine, build_session_factory
from database.listing_store import ListingStore
from notification.service import EventPublisher


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    This eliminates duplicate wiring code and provides a single source
    of truth for service instantiation. Every service opens its own
    short-lived sessions from ``session_factory``.
    """
    config: AppConfig
    engine: Engine
    session_factory: sessionmaker
    listing_store: ListingStore
    criteria_store: CriteriaStore
    matcher: MatcherService
    invitations: InvitationService
    ledger: LedgerService
    reporting: ReportingService
    publisher: Optional[EventPublisher] = None

    @classmethod
    def build(
        cls,
        config: AppConfig,
        engine: Optional[Engine] = None,
        criteria_store: Optional[CriteriaStore] = None
    ) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            engine: Existing engine; built from ``config.database.url`` if omitted
            criteria_store: External criteria provider; defaults to the
                ``buyer_profile`` table

        Returns:
            Fully wired AppContext instance
        """
        engine = engine or build_engine(config.database.url)
        session_factory = build_session_factory(engine)

        storage = config.storage
        listing_store = ListingStore(
            session_factory,
            max_attempts=storage.max_write_attempts,
            retry_wait_seconds=storage.retry_wait_seconds,
            lock_rows=storage.lock_rows,
        )
        criteria_store = criteria_store or SqlCriteriaStore(session_factory)

        # Event publisher (lazy - only if enabled)
        publisher = None
        if config.notifications and config.notifications.enabled:
            publisher = cls._build_publisher(config)

        ledger = LedgerService(session_factory, config.reporting.interactions_per_buyer)
        return cls(
            config=config,
            engine=engine,
            session_factory=session_factory,
            listing_store=listing_store,
            criteria_store=criteria_store,
            matcher=MatcherService(config.matching),
            invitations=InvitationService(listing_store, publisher, config.invitations),
            ledger=ledger,
            reporting=ReportingService(listing_store, ledger, criteria_store, config.reporting),
            publisher=publisher,
        )

    @staticmethod
    def _build_publisher(config: AppConfig) -> EventPublisher:
        """Build the event publisher from the notifications section."""
        notification_config = config.notifications
        return EventPublisher(
            redis_url=notification_config.redis_url,
            queue_name=notification_config.queue_name,
            handler=notification_config.handler,
            use_async_queue=notification_config.use_async_queue,
        )
