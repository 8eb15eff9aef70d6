"""Reporting Module - seller dashboards and status summaries."""
from core.reporting.models import (
    BuyerStatusEntry, StatusSummary, SellerStatistics, EngagementDashboard,
    InteractionTypeStats, DailyEngagement, ListingEngagement,
)
from core.reporting.service import ReportingService

__all__ = [
    'ReportingService', 'BuyerStatusEntry', 'StatusSummary', 'SellerStatistics',
    'EngagementDashboard', 'InteractionTypeStats', 'DailyEngagement', 'ListingEngagement',
]
