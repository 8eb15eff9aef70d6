"""Ledger Module - read access to the interaction history."""
from core.ledger.models import (
    LedgerEntry, LedgerSummary, BuyerInteractionSummary, LEDGER_STATUS, ACTION_DESCRIPTIONS, ledger_status
)
from core.ledger.service import LedgerService

__all__ = [
    'LedgerService', 'LedgerEntry', 'LedgerSummary', 'BuyerInteractionSummary',
    'LEDGER_STATUS', 'ACTION_DESCRIPTIONS', 'ledger_status',
]
