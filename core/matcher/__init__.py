"""Matcher Module - mandatory gate, threshold and ranking."""
from core.matcher.models import (
    BuyerMatch, GATE_STOPPED, GATE_GEOGRAPHY, GATE_INDUSTRY, GATE_MARKETED_DEAL
)
from core.matcher.gates import check_mandatory_gates
from core.matcher.service import MatcherService

__all__ = [
    'MatcherService', 'BuyerMatch', 'check_mandatory_gates',
    'GATE_STOPPED', 'GATE_GEOGRAPHY', 'GATE_INDUSTRY', 'GATE_MARKETED_DEAL'
]
