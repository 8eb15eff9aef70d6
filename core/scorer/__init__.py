#!/usr/bin/env python3
"""
Scoring Module - weighted optional factors.

Public API:
- ScoringService: scores a listing against one buyer profile
- ScoreBreakdown: per-factor points, total and percentage

- models.py: Data structures and factor names
- factors.py: One rule per factor
- service.py: ScoringService orchestrator
"""

from core.scorer.models import ScoreBreakdown, FACTORS
from core.scorer.service import ScoringService

__all__ = ['ScoringService', 'ScoreBreakdown', 'FACTORS']
