"""Comparison engine and service."""

from app.services.compare.engine import TiePolicy, compare, decide_winner, differential, rank
from app.services.compare.service import CompareService

__all__ = ["CompareService", "TiePolicy", "compare", "decide_winner", "differential", "rank"]
