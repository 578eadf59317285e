"""Scoring, ranking and strategy services."""

from .case_catalog import CaseCatalog
from .precedent_engine import PrecedentEngine

__all__ = ["CaseCatalog", "PrecedentEngine"]
