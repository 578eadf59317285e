"""API module exports"""
from . import health
from . import precedents

__all__ = ["health", "precedents"]
