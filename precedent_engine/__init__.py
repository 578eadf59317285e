"""Precedent relevance, authority and citation strategy engine."""

__version__ = "0.1.0"
