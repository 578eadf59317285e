"""Data models for the precedent engine."""

from .schemas import (
    ArgumentStructure,
    BatchScoringResult,
    Case,
    CaseFailure,
    CitationEntry,
    CitationStrategy,
    ComparativeAnalysis,
    Court,
    LegalIssue,
    LitigationPosture,
    PrecedenceLevel,
    PrimaryArgument,
    RankedCase,
    RecommendedUse,
    RelatedCase,
    RelevanceAnalysis,
    RelevanceFactors,
    StrategicAdvice,
    SupportingArgument,
)

__all__ = [
    "ArgumentStructure",
    "BatchScoringResult",
    "Case",
    "CaseFailure",
    "CitationEntry",
    "CitationStrategy",
    "ComparativeAnalysis",
    "Court",
    "LegalIssue",
    "LitigationPosture",
    "PrecedenceLevel",
    "PrimaryArgument",
    "RankedCase",
    "RecommendedUse",
    "RelatedCase",
    "RelevanceAnalysis",
    "RelevanceFactors",
    "StrategicAdvice",
    "SupportingArgument",
]
