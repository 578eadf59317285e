"""Pydantic schemas for case records, legal issues and derived analyses.

Attributes are snake_case in Python; every model serializes to (and accepts)
the camelCase names consumed by the presentation layer, e.g. ``keyIssue``,
``overallRelevance``, ``recommendedUse``.
"""

from typing import Any, Dict, List, Optional
from enum import Enum

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = structlog.get_logger(__name__)


class Court(str, Enum):
    """Courts in the VA adjudication hierarchy."""
    FEDERAL_CIRCUIT = "Federal Circuit"
    CAVC = "Court of Appeals for Veterans Claims"
    BVA = "Board of Veterans Appeals"
    REGIONAL_OFFICE = "Regional Office"

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.replace(" ", "").replace("_", "").lower()
        return _COURT_ALIASES.get(key)


_COURT_ALIASES = {
    "federalcircuit": Court.FEDERAL_CIRCUIT,
    "cafc": Court.FEDERAL_CIRCUIT,
    "courtofappealsforveteransclaims": Court.CAVC,
    "cavc": Court.CAVC,
    "boardofveteransappeals": Court.BVA,
    "bva": Court.BVA,
    "regionaloffice": Court.REGIONAL_OFFICE,
    "ro": Court.REGIONAL_OFFICE,
}


class PrecedenceLevel(str, Enum):
    """Author-assigned precedential rank of a case."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendedUse(str, Enum):
    """How a case should be deployed in a brief."""
    PRIMARY_AUTHORITY = "PRIMARY_AUTHORITY"
    SUPPORTING_AUTHORITY = "SUPPORTING_AUTHORITY"
    BACKGROUND_AUTHORITY = "BACKGROUND_AUTHORITY"
    REFERENCE_ONLY = "REFERENCE_ONLY"


class LitigationPosture(str, Enum):
    """Aggregate litigation posture across a case set."""
    AGGRESSIVE = "AGGRESSIVE"
    MODERATE = "MODERATE"
    CONSERVATIVE = "CONSERVATIVE"


class EngineModel(BaseModel):
    """Base for immutable engine models with camelCase JSON names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# Input records

class Case(EngineModel):
    """A case-law record supplied by the case store."""
    id: str
    title: str
    court: Court
    year: int

    category: Optional[str] = None
    subcategory: Optional[str] = None
    key_issue: Optional[str] = None
    facts: Optional[str] = None
    legal_principles: List[str] = Field(default_factory=list)
    precedential_value: Optional[PrecedenceLevel] = None
    still_good_law: bool = False
    win_rate: Optional[float] = Field(default=None, ge=0, le=1)
    holding: Optional[str] = None
    practical_application: Optional[str] = None

    citation: Optional[str] = None
    practitioner_notes: Optional[str] = None
    outcome: Optional[str] = None
    reasoning: Optional[str] = None
    related_cases: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "cartwright-v-derwinski",
                "title": "Cartwright v. Derwinski",
                "citation": "2 Vet.App. 24 (1991)",
                "court": "Court of Appeals for Veterans Claims",
                "year": 1991,
                "category": "PTSD",
                "subcategory": "Stressor Evidence",
                "keyIssue": "Standard for PTSD stressor verification",
                "precedentialValue": "high",
                "stillGoodLaw": True,
                "winRate": 0.85,
            }
        }
    )

    @field_validator("court", mode="before")
    @classmethod
    def resolve_court_alias(cls, v):
        """Accept short court names such as ``CAVC`` or ``FederalCircuit``."""
        if isinstance(v, str):
            return Court(v)
        return v

    @field_validator("precedential_value", mode="before")
    @classmethod
    def unrecognized_precedence_is_missing(cls, v):
        """Unrecognized precedence labels score as missing."""
        if isinstance(v, str):
            normalized = v.strip().lower()
            if normalized in {level.value for level in PrecedenceLevel}:
                return normalized
            logger.warning("Unrecognized precedential value ignored", value=v)
            return None
        return v


class LegalIssue(EngineModel):
    """Description of the user's legal issue."""
    category: Optional[str] = None
    subcategory: Optional[str] = None
    key_issues: List[str] = Field(default_factory=list)
    facts: Optional[str] = None
    legal_principles: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category": "PTSD",
                "subcategory": "Stressor Evidence",
                "keyIssues": ["PTSD stressor verification standard"],
                "facts": "Veteran claimed PTSD based on combat stressors in Vietnam.",
                "legalPrinciples": ["Credible supporting evidence standard"],
            }
        }
    )


# Derived analyses

class RelevanceFactors(EngineModel):
    """The four relevance sub-scores."""
    exact_issue_match: float = Field(default=0.0, ge=0, le=1)
    category_match: float = Field(default=0.0, ge=0, le=1)
    factual_similarity: float = Field(default=0.0, ge=0, le=1)
    legal_principle_match: float = Field(default=0.0, ge=0, le=1)


class RelevanceAnalysis(EngineModel):
    """Relevance, authority and usage guidance for one case against one issue."""
    overall_relevance: float = Field(ge=0, le=1)
    relevance_factors: RelevanceFactors
    precedential_value: float = Field(ge=0, le=1)
    temporal_relevance: float = Field(ge=0, le=1)
    practical_application: str
    strengths: List[str] = Field(default_factory=list)
    limitations: List[str] = Field(default_factory=list)
    recommended_use: RecommendedUse
    binding_on: List[Court] = Field(default_factory=list)


class RankedCase(EngineModel):
    """A case paired with its analysis."""
    case: Case
    analysis: RelevanceAnalysis


class CitationEntry(EngineModel):
    """One citation slot with the reason for its tier."""
    case: Case
    reason: str


class CitationStrategy(EngineModel):
    """Citation buckets by authority tier."""
    primary_authority: List[CitationEntry] = Field(default_factory=list)
    supporting_authority: List[CitationEntry] = Field(default_factory=list)
    background_authority: List[CitationEntry] = Field(default_factory=list)


class PrimaryArgument(EngineModel):
    case: Case
    application: str
    key_quote: Optional[str] = None


class SupportingArgument(EngineModel):
    case: Case
    application: str
    supportive_role: str


class ArgumentStructure(EngineModel):
    """Skeleton of an argument built from the top-ranked cases."""
    opening_statement: str
    primary_argument: PrimaryArgument
    supporting_arguments: List[SupportingArgument] = Field(default_factory=list)
    conclusion: str


class CaseFailure(EngineModel):
    """A candidate record rejected by validation."""
    case_id: Optional[str] = None
    fields: List[str] = Field(default_factory=list)
    message: str


class ComparativeAnalysis(EngineModel):
    """Ranking of a case set with the derived citation plan."""
    ranked_cases: List[RankedCase] = Field(default_factory=list)
    best_case: Optional[RankedCase] = None
    recommended_citation: CitationStrategy = Field(default_factory=CitationStrategy)
    argument_structure: Optional[ArgumentStructure] = None
    failures: List[CaseFailure] = Field(default_factory=list)


class StrategicAdvice(EngineModel):
    """Aggregate litigation recommendation for a case set."""
    litigation_strategy: LitigationPosture
    strategy_rationale: str
    recommended_approach: str
    average_win_rate: float = Field(ge=0, le=1)
    high_value_case_count: int = Field(ge=0)
    key_risks: List[str] = Field(default_factory=list)
    strength_areas: List[str] = Field(default_factory=list)
    alternative_theories: List[str] = Field(default_factory=list)
    best_case: Optional[RankedCase] = None


class BatchScoringResult(EngineModel):
    """Per-case outcome of batch scoring."""
    results: List[RankedCase] = Field(default_factory=list)
    failures: List[CaseFailure] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.failures)


class RelatedCase(EngineModel):
    """A catalog case linked to another by citation or subject matter."""
    case: Case
    relationship: str


# API requests

class RelevanceRequest(BaseModel):
    """Request to score one case against an issue."""
    case: Dict[str, Any]
    issue: Dict[str, Any] = Field(default_factory=dict)


class CaseSetRequest(BaseModel):
    """Request carrying a candidate case set and an issue."""
    cases: List[Dict[str, Any]] = Field(default_factory=list)
    issue: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "cases": [
                    {
                        "id": "cartwright-v-derwinski",
                        "title": "Cartwright v. Derwinski",
                        "court": "CAVC",
                        "year": 1991,
                        "category": "PTSD",
                        "precedentialValue": "high",
                        "stillGoodLaw": True,
                        "winRate": 0.85,
                    }
                ],
                "issue": {"category": "PTSD", "keyIssues": ["stressor verification"]},
            }
        }
    )
