"""Shared fixtures: a fixed current year and case/issue builders."""

import pytest

from precedent_engine.core.config import EngineConfig
from precedent_engine.models.schemas import (
    Case,
    LegalIssue,
    RankedCase,
    RecommendedUse,
    RelevanceAnalysis,
    RelevanceFactors,
)
from precedent_engine.services.precedent_engine import PrecedentEngine

CURRENT_YEAR = 2025


def make_case(case_id: str = "case-1", **overrides) -> Case:
    fields = {
        "id": case_id,
        "title": f"{case_id} v. Secretary",
        "court": "CAVC",
        "year": CURRENT_YEAR - 3,
    }
    fields.update(overrides)
    return Case.model_validate(fields)


def make_ranked(
    case_id: str,
    use: RecommendedUse,
    relevance: float = 0.5,
    precedence: float = 0.5,
    **case_fields,
) -> RankedCase:
    """A ranked case with a hand-set analysis, for builders that only read the tier."""
    analysis = RelevanceAnalysis(
        overall_relevance=relevance,
        relevance_factors=RelevanceFactors(),
        precedential_value=precedence,
        temporal_relevance=1.0,
        practical_application=f"Application of {case_id}",
        recommended_use=use,
    )
    return RankedCase(case=make_case(case_id, **case_fields), analysis=analysis)


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def engine():
    return PrecedentEngine(current_year=CURRENT_YEAR)


@pytest.fixture
def ptsd_issue():
    return LegalIssue(
        category="PTSD",
        subcategory="Stressor Evidence",
        key_issues=["PTSD stressor verification standard"],
        facts="Combat veteran reports stressor during convoy ambush",
        legal_principles=["Credible supporting evidence standard"],
    )


@pytest.fixture
def case_a(ptsd_issue):
    """Binding, recent, good-law case matching the PTSD issue on every factor."""
    return {
        "id": "case-a",
        "title": "Alpha v. Secretary",
        "court": "Federal Circuit",
        "year": CURRENT_YEAR - 2,
        "category": "PTSD",
        "subcategory": "Stressor Evidence",
        "keyIssue": "PTSD stressor verification standard",
        "facts": "Combat veteran reports stressor during convoy ambush",
        "legalPrinciples": ["Credible supporting evidence standard"],
        "precedentialValue": "high",
        "stillGoodLaw": True,
        "winRate": 0.9,
        "holding": "Combat stressors need no corroboration beyond the veteran's own account.",
        "practicalApplication": "Cite for relaxed corroboration of combat stressors.",
    }


@pytest.fixture
def case_b():
    """Old, overturned-in-practice Board decision on an unrelated subject."""
    return {
        "id": "case-b",
        "title": "Bravo v. Secretary",
        "court": "BVA",
        "year": CURRENT_YEAR - 25,
        "category": "Hearing",
        "keyIssue": "Tinnitus rating schedule",
        "facts": "Machinist exposed to industrial noise",
        "legalPrinciples": ["Schedular rating for tinnitus"],
        "precedentialValue": "low",
        "stillGoodLaw": False,
        "winRate": 0.3,
    }
