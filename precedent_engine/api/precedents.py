"""Precedent analysis API endpoints."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, status
import structlog

from ..models.schemas import (
    BatchScoringResult,
    CaseSetRequest,
    ComparativeAnalysis,
    RelatedCase,
    RelevanceAnalysis,
    RelevanceRequest,
    StrategicAdvice,
)
from ..services.case_catalog import CaseCatalog
from ..services.precedent_engine import PrecedentEngine

logger = structlog.get_logger(__name__)
router = APIRouter()


def get_engine(request: Request) -> PrecedentEngine:
    return request.app.state.engine


def get_catalog(request: Request) -> CaseCatalog:
    return request.app.state.catalog


@router.post(
    "/relevance",
    response_model=RelevanceAnalysis,
    summary="Score one case",
    description="Relevance, authority and usage tier of one case against a legal issue",
)
def score_relevance(
    request: RelevanceRequest,
    engine: PrecedentEngine = Depends(get_engine),
) -> RelevanceAnalysis:
    logger.info("Scoring case relevance", case_id=request.case.get("id"))
    return engine.score_relevance(request.case, request.issue)


@router.post(
    "/rank",
    response_model=ComparativeAnalysis,
    summary="Rank cases",
    description="Rank candidate cases and build the citation strategy and argument structure",
)
def rank_cases(
    request: CaseSetRequest,
    engine: PrecedentEngine = Depends(get_engine),
) -> ComparativeAnalysis:
    logger.info("Ranking cases", case_count=len(request.cases))
    analysis = engine.rank_cases(request.cases, request.issue)

    if not analysis.ranked_cases:
        logger.warning("No valid cases to rank", failures=len(analysis.failures))

    return analysis


@router.post(
    "/strategy",
    response_model=StrategicAdvice,
    summary="Strategic advice",
    description="Aggregate litigation posture for a candidate case set",
)
def strategic_advice(
    request: CaseSetRequest,
    engine: PrecedentEngine = Depends(get_engine),
) -> StrategicAdvice:
    logger.info("Generating strategic advice", case_count=len(request.cases))
    return engine.strategic_advice(request.cases, request.issue)


@router.post(
    "/batch",
    response_model=BatchScoringResult,
    summary="Batch scoring",
    description="Score every candidate; invalid records are reported per case",
)
def score_batch(
    request: CaseSetRequest,
    engine: PrecedentEngine = Depends(get_engine),
) -> BatchScoringResult:
    return engine.score_batch(request.cases, request.issue)


@router.get(
    "/catalog/win-rate",
    summary="Category win rate",
    description="Mean win rate of the catalog cases in one category, as a percentage",
)
def category_win_rate(
    category: str,
    catalog: CaseCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    cases = catalog.all(category)
    return {"category": category, "winRate": catalog.win_rate(category), "caseCount": len(cases)}


@router.get(
    "/catalog/{case_id}/success-factors",
    summary="Success factors",
    description="Features that make a catalog case persuasive",
)
def success_factors(
    case_id: str,
    catalog: CaseCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    if case_id not in catalog:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Case {case_id} not found",
        )
    return {"caseId": case_id, "factors": catalog.success_factors(case_id)}


@router.get(
    "/catalog/{case_id}/related",
    response_model=List[RelatedCase],
    summary="Related cases",
    description="Catalog cases cited by, citing, or similar to the given case",
)
def related_cases(
    case_id: str,
    catalog: CaseCatalog = Depends(get_catalog),
) -> List[RelatedCase]:
    if case_id not in catalog:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Case {case_id} not found",
        )
    return catalog.related(case_id)


@router.get(
    "/catalog/{case_id}/citation",
    summary="Formatted citation",
    description="Citation of a catalog case in bluebook or alwd style",
)
def formatted_citation(
    case_id: str,
    style: str = "bluebook",
    catalog: CaseCatalog = Depends(get_catalog),
) -> Dict[str, str]:
    if case_id not in catalog:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Case {case_id} not found",
        )
    return {"caseId": case_id, "style": style, "citation": catalog.format_citation(case_id, style)}
