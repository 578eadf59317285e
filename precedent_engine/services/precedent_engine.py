"""Precedent engine service: the in-process surface used by the API and CLI."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import structlog

from ..core.config import EngineConfig, Settings
from ..core.exceptions import ConfigurationError, ValidationError
from ..models.schemas import (
    BatchScoringResult,
    Case,
    CaseFailure,
    ComparativeAnalysis,
    LegalIssue,
    RankedCase,
    RelevanceAnalysis,
    StrategicAdvice,
)
from .argument_structure import ArgumentStructureBuilder
from .authority_valuator import AuthorityValuator
from .case_ranker import CaseRanker
from .case_validator import CaseValidator
from .citation_strategy import CitationStrategyBuilder
from .insight_generator import InsightGenerator
from .relevance_scorer import RelevanceScorer
from .strategic_advisor import StrategicAdvisor

logger = structlog.get_logger(__name__)

CaseInput = Union[Case, Mapping[str, Any]]
IssueInput = Union[LegalIssue, Mapping[str, Any], None]


class PrecedentEngine:
    """Scores, ranks and plans citations for candidate cases.

    Stateless apart from the frozen EngineConfig it is built from, so one
    instance can be shared across threads.
    """

    def __init__(
        self,
        config: Union[EngineConfig, Mapping[str, Any], None] = None,
        current_year: Optional[int] = None,
        max_workers: int = 1,
    ):
        """Initialize the engine.

        Args:
            config: Engine tables; defaults when None
            current_year: Fixed year for temporal scoring (calendar year when None)
            max_workers: Thread pool size used by batch scoring

        Raises:
            ConfigurationError: If the configuration is malformed
        """
        if config is None:
            config = EngineConfig()
        elif not isinstance(config, EngineConfig):
            config = EngineConfig.from_mapping(config)
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")

        self.config = config
        self.max_workers = max_workers

        self.scorer = RelevanceScorer(config)
        self.valuator = AuthorityValuator(config, current_year=current_year)
        self.insights = InsightGenerator(config)
        self.ranker = CaseRanker(self.scorer, self.valuator, self.insights, config.utility_weights)
        self.citations = CitationStrategyBuilder(config.citation_pool_size)
        self.arguments = ArgumentStructureBuilder(config.argument_pool_size)
        self.advisor = StrategicAdvisor(self.ranker, self.valuator, config)

        logger.info(
            "Precedent engine initialized",
            relevance_weights=config.relevance_weights.model_dump(),
            current_year=current_year,
            max_workers=max_workers,
        )

    @classmethod
    def from_settings(cls, settings: Settings, current_year: Optional[int] = None) -> "PrecedentEngine":
        return cls(
            config=settings.load_engine_config(),
            current_year=current_year,
            max_workers=settings.max_workers,
        )

    def score_relevance(self, case: CaseInput, issue: IssueInput) -> RelevanceAnalysis:
        """Relevance analysis of one case.

        Raises:
            ValidationError: If a required case field is missing or invalid
        """
        return self.ranker.analyze(
            CaseValidator.validate_case(case),
            CaseValidator.validate_issue(issue),
        )

    def score_batch(
        self,
        records: Iterable[CaseInput],
        issue: IssueInput,
        max_workers: Optional[int] = None,
    ) -> BatchScoringResult:
        """Score many cases; invalid records are reported, not raised.

        Results keep the input order of the records that validated.
        """
        legal_issue = CaseValidator.validate_issue(issue)
        records = list(records)
        workers = max_workers or self.max_workers

        logger.info("Batch scoring started", case_count=len(records), workers=workers)

        def score_one(record: CaseInput) -> Tuple[Optional[RankedCase], Optional[CaseFailure]]:
            try:
                case = CaseValidator.validate_case(record)
            except ValidationError as e:
                logger.warning("Case rejected", case_id=e.case_id, fields=list(e.fields), error=str(e))
                return None, e.to_failure()
            return RankedCase(case=case, analysis=self.ranker.analyze(case, legal_issue)), None

        if workers > 1 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(score_one, records))
        else:
            outcomes = [score_one(record) for record in records]

        results = [ranked for ranked, _ in outcomes if ranked is not None]
        failures = [failure for _, failure in outcomes if failure is not None]

        logger.info("Batch scoring finished", succeeded=len(results), failed=len(failures))
        return BatchScoringResult(results=results, failures=failures)

    def rank_cases(self, cases: Iterable[CaseInput], issue: IssueInput) -> ComparativeAnalysis:
        """Rank a case set and derive the citation strategy and argument structure."""
        batch = self.score_batch(cases, issue)
        ranked = self.ranker.order(batch.results)
        return self._comparative(ranked, batch.failures)

    def strategic_advice(self, cases: Iterable[CaseInput], issue: IssueInput) -> StrategicAdvice:
        """Litigation posture for a case set; invalid records are left out."""
        batch = self.score_batch(cases, issue)
        ranked = self.ranker.order(batch.results)
        valid_cases = [item.case for item in batch.results]
        return self.advisor.advise(valid_cases, CaseValidator.validate_issue(issue), ranked=ranked)

    def _comparative(self, ranked: List[RankedCase], failures: Sequence[CaseFailure]) -> ComparativeAnalysis:
        return ComparativeAnalysis(
            ranked_cases=ranked,
            best_case=CaseRanker.best_case(ranked),
            recommended_citation=self.citations.build(ranked),
            argument_structure=self.arguments.build(ranked),
            failures=list(failures),
        )
