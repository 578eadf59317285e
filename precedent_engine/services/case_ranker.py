"""Scoring and ranking of candidate cases against an issue."""

from typing import Iterable, List, Optional, Sequence

from ..core.config import UtilityWeights
from ..models.schemas import Case, LegalIssue, RankedCase, RelevanceAnalysis
from .authority_valuator import AuthorityValuator
from .insight_generator import InsightGenerator
from .relevance_scorer import RelevanceScorer


class CaseRanker:
    """Builds a RelevanceAnalysis per case and orders cases by utility.

    utility = w_rel * overallRelevance + w_prec * precedentialValue
    """

    def __init__(
        self,
        scorer: RelevanceScorer,
        valuator: AuthorityValuator,
        insights: InsightGenerator,
        utility_weights: UtilityWeights,
    ):
        self.scorer = scorer
        self.valuator = valuator
        self.insights = insights
        self.utility_weights = utility_weights

    def analyze(self, case: Case, issue: LegalIssue) -> RelevanceAnalysis:
        """Full relevance analysis of one case."""
        factors = self.scorer.score(case, issue)
        relevance = self.scorer.overall(factors)
        precedence = self.valuator.precedential_value(case)
        temporal = self.valuator.temporal_relevance(case)

        return RelevanceAnalysis(
            overall_relevance=relevance,
            relevance_factors=factors,
            precedential_value=precedence,
            temporal_relevance=temporal,
            practical_application=self.insights.practical_application(case, relevance, precedence),
            strengths=self.insights.strengths(case, relevance, precedence, temporal),
            limitations=self.insights.limitations(case, relevance, precedence, temporal),
            recommended_use=self.insights.recommended_use(relevance, precedence),
            binding_on=self.valuator.binding_on(case.court),
        )

    def utility(self, analysis: RelevanceAnalysis) -> float:
        return (
            self.utility_weights.relevance * analysis.overall_relevance
            + self.utility_weights.precedence * analysis.precedential_value
        )

    def rank(self, cases: Iterable[Case], issue: LegalIssue) -> List[RankedCase]:
        """Analyze and rank cases, highest utility first."""
        scored = [RankedCase(case=case, analysis=self.analyze(case, issue)) for case in cases]
        return self.order(scored)

    def order(self, scored: Iterable[RankedCase]) -> List[RankedCase]:
        """Stable descending sort by utility; ties keep their input order."""
        return sorted(scored, key=lambda ranked: self.utility(ranked.analysis), reverse=True)

    @staticmethod
    def best_case(ranked: Sequence[RankedCase]) -> Optional[RankedCase]:
        return ranked[0] if ranked else None
