"""Aggregate litigation-posture recommendation across a case set."""

from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from ..core.config import EngineConfig
from ..models.schemas import (
    Case,
    LegalIssue,
    LitigationPosture,
    PrecedenceLevel,
    RankedCase,
    StrategicAdvice,
)
from .authority_valuator import AuthorityValuator
from .case_ranker import CaseRanker

logger = structlog.get_logger(__name__)

# posture -> (rationale, recommended approach)
POSTURE_GUIDANCE: Dict[LitigationPosture, Tuple[str, str]] = {
    LitigationPosture.AGGRESSIVE: (
        "Strong precedential support with high success probability",
        "Lead with strongest precedents and build comprehensive argument",
    ),
    LitigationPosture.MODERATE: (
        "Reasonable precedential support requiring careful argument construction",
        "Focus on best cases and distinguish adverse precedent",
    ),
    LitigationPosture.CONSERVATIVE: (
        "Limited precedential support, consider alternative approaches",
        "Emphasize unique facts and policy arguments",
    ),
}


def average_win_rate(cases: Sequence[Case]) -> float:
    """Mean win rate over the cases that report one; 0.0 when none do."""
    rates = [case.win_rate for case in cases if case.win_rate is not None]
    if not rates:
        return 0.0
    return sum(rates) / len(rates)


class StrategicAdvisor:
    """Classifies the litigation posture and lists advisory risks and strengths."""

    def __init__(self, ranker: CaseRanker, valuator: AuthorityValuator, config: EngineConfig):
        self.ranker = ranker
        self.valuator = valuator
        self.stale_case_age = config.stale_case_age
        self.stale_case_share = config.stale_case_share
        self.thresholds = config.posture_thresholds

    def advise(
        self,
        cases: Sequence[Case],
        issue: LegalIssue,
        ranked: Optional[List[RankedCase]] = None,
    ) -> StrategicAdvice:
        """Posture, risks and strengths for a candidate set.

        Args:
            cases: Candidate cases
            issue: The user's legal issue
            ranked: Ranking of ``cases`` if already computed

        Returns:
            StrategicAdvice for the set
        """
        if ranked is None:
            ranked = self.ranker.rank(cases, issue)

        win_rate = average_win_rate(cases)
        high_value_cases = [c for c in cases if c.precedential_value == PrecedenceLevel.HIGH]

        posture = self.posture(win_rate, len(high_value_cases))
        rationale, approach = POSTURE_GUIDANCE[posture]

        logger.debug(
            "Strategic posture classified",
            posture=posture.value,
            average_win_rate=round(win_rate, 3),
            high_value_cases=len(high_value_cases),
            case_count=len(cases),
        )

        return StrategicAdvice(
            litigation_strategy=posture,
            strategy_rationale=rationale,
            recommended_approach=approach,
            average_win_rate=win_rate,
            high_value_case_count=len(high_value_cases),
            key_risks=self.key_risks(cases),
            strength_areas=self.strength_areas(win_rate, len(high_value_cases)),
            alternative_theories=[],
            best_case=CaseRanker.best_case(ranked),
        )

    def posture(self, win_rate: float, high_value_count: int) -> LitigationPosture:
        if win_rate > self.thresholds.aggressive_win_rate and high_value_count > 0:
            return LitigationPosture.AGGRESSIVE
        if win_rate > self.thresholds.moderate_win_rate:
            return LitigationPosture.MODERATE
        return LitigationPosture.CONSERVATIVE

    def key_risks(self, cases: Sequence[Case]) -> List[str]:
        risks = []

        if any(c.win_rate is not None and c.win_rate < self.thresholds.low_win_rate for c in cases):
            risks.append("Some similar cases have low success rates")

        stale = [c for c in cases if self.valuator.case_age(c) > self.stale_case_age]
        if len(stale) > len(cases) * self.stale_case_share:
            risks.append("Precedent may be dated - verify current applicability")

        return risks

    def strength_areas(self, win_rate: float, high_value_count: int) -> List[str]:
        strengths = []

        if high_value_count > 0:
            strengths.append("Strong precedential authority available")

        if win_rate > self.thresholds.strong_win_rate:
            strengths.append("High historical success rate in similar cases")

        return strengths
