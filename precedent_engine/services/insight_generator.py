"""Narrative insights and usage tier for a scored case."""

from typing import List

from ..core.config import EngineConfig
from ..models.schemas import Case, Court, RecommendedUse


class InsightGenerator:
    """Derives practical application text, strengths, limitations and usage tier.

    Application text and tiers share the same threshold ladder, evaluated
    top-down with the first match winning.
    """

    def __init__(self, config: EngineConfig):
        self.thresholds = config.tier_thresholds
        self.cutoffs = config.insight_thresholds

    def practical_application(self, case: Case, relevance: float, precedence: float) -> str:
        t = self.thresholds
        case_guidance = f" {case.practical_application}" if case.practical_application else ""

        if relevance > t.primary and precedence > t.primary:
            return f"Strong precedent directly applicable to your case.{case_guidance}"
        if relevance > t.supporting and precedence > t.supporting:
            return f"Solid supporting precedent. Use to strengthen legal arguments.{case_guidance}"
        if relevance > t.background_relevance:
            return "Relevant case for general legal principles. Consider for background authority."
        return "Limited direct application. May be useful for broader legal context."

    def strengths(
        self,
        case: Case,
        relevance: float,
        precedence: float,
        temporal: float,
    ) -> List[str]:
        c = self.cutoffs
        strengths = []

        if precedence > c.high_precedence:
            strengths.append(f"High precedential authority from {case.court.value}")

        if relevance > c.high_relevance:
            strengths.append("Direct factual and legal similarity to your case")

        if case.still_good_law:
            strengths.append("Current good law - not overruled or distinguished")

        if case.win_rate is not None and case.win_rate > c.high_win_rate:
            strengths.append(
                f"High success rate ({round(case.win_rate * 100)}%) in similar cases"
            )

        if temporal > c.recent_temporal:
            strengths.append("Recent decision reflecting current legal standards")

        if case.practitioner_notes:
            strengths.append("Well-established in practice with clear application guidance")

        return strengths

    def limitations(
        self,
        case: Case,
        relevance: float,
        precedence: float,
        temporal: float,
    ) -> List[str]:
        c = self.cutoffs
        limitations = []

        if precedence < c.low_precedence:
            limitations.append("Limited precedential authority")

        if relevance < c.low_relevance:
            limitations.append("Limited factual similarity to your specific case")

        if not case.still_good_law:
            limitations.append("May be outdated or superseded by newer law")

        if case.win_rate is not None and case.win_rate < c.low_win_rate:
            limitations.append("Lower success rate in practice")

        if temporal < c.old_temporal:
            limitations.append("Older decision - may not reflect current standards")

        if case.court == Court.BVA:
            limitations.append("Administrative decision - not binding precedent")

        return limitations

    def recommended_use(self, relevance: float, precedence: float) -> RecommendedUse:
        t = self.thresholds

        if relevance > t.primary and precedence > t.primary:
            return RecommendedUse.PRIMARY_AUTHORITY
        if relevance > t.supporting and precedence > t.supporting:
            return RecommendedUse.SUPPORTING_AUTHORITY
        if relevance > t.background_relevance or precedence > t.background_precedence:
            return RecommendedUse.BACKGROUND_AUTHORITY
        return RecommendedUse.REFERENCE_ONLY
