"""Citation buckets derived from the usage tier of top-ranked cases."""

from typing import Dict, List, Sequence

from ..models.schemas import CitationEntry, CitationStrategy, RankedCase, RecommendedUse

TIER_REASONS: Dict[RecommendedUse, str] = {
    RecommendedUse.PRIMARY_AUTHORITY: "Direct precedent with high relevance and authority",
    RecommendedUse.SUPPORTING_AUTHORITY: "Supporting precedent reinforcing legal principles",
    RecommendedUse.BACKGROUND_AUTHORITY: "Background authority for legal context",
}


class CitationStrategyBuilder:
    """Partitions ranked cases into primary, supporting and background authority."""

    def __init__(self, pool_size: int = 5):
        self.pool_size = pool_size

    def build(self, ranked: Sequence[RankedCase]) -> CitationStrategy:
        """Bucket the top ``pool_size`` cases; REFERENCE_ONLY cases are left out."""
        buckets: Dict[RecommendedUse, List[CitationEntry]] = {tier: [] for tier in TIER_REASONS}

        for item in ranked[: self.pool_size]:
            tier = item.analysis.recommended_use
            if tier not in TIER_REASONS:
                continue
            buckets[tier].append(CitationEntry(case=item.case, reason=TIER_REASONS[tier]))

        return CitationStrategy(
            primary_authority=buckets[RecommendedUse.PRIMARY_AUTHORITY],
            supporting_authority=buckets[RecommendedUse.SUPPORTING_AUTHORITY],
            background_authority=buckets[RecommendedUse.BACKGROUND_AUTHORITY],
        )
