"""Multi-factor relevance between a case and a legal issue.

Similarity is plain token overlap: text is lowercased, split on spaces and
only words longer than three characters are kept.
"""

from typing import Iterable, Optional, Set

from ..core.config import EngineConfig
from ..models.schemas import Case, LegalIssue, RelevanceFactors

MIN_TOKEN_LENGTH = 4


def tokenize(text: Optional[str]) -> Set[str]:
    """Distinct lowercase words longer than three characters."""
    if not text:
        return set()
    return {word for word in text.lower().split(" ") if len(word) >= MIN_TOKEN_LENGTH}


def _lower_all(values: Iterable[str]) -> list:
    return [value.lower() for value in values if value]


class RelevanceScorer:
    """Scores the four relevance factors. Pure; never raises on missing data."""

    def __init__(self, config: EngineConfig):
        self.weights = config.relevance_weights
        self.related_categories = config.related_categories

    def score(self, case: Case, issue: LegalIssue) -> RelevanceFactors:
        """Compute all four relevance factors for a case against an issue."""
        return RelevanceFactors(
            exact_issue_match=self.exact_issue_match(case, issue),
            category_match=self.category_match(case, issue),
            factual_similarity=self.factual_similarity(case, issue),
            legal_principle_match=self.legal_principle_match(case, issue),
        )

    def overall(self, factors: RelevanceFactors) -> float:
        """Weighted sum of the factors, clamped to [0, 1]."""
        total = (
            self.weights.exact_issue_match * factors.exact_issue_match
            + self.weights.category_match * factors.category_match
            + self.weights.factual_similarity * factors.factual_similarity
            + self.weights.legal_principle_match * factors.legal_principle_match
        )
        return min(max(total, 0.0), 1.0)

    def exact_issue_match(self, case: Case, issue: LegalIssue) -> float:
        """Best overlap between the case's key issue and any of the issue's key issues."""
        if not issue.key_issues:
            return 0.0

        case_tokens = tokenize(case.key_issue)
        best = 0.0
        for key_issue in issue.key_issues:
            issue_tokens = tokenize(key_issue)
            denominator = max(len(case_tokens), len(issue_tokens))
            if denominator == 0:
                continue
            best = max(best, len(case_tokens & issue_tokens) / denominator)

        return min(best, 1.0)

    def category_match(self, case: Case, issue: LegalIssue) -> float:
        """1.0 same category, 0.8 same subcategory, 0.6 related category, else 0."""
        if not issue.category:
            return 0.0

        issue_category = issue.category.lower()
        case_category = case.category.lower() if case.category else None

        if case_category == issue_category:
            return 1.0

        if (
            case.subcategory
            and issue.subcategory
            and case.subcategory.lower() == issue.subcategory.lower()
        ):
            return 0.8

        if case_category and case_category in self.related_categories.get(issue_category, []):
            return 0.6

        return 0.0

    def factual_similarity(self, case: Case, issue: LegalIssue) -> float:
        """Shared fact tokens over the union of fact tokens."""
        if not case.facts or not issue.facts:
            return 0.0

        case_tokens = tokenize(case.facts)
        issue_tokens = tokenize(issue.facts)
        union = case_tokens | issue_tokens
        if not union:
            return 0.0

        return min(len(case_tokens & issue_tokens) / len(union), 1.0)

    def legal_principle_match(self, case: Case, issue: LegalIssue) -> float:
        """Share of issue principles contained in (or containing) a case principle."""
        case_principles = _lower_all(case.legal_principles)
        issue_principles = _lower_all(issue.legal_principles)
        if not case_principles or not issue_principles:
            return 0.0

        matches = sum(
            1
            for principle in issue_principles
            if any(cp in principle or principle in cp for cp in case_principles)
        )
        return min(matches / max(len(case_principles), len(issue_principles)), 1.0)
