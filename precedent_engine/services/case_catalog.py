"""
Case Catalog - in-memory collection of known precedents.

Supplies candidate cases to the engine by id and follows the citation
network between them. It is not a search index: candidates for an issue are
chosen by the caller.
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import structlog

from ..core.exceptions import ValidationError
from ..models.schemas import Case, Court, PrecedenceLevel, RelatedCase
from .case_validator import CaseValidator
from .strategic_advisor import average_win_rate

logger = structlog.get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "data" / "va_precedents.json"
MAX_SIMILAR_CASES = 5

# listing order: precedence rank plus a win-rate share
PRECEDENCE_RANK = {PrecedenceLevel.HIGH: 3, PrecedenceLevel.MEDIUM: 2, PrecedenceLevel.LOW: 1}
LISTING_WIN_RATE_WEIGHT = 0.3
SUCCESS_WIN_RATE = 0.8


class CaseCatalog:
    """Validated cases keyed by id, with their citation network."""

    def __init__(self, records: Iterable[Union[Case, Mapping[str, Any]]] = ()):
        self.cases: Dict[str, Case] = {}
        self.rejected: List[str] = []

        for record in records:
            try:
                case = CaseValidator.validate_case(record)
            except ValidationError as e:
                logger.warning("Skipping invalid catalog record", case_id=e.case_id, error=str(e))
                self.rejected.append(e.case_id or "<unknown>")
                continue
            if case.id in self.cases:
                logger.warning("Duplicate catalog record replaced", case_id=case.id)
            self.cases[case.id] = case

        self._cited_by = self._build_citation_network()

    @classmethod
    def from_json(cls, path: Optional[Union[str, Path]] = None) -> "CaseCatalog":
        """Load a catalog from a JSON array of case records."""
        catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
        with open(catalog_path, "r", encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list):
            raise ValueError(f"Catalog file {catalog_path} must contain a JSON array")

        catalog = cls(records)
        logger.info(
            "Loaded case catalog",
            path=str(catalog_path),
            cases=len(catalog.cases),
            rejected=len(catalog.rejected),
        )
        return catalog

    def _build_citation_network(self) -> Dict[str, List[str]]:
        cited_by: Dict[str, List[str]] = {case_id: [] for case_id in self.cases}
        for case in self.cases.values():
            for related_id in case.related_cases:
                if related_id in cited_by:
                    cited_by[related_id].append(case.id)
        return cited_by

    def __len__(self) -> int:
        return len(self.cases)

    def __contains__(self, case_id: str) -> bool:
        return case_id in self.cases

    def get(self, case_id: str) -> Optional[Case]:
        return self.cases.get(case_id)

    def _in_category(self, category: str) -> List[Case]:
        wanted = category.lower()
        return [c for c in self.cases.values() if c.category and c.category.lower() == wanted]

    @staticmethod
    def listing_score(case: Case) -> float:
        rank = PRECEDENCE_RANK.get(case.precedential_value, 1)
        return rank + LISTING_WIN_RATE_WEIGHT * (case.win_rate or 0.0)

    def all(self, category: Optional[str] = None) -> List[Case]:
        """Cases strongest first, optionally restricted to one category (case-insensitive).

        Strength is the precedence rank (high 3, medium 2, low 1) plus 0.3 of
        the win rate; ties keep catalog order.
        """
        cases = list(self.cases.values()) if category is None else self._in_category(category)
        return sorted(cases, key=self.listing_score, reverse=True)

    def categories(self) -> List[str]:
        seen = []
        for case in self.cases.values():
            if case.category and case.category not in seen:
                seen.append(case.category)
        return seen

    def courts(self) -> List[Court]:
        seen = []
        for case in self.cases.values():
            if case.court not in seen:
                seen.append(case.court)
        return seen

    def win_rate(self, category: str) -> int:
        """Mean win rate of a category as a whole percentage; 0 for an empty category."""
        rate = average_win_rate(self._in_category(category))
        return int(math.floor(rate * 100 + 0.5))

    def success_factors(self, case_id: str) -> List[str]:
        case = self.cases.get(case_id)
        if case is None:
            return []

        factors = []
        if case.precedential_value == PrecedenceLevel.HIGH:
            factors.append("High precedential value")
        if case.win_rate is not None and case.win_rate > SUCCESS_WIN_RATE:
            factors.append("High success rate in similar cases")
        if case.still_good_law:
            factors.append("Still good law - not overruled")
        if case.court == Court.FEDERAL_CIRCUIT:
            factors.append("Federal Circuit precedent - binding authority")
        return factors

    def related(self, case_id: str) -> List[RelatedCase]:
        """Cases this case cites, cases citing it, then up to five similar cases.

        Similar means same category or at least one shared tag; cases already
        linked by citation are not repeated.
        """
        case = self.cases.get(case_id)
        if case is None:
            return []

        related: List[RelatedCase] = []
        linked = {case_id}

        for related_id in case.related_cases:
            if related_id in self.cases and related_id not in linked:
                related.append(RelatedCase(case=self.cases[related_id], relationship="cites"))
                linked.add(related_id)

        for citing_id in self._cited_by.get(case_id, []):
            if citing_id not in linked:
                related.append(RelatedCase(case=self.cases[citing_id], relationship="cited_by"))
                linked.add(citing_id)

        tags = set(case.tags)
        similar = [
            other for other in self.cases.values()
            if other.id not in linked
            and (
                (case.category is not None and other.category == case.category)
                or tags.intersection(other.tags)
            )
        ]
        related.extend(
            RelatedCase(case=other, relationship="similar")
            for other in similar[:MAX_SIMILAR_CASES]
        )
        return related

    def format_citation(self, case_id: str, style: str = "bluebook") -> str:
        """Format a citation in ``bluebook`` or ``alwd`` style; other styles return the bare citation."""
        case = self.cases.get(case_id)
        if case is None:
            return ""

        citation = case.citation or ""
        if style == "bluebook":
            return f"{case.title}, {citation} ({case.year})"
        if style == "alwd":
            court = case.court.value.replace(Court.CAVC.value, "Vet. App.")
            return f"{case.title}, {citation} ({court} {case.year})"
        return citation
