"""Precedential authority and temporal weight of a case."""

from datetime import datetime
from typing import Dict, List, Optional

from ..core.config import EngineConfig
from ..models.schemas import Case, Court


# Court hierarchy: level 1 is the highest authority
COURT_HIERARCHY: Dict[Court, Dict] = {
    Court.FEDERAL_CIRCUIT: {
        "level": 1,
        "binding": [Court.CAVC, Court.BVA],
        "description": "Highest authority for VA law",
    },
    Court.CAVC: {
        "level": 2,
        "binding": [Court.BVA],
        "description": "Primary VA appellate court",
    },
    Court.BVA: {
        "level": 3,
        "binding": [],
        "description": "Administrative tribunal",
    },
    Court.REGIONAL_OFFICE: {
        "level": 4,
        "binding": [],
        "description": "Initial adjudication",
    },
}


class AuthorityValuator:
    """Scores precedential value and temporal relevance.

    Deterministic for a given ``current_year``; when omitted, the calendar
    year at call time is used.
    """

    def __init__(self, config: EngineConfig, current_year: Optional[int] = None):
        self.config = config
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year if self._current_year is not None else datetime.now().year

    def court_weight(self, court: Court) -> float:
        return self.config.court_weights.get(court, self.config.default_court_weight)

    def precedence_score(self, case: Case) -> float:
        if case.precedential_value is None:
            return self.config.default_precedence_score
        return self.config.precedence_scores.get(
            case.precedential_value, self.config.default_precedence_score
        )

    def precedential_value(self, case: Case) -> float:
        """Court weight times precedence score plus good-law and win-rate bonuses, capped at 1.0."""
        bonus = 0.0
        if case.still_good_law:
            bonus += self.config.still_good_law_bonus
        if case.win_rate is not None and case.win_rate > self.config.win_rate_bonus_threshold:
            bonus += self.config.win_rate_bonus

        return min(self.court_weight(case.court) * self.precedence_score(case) + bonus, 1.0)

    def case_age(self, case: Case) -> int:
        return self.current_year - case.year

    def temporal_relevance(self, case: Case) -> float:
        """Step function over case age; the first bucket whose max_age covers the age wins."""
        age = self.case_age(case)
        for bucket in self.config.temporal_buckets:
            if age <= bucket.max_age:
                return bucket.weight
        return self.config.default_temporal_weight

    @staticmethod
    def court_level(court: Court) -> int:
        return COURT_HIERARCHY[court]["level"]

    @staticmethod
    def binding_on(court: Court) -> List[Court]:
        """Courts bound by decisions of ``court``."""
        return list(COURT_HIERARCHY[court]["binding"])
