"""Error taxonomy for the precedent engine.

Only two conditions are errors: a record missing a required field and a
malformed configuration table. Everything else (empty candidate lists, ties,
absent optional data) has a defined output and never raises.
"""

from typing import Iterable, Optional, Tuple


class PrecedentEngineError(Exception):
    """Base class for engine errors."""


class ValidationError(PrecedentEngineError):
    """A required field on a Case or LegalIssue is missing or invalid."""

    def __init__(
        self,
        message: str,
        case_id: Optional[str] = None,
        fields: Iterable[str] = (),
    ):
        self.case_id = case_id
        self.fields: Tuple[str, ...] = tuple(fields)
        super().__init__(message)

    def to_failure(self):
        """Convert to the CaseFailure record reported by batch scoring."""
        from ..models.schemas import CaseFailure

        return CaseFailure(case_id=self.case_id, fields=list(self.fields), message=str(self))


class ConfigurationError(PrecedentEngineError):
    """Weight or threshold tables are malformed; the engine refuses to start."""
