"""
Validation of raw case and issue records.

Required fields fail fast with a ValidationError naming the field and the
case id. Optional fields that fail to parse are dropped (they fall back to
their defaults) so scoring can still degrade the affected factor to 0.
"""

from typing import Any, Dict, Mapping, Optional, Set, Tuple, Type, Union

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError
from ..models.schemas import Case, LegalIssue

logger = structlog.get_logger(__name__)


class CaseValidator:
    """Turns raw mappings into Case and LegalIssue models."""

    REQUIRED_FIELDS = {
        Case: ("id", "title", "court", "year"),
        LegalIssue: (),
    }

    @classmethod
    def validate_case(cls, record: Union[Case, Mapping[str, Any]]) -> Case:
        """Validate one case record.

        Args:
            record: A Case, or a mapping using camelCase or snake_case keys

        Returns:
            The validated Case

        Raises:
            ValidationError: If a required field is missing or invalid
        """
        if isinstance(record, Case):
            return record
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"Case record must be an object, got {type(record).__name__}",
                fields=("case",),
            )

        case_id = record.get("id")
        case_id = case_id if isinstance(case_id, str) and case_id else None

        missing = [
            name for name in cls.REQUIRED_FIELDS[Case]
            if record.get(name) is None or record.get(name) == ""
        ]
        if missing:
            raise ValidationError(
                f"Case {case_id or '<unknown>'} is missing required field(s): {', '.join(missing)}",
                case_id=case_id,
                fields=missing,
            )

        return cls._validate_lenient(Case, record, case_id)

    @classmethod
    def validate_issue(cls, record: Union[LegalIssue, Mapping[str, Any], None]) -> LegalIssue:
        """Validate an issue record; every issue field is optional."""
        if isinstance(record, LegalIssue):
            return record
        if record is None:
            return LegalIssue()
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"Legal issue must be an object, got {type(record).__name__}",
                fields=("issue",),
            )
        return cls._validate_lenient(LegalIssue, record, None)

    @classmethod
    def _validate_lenient(
        cls,
        model: Type[BaseModel],
        record: Mapping[str, Any],
        case_id: Optional[str],
    ):
        try:
            return model.model_validate(record)
        except PydanticValidationError as e:
            bad_fields = cls._error_fields(model, e)

        required = set(cls.REQUIRED_FIELDS[model])
        invalid_required = sorted(bad_fields & required)
        if invalid_required:
            raise ValidationError(
                f"Case {case_id or '<unknown>'} has invalid required field(s): "
                f"{', '.join(invalid_required)}",
                case_id=case_id,
                fields=invalid_required,
            )

        logger.warning(
            "Ignoring malformed optional fields",
            model=model.__name__,
            case_id=case_id,
            fields=sorted(bad_fields),
        )
        cleaned = cls._drop_fields(model, record, bad_fields)
        try:
            return model.model_validate(cleaned)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Case {case_id or '<unknown>'} could not be validated: {e}",
                case_id=case_id,
                fields=sorted(cls._error_fields(model, e)),
            ) from e

    @staticmethod
    def _error_fields(model: Type[BaseModel], error: PydanticValidationError) -> Set[str]:
        """Field names (snake_case) reported in a pydantic error."""
        by_alias = {info.alias: name for name, info in model.model_fields.items() if info.alias}
        fields = set()
        for detail in error.errors():
            if not detail["loc"]:
                continue
            key = str(detail["loc"][0])
            fields.add(by_alias.get(key, key))
        return fields

    @staticmethod
    def _drop_fields(model: Type[BaseModel], record: Mapping[str, Any], fields: Set[str]) -> Dict[str, Any]:
        names: Set[Tuple[str, Optional[str]]] = {
            (name, model.model_fields[name].alias) for name in fields if name in model.model_fields
        }
        dropped = {name for name, _ in names} | {alias for _, alias in names if alias}
        return {k: v for k, v in record.items() if k not in dropped}
