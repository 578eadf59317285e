"""Tests for raw record validation."""

import pytest

from precedent_engine.core.exceptions import ValidationError
from precedent_engine.models.schemas import Case, Court, LegalIssue, PrecedenceLevel
from precedent_engine.services.case_validator import CaseValidator


def record(**overrides):
    fields = {"id": "walters", "title": "Walters v. Nicholson", "court": "CAVC", "year": 2007}
    fields.update(overrides)
    return fields


class TestRequiredFields:
    def test_missing_court_names_field_and_case(self):
        raw = record()
        del raw["court"]
        with pytest.raises(ValidationError) as exc_info:
            CaseValidator.validate_case(raw)

        assert exc_info.value.case_id == "walters"
        assert exc_info.value.fields == ("court",)
        assert "court" in str(exc_info.value)

    def test_several_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            CaseValidator.validate_case({"id": "x", "title": "X v. Secretary", "court": ""})
        assert exc_info.value.fields == ("court", "year")

    def test_unknown_court_is_invalid(self):
        with pytest.raises(ValidationError) as exc_info:
            CaseValidator.validate_case(record(court="Supreme Court of Narnia"))
        assert exc_info.value.fields == ("court",)

    def test_non_numeric_year_is_invalid(self):
        with pytest.raises(ValidationError) as exc_info:
            CaseValidator.validate_case(record(year="nineteen ninety"))
        assert exc_info.value.fields == ("year",)

    def test_non_mapping_record(self):
        with pytest.raises(ValidationError) as exc_info:
            CaseValidator.validate_case(["not", "a", "case"])
        assert exc_info.value.case_id is None
        assert exc_info.value.fields == ("case",)

    def test_failure_record(self):
        error = ValidationError("Case x is missing required field(s): court", case_id="x", fields=["court"])
        failure = error.to_failure()
        assert failure.case_id == "x"
        assert failure.fields == ["court"]
        assert failure.message == str(error)


class TestLenientOptionalFields:
    @pytest.mark.parametrize("alias", ["CAVC", "cavc", "Court of Appeals for Veterans Claims"])
    def test_court_aliases(self, alias):
        assert CaseValidator.validate_case(record(court=alias)).court == Court.CAVC

    def test_camel_and_snake_case_keys(self):
        camel = CaseValidator.validate_case(record(keyIssue="Rating facets", stillGoodLaw=True))
        snake = CaseValidator.validate_case(record(key_issue="Rating facets", still_good_law=True))
        assert camel.key_issue == snake.key_issue == "Rating facets"
        assert camel.still_good_law and snake.still_good_law

    def test_out_of_range_win_rate_is_dropped(self):
        case = CaseValidator.validate_case(record(winRate=1.7, category="TBI"))
        assert case.win_rate is None
        assert case.category == "TBI"

    def test_malformed_principles_are_dropped(self):
        case = CaseValidator.validate_case(record(legalPrinciples="TBI facet analysis"))
        assert case.legal_principles == []

    def test_unrecognized_precedence_is_missing(self):
        assert CaseValidator.validate_case(record(precedentialValue="landmark")).precedential_value is None
        assert CaseValidator.validate_case(record(precedentialValue="High")).precedential_value == PrecedenceLevel.HIGH

    def test_case_instances_pass_through(self):
        case = Case.model_validate(record())
        assert CaseValidator.validate_case(case) is case


class TestIssueValidation:
    def test_missing_issue_is_empty(self):
        assert CaseValidator.validate_issue(None) == LegalIssue()

    def test_malformed_key_issues_are_dropped(self):
        issue = CaseValidator.validate_issue({"category": "PTSD", "keyIssues": 42})
        assert issue.category == "PTSD"
        assert issue.key_issues == []

    def test_non_mapping_issue(self):
        with pytest.raises(ValidationError) as exc_info:
            CaseValidator.validate_issue("PTSD")
        assert exc_info.value.fields == ("issue",)
