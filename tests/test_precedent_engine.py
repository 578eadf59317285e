"""End-to-end tests for the engine surface."""

import pytest

from precedent_engine.core.exceptions import ValidationError
from precedent_engine.models.schemas import Court, LitigationPosture, RecommendedUse
from precedent_engine.services.precedent_engine import PrecedentEngine

from conftest import CURRENT_YEAR


class TestScoreRelevance:
    def test_binding_recent_matching_case_is_primary_authority(self, engine, case_a, ptsd_issue):
        analysis = engine.score_relevance(case_a, ptsd_issue)

        assert analysis.precedential_value == 1.0
        assert analysis.temporal_relevance == 1.0
        assert analysis.relevance_factors.exact_issue_match == pytest.approx(1.0)
        assert analysis.overall_relevance > 0.8
        assert analysis.recommended_use == RecommendedUse.PRIMARY_AUTHORITY
        assert analysis.practical_application.startswith("Strong precedent directly applicable")
        assert analysis.limitations == []

    def test_old_unrelated_board_decision_is_reference_only(self, engine, case_b, ptsd_issue):
        analysis = engine.score_relevance(case_b, ptsd_issue)

        assert analysis.precedential_value == pytest.approx(0.12)
        assert analysis.temporal_relevance == 0.4
        assert analysis.overall_relevance == pytest.approx(0.0)
        assert analysis.recommended_use == RecommendedUse.REFERENCE_ONLY
        assert "Administrative decision - not binding precedent" in analysis.limitations
        assert "May be outdated or superseded by newer law" in analysis.limitations
        assert analysis.binding_on == []

    def test_accepts_plain_issue_mapping(self, engine, case_a):
        analysis = engine.score_relevance(case_a, {"category": "ptsd"})
        assert analysis.relevance_factors.category_match == 1.0

    def test_missing_required_field_raises(self, engine, case_a, ptsd_issue):
        del case_a["title"]
        with pytest.raises(ValidationError) as exc_info:
            engine.score_relevance(case_a, ptsd_issue)
        assert exc_info.value.case_id == "case-a"
        assert exc_info.value.fields == ("title",)

    def test_serializes_with_camel_case_names(self, engine, case_a, ptsd_issue):
        data = engine.score_relevance(case_a, ptsd_issue).model_dump(by_alias=True, mode="json")
        assert data["recommendedUse"] == "PRIMARY_AUTHORITY"
        assert set(data["relevanceFactors"]) == {
            "exactIssueMatch",
            "categoryMatch",
            "factualSimilarity",
            "legalPrincipleMatch",
        }
        assert data["bindingOn"] == [Court.CAVC.value, Court.BVA.value]


class TestScoreBatch:
    def test_partial_failure_keeps_order(self, engine, case_a, case_b, ptsd_issue):
        broken = {"id": "broken", "title": "Broken v. Secretary", "year": 2001}

        result = engine.score_batch([case_b, broken, case_a], ptsd_issue)

        assert [item.case.id for item in result.results] == ["case-b", "case-a"]
        assert result.succeeded == 2
        assert result.failed == 1
        assert result.failures[0].case_id == "broken"
        assert result.failures[0].fields == ["court"]

    def test_thread_pool_matches_sequential(self, case_a, case_b, ptsd_issue):
        records = []
        for i in range(20):
            record = dict(case_a if i % 2 else case_b)
            record["id"] = f"case-{i}"
            record["year"] = CURRENT_YEAR - i
            records.append(record)

        sequential = PrecedentEngine(current_year=CURRENT_YEAR).score_batch(records, ptsd_issue)
        threaded = PrecedentEngine(current_year=CURRENT_YEAR, max_workers=4).score_batch(records, ptsd_issue)

        assert [r.case.id for r in threaded.results] == [r.case.id for r in sequential.results]
        assert threaded.model_dump() == sequential.model_dump()

    def test_empty_batch(self, engine, ptsd_issue):
        result = engine.score_batch([], ptsd_issue)
        assert result.results == []
        assert result.failures == []


class TestRankCases:
    def test_comparative_analysis(self, engine, case_a, case_b, ptsd_issue):
        analysis = engine.rank_cases([case_b, case_a], ptsd_issue)

        assert [item.case.id for item in analysis.ranked_cases] == ["case-a", "case-b"]
        assert analysis.best_case.case.id == "case-a"
        assert [e.case.id for e in analysis.recommended_citation.primary_authority] == ["case-a"]
        assert analysis.recommended_citation.background_authority == []
        assert analysis.argument_structure.primary_argument.case.id == "case-a"
        assert analysis.argument_structure.primary_argument.key_quote == case_a["holding"]
        assert [s.case.id for s in analysis.argument_structure.supporting_arguments] == ["case-b"]
        assert analysis.failures == []

    def test_empty_input(self, engine, ptsd_issue):
        analysis = engine.rank_cases([], ptsd_issue)

        assert analysis.ranked_cases == []
        assert analysis.best_case is None
        assert analysis.argument_structure is None
        assert analysis.recommended_citation.primary_authority == []
        assert analysis.recommended_citation.supporting_authority == []
        assert analysis.recommended_citation.background_authority == []

    def test_invalid_records_reported_in_failures(self, engine, case_a, ptsd_issue):
        analysis = engine.rank_cases([case_a, {"id": "no-year", "title": "T", "court": "BVA"}], ptsd_issue)
        assert [item.case.id for item in analysis.ranked_cases] == ["case-a"]
        assert [f.case_id for f in analysis.failures] == ["no-year"]


class TestStrategicAdvice:
    def test_aggressive_posture(self, engine, ptsd_issue):
        cases = [
            {"id": "a", "title": "A v. B", "court": "CAVC", "year": 2020, "winRate": 0.8, "precedentialValue": "high"},
            {"id": "b", "title": "C v. D", "court": "BVA", "year": 2021, "winRate": 0.9},
        ]
        advice = engine.strategic_advice(cases, ptsd_issue)

        assert advice.litigation_strategy == LitigationPosture.AGGRESSIVE
        assert advice.average_win_rate == pytest.approx(0.85)
        assert advice.best_case.case.id == "a"

    def test_invalid_records_are_left_out(self, engine, ptsd_issue):
        cases = [
            {"id": "a", "title": "A v. B", "court": "CAVC", "year": 2020, "winRate": 0.6},
            {"id": "b", "title": "C v. D", "year": 2021, "winRate": 0.0},
        ]
        advice = engine.strategic_advice(cases, ptsd_issue)
        assert advice.average_win_rate == pytest.approx(0.6)
        assert advice.litigation_strategy == LitigationPosture.MODERATE
