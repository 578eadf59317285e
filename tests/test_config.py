"""Tests for engine configuration tables and application settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from precedent_engine.core.config import EngineConfig, Settings
from precedent_engine.core.exceptions import ConfigurationError
from precedent_engine.models.schemas import Court, PrecedenceLevel
from precedent_engine.services.precedent_engine import PrecedentEngine

CONFIG_FILE = Path(__file__).parent.parent / "config" / "engine_config.yaml"


class TestEngineConfigDefaults:
    def test_default_tables(self, config):
        assert config.court_weights[Court.FEDERAL_CIRCUIT] == 1.0
        assert config.court_weights[Court.BVA] == 0.3
        assert config.precedence_scores[PrecedenceLevel.MEDIUM] == 0.7
        assert [b.max_age for b in config.temporal_buckets] == [5, 10, 20]
        assert config.related_categories["tbi"] == ["neurological", "cognitive", "headaches"]
        assert config.insight_thresholds.high_relevance == 0.7
        assert config.posture_thresholds.aggressive_win_rate == 0.7

    def test_config_is_immutable(self, config):
        with pytest.raises(PydanticValidationError):
            config.default_court_weight = 0.5

    def test_bundled_yaml_matches_defaults(self):
        assert EngineConfig.from_yaml(CONFIG_FILE).model_dump() == EngineConfig().model_dump()


class TestMalformedTables:
    def test_relevance_weights_must_sum_to_one(self):
        with pytest.raises(ConfigurationError, match="Relevance weights"):
            EngineConfig.from_mapping({"relevance_weights": {"exact_issue_match": 0.5}})

    def test_utility_weights_must_sum_to_one(self):
        with pytest.raises(ConfigurationError, match="Utility weights"):
            EngineConfig.from_mapping({"utility_weights": {"relevance": 0.9, "precedence": 0.9}})

    def test_court_weight_out_of_range(self):
        with pytest.raises(ConfigurationError):
            PrecedentEngine(config={"court_weights": {"Federal Circuit": 1.5}})

    def test_unknown_court_key(self):
        with pytest.raises(ConfigurationError, match="Unknown court"):
            EngineConfig.from_mapping({"court_weights": {"Supreme Court": 1.0}})

    def test_empty_temporal_buckets(self):
        with pytest.raises(ConfigurationError, match="temporal bucket"):
            EngineConfig.from_mapping({"temporal_buckets": []})

    def test_unsorted_temporal_buckets(self):
        buckets = [{"max_age": 10, "weight": 0.8}, {"max_age": 5, "weight": 1.0}]
        with pytest.raises(ConfigurationError, match="ascending"):
            EngineConfig.from_mapping({"temporal_buckets": buckets})

    def test_posture_thresholds_must_be_ordered(self):
        with pytest.raises(ConfigurationError, match="Posture thresholds"):
            EngineConfig.from_mapping({"posture_thresholds": {"aggressive_win_rate": 0.4}})

    def test_insight_threshold_out_of_range(self):
        with pytest.raises(ConfigurationError):
            EngineConfig.from_mapping({"insight_thresholds": {"high_relevance": 1.5}})

    def test_unknown_key_is_rejected(self):
        with pytest.raises(ConfigurationError):
            EngineConfig.from_mapping({"court_weight": {}})

    def test_invalid_worker_count(self):
        with pytest.raises(ConfigurationError):
            PrecedentEngine(max_workers=0)


class TestYamlLoading:
    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("still_good_law_bonus: 0.1\ncourt_weights:\n  cafc: 0.95\n")

        config = EngineConfig.from_yaml(path)
        assert config.still_good_law_bonus == 0.1
        assert config.court_weights == {Court.FEDERAL_CIRCUIT: 0.95}
        assert config.win_rate_bonus == 0.1

    def test_environment_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PRECEDENT_TEST_BONUS", "0.3")
        path = tmp_path / "engine.yaml"
        path.write_text("still_good_law_bonus: ${PRECEDENT_TEST_BONUS}\n")

        assert EngineConfig.from_yaml(path).still_good_law_bonus == 0.3

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            EngineConfig.from_yaml(tmp_path / "missing.yaml")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("court_weights: [unclosed\n")
        with pytest.raises(ConfigurationError):
            EngineConfig.from_yaml(path)


class TestSettings:
    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PRECEDENT_MAX_WORKERS", "4")
        monkeypatch.setenv("PRECEDENT_CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("PRECEDENT_APP_ENV", "production")

        settings = Settings()
        assert settings.max_workers == 4
        assert settings.get_cors_origins() == ["http://a.test", "http://b.test"]
        assert settings.is_production

    def test_unknown_log_format(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_format="xml")

    def test_engine_config_from_settings(self):
        settings = Settings(engine_config_path=str(CONFIG_FILE))
        assert settings.load_engine_config().citation_pool_size == 5
        assert Settings(engine_config_path=None).load_engine_config().model_dump() == EngineConfig().model_dump()
