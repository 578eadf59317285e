"""Configuration management for the precedent engine.

``EngineConfig`` holds the scoring tables (relevance weights, court weights,
precedence scores, temporal buckets, related categories, tier, insight and
posture thresholds).
It is frozen: an engine is built from one config and the tables are never
mutated afterwards. ``Settings`` is the process-level configuration read from
the environment and ``.env``.

The default weights and thresholds are heuristic, not calibrated.
"""

import json
import math
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from ..models.schemas import Court, PrecedenceLevel

logger = structlog.get_logger(__name__)

WEIGHT_TOLERANCE = 1e-6


class FrozenConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class RelevanceWeights(FrozenConfig):
    """Weights of the four relevance factors; must sum to 1.0."""
    exact_issue_match: float = Field(default=0.40, ge=0, le=1)
    category_match: float = Field(default=0.25, ge=0, le=1)
    factual_similarity: float = Field(default=0.20, ge=0, le=1)
    legal_principle_match: float = Field(default=0.15, ge=0, le=1)

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = (
            self.exact_issue_match
            + self.category_match
            + self.factual_similarity
            + self.legal_principle_match
        )
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
            raise ConfigurationError(f"Relevance weights must sum to 1.0, got {total:.6f}")
        return self


class UtilityWeights(FrozenConfig):
    """Weights of the ranking utility; must sum to 1.0."""
    relevance: float = Field(default=0.6, ge=0, le=1)
    precedence: float = Field(default=0.4, ge=0, le=1)

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = self.relevance + self.precedence
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
            raise ConfigurationError(f"Utility weights must sum to 1.0, got {total:.6f}")
        return self


class TierThresholds(FrozenConfig):
    """Thresholds for usage tiers and practical application text."""
    primary: float = Field(default=0.8, ge=0, le=1)
    supporting: float = Field(default=0.6, ge=0, le=1)
    background_relevance: float = Field(default=0.4, ge=0, le=1)
    background_precedence: float = Field(default=0.6, ge=0, le=1)

    @model_validator(mode="after")
    def tiers_are_ordered(self):
        if not self.primary >= self.supporting >= self.background_relevance:
            raise ConfigurationError(
                "Tier thresholds must satisfy primary >= supporting >= background_relevance"
            )
        return self


class InsightThresholds(FrozenConfig):
    """Cutoffs for the strengths and limitations listed with a scored case."""
    high_precedence: float = Field(default=0.8, ge=0, le=1)
    high_relevance: float = Field(default=0.7, ge=0, le=1)
    recent_temporal: float = Field(default=0.8, ge=0, le=1)
    high_win_rate: float = Field(default=0.8, ge=0, le=1)
    low_precedence: float = Field(default=0.5, ge=0, le=1)
    low_relevance: float = Field(default=0.5, ge=0, le=1)
    old_temporal: float = Field(default=0.5, ge=0, le=1)
    low_win_rate: float = Field(default=0.5, ge=0, le=1)


class PostureThresholds(FrozenConfig):
    """Average win-rate cutoffs for the litigation posture, risks and strengths."""
    aggressive_win_rate: float = Field(default=0.7, ge=0, le=1)
    moderate_win_rate: float = Field(default=0.5, ge=0, le=1)
    low_win_rate: float = Field(default=0.5, ge=0, le=1)
    strong_win_rate: float = Field(default=0.8, ge=0, le=1)

    @model_validator(mode="after")
    def postures_are_ordered(self):
        if self.aggressive_win_rate < self.moderate_win_rate:
            raise ConfigurationError(
                "Posture thresholds must satisfy aggressive_win_rate >= moderate_win_rate"
            )
        return self


class TemporalBucket(FrozenConfig):
    """Cases at most ``max_age`` years old receive ``weight``."""
    max_age: int = Field(ge=0)
    weight: float = Field(ge=0, le=1)


def _default_court_weights() -> Dict[Court, float]:
    return {
        Court.FEDERAL_CIRCUIT: 1.0,
        Court.CAVC: 0.9,
        Court.BVA: 0.3,
        Court.REGIONAL_OFFICE: 0.1,
    }


def _default_precedence_scores() -> Dict[PrecedenceLevel, float]:
    return {
        PrecedenceLevel.HIGH: 1.0,
        PrecedenceLevel.MEDIUM: 0.7,
        PrecedenceLevel.LOW: 0.4,
    }


def _default_temporal_buckets() -> List[TemporalBucket]:
    return [
        TemporalBucket(max_age=5, weight=1.0),
        TemporalBucket(max_age=10, weight=0.8),
        TemporalBucket(max_age=20, weight=0.6),
    ]


def _default_related_categories() -> Dict[str, List[str]]:
    return {
        "ptsd": ["mental health", "depression", "anxiety"],
        "mental health": ["ptsd", "depression", "anxiety"],
        "musculoskeletal": ["back pain", "knee", "shoulder"],
        "tbi": ["neurological", "cognitive", "headaches"],
    }


class EngineConfig(FrozenConfig):
    """Immutable scoring tables shared by every engine component."""

    relevance_weights: RelevanceWeights = Field(default_factory=RelevanceWeights)
    utility_weights: UtilityWeights = Field(default_factory=UtilityWeights)
    tier_thresholds: TierThresholds = Field(default_factory=TierThresholds)

    # Authority
    court_weights: Dict[Court, float] = Field(default_factory=_default_court_weights)
    default_court_weight: float = Field(default=0.1, ge=0, le=1)
    precedence_scores: Dict[PrecedenceLevel, float] = Field(default_factory=_default_precedence_scores)
    default_precedence_score: float = Field(default=0.4, ge=0, le=1)
    still_good_law_bonus: float = Field(default=0.2, ge=0, le=1)
    win_rate_bonus: float = Field(default=0.1, ge=0, le=1)
    win_rate_bonus_threshold: float = Field(default=0.8, ge=0, le=1)

    # Temporal relevance
    temporal_buckets: List[TemporalBucket] = Field(default_factory=_default_temporal_buckets)
    default_temporal_weight: float = Field(default=0.4, ge=0, le=1)

    # Category matching, keys and values lowercase
    related_categories: Dict[str, List[str]] = Field(default_factory=_default_related_categories)

    # Strategy
    citation_pool_size: int = Field(default=5, ge=0)
    argument_pool_size: int = Field(default=3, ge=0)
    stale_case_age: int = Field(default=15, ge=0)
    stale_case_share: float = Field(default=0.6, ge=0, le=1)
    insight_thresholds: InsightThresholds = Field(default_factory=InsightThresholds)
    posture_thresholds: PostureThresholds = Field(default_factory=PostureThresholds)

    @field_validator("court_weights", mode="before")
    @classmethod
    def resolve_court_keys(cls, v):
        """Accept court aliases as table keys."""
        if isinstance(v, Mapping):
            try:
                return {Court(k) if isinstance(k, str) else k: w for k, w in v.items()}
            except ValueError as e:
                raise ConfigurationError(f"Unknown court in court_weights: {e}") from e
        return v

    @field_validator("precedence_scores", mode="before")
    @classmethod
    def normalize_precedence_keys(cls, v):
        if isinstance(v, Mapping):
            return {k.lower() if isinstance(k, str) else k: s for k, s in v.items()}
        return v

    @field_validator("related_categories", mode="before")
    @classmethod
    def lowercase_categories(cls, v):
        if isinstance(v, Mapping):
            return {
                str(k).lower(): [str(item).lower() for item in items]
                for k, items in v.items()
            }
        return v

    @model_validator(mode="after")
    def tables_are_well_formed(self):
        for court, weight in self.court_weights.items():
            if not 0.0 <= weight <= 1.0:
                raise ConfigurationError(f"Court weight for {court.value} outside [0, 1]: {weight}")
        for level, score in self.precedence_scores.items():
            if not 0.0 <= score <= 1.0:
                raise ConfigurationError(f"Precedence score for {level.value} outside [0, 1]: {score}")
        if not self.temporal_buckets:
            raise ConfigurationError("At least one temporal bucket is required")
        ages = [bucket.max_age for bucket in self.temporal_buckets]
        if ages != sorted(set(ages)):
            raise ConfigurationError(f"Temporal buckets must have strictly ascending max_age, got {ages}")
        return self

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "EngineConfig":
        """Build a config from a plain mapping, reporting any problem as ConfigurationError."""
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid engine configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EngineConfig":
        """Load a config file; ``${VAR}`` string values are read from the environment."""
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Unreadable configuration file {config_path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")

        config = cls.from_mapping(_replace_env_vars(raw_config))
        logger.info("Loaded engine configuration", path=str(config_path))
        return config


def _replace_env_vars(config: Any) -> Any:
    """Recursively replace ``${VAR_NAME}`` strings with environment values."""
    if isinstance(config, dict):
        return {k: _replace_env_vars(v) for k, v in config.items()}
    if isinstance(config, list):
        return [_replace_env_vars(item) for item in config]
    if isinstance(config, str) and config.startswith("${") and config.endswith("}"):
        var_name = config[2:-1]
        value = os.environ.get(var_name)
        if value is None:
            logger.warning("Environment variable not found", variable=var_name)
            return config
        return value
    return config


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PRECEDENT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="precedent-engine")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_prefix: str = Field(default="/api/v1")
    cors_origins: Union[str, List[str]] = Field(default="http://localhost:3000")

    # Engine
    engine_config_path: Optional[str] = Field(default=None)
    max_workers: int = Field(default=1, ge=1)
    catalog_path: Optional[str] = Field(default=None)

    @field_validator("log_format")
    @classmethod
    def known_log_format(cls, v):
        if v.lower() not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v.lower()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from a JSON array or comma-separated string."""
        if isinstance(v, str):
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [url.strip() for url in v.split(",") if url.strip()]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env.lower() == "production"

    def get_cors_origins(self) -> List[str]:
        """Get CORS origins as list."""
        if isinstance(self.cors_origins, str):
            return [self.cors_origins]
        return list(self.cors_origins)

    def load_engine_config(self) -> EngineConfig:
        """Engine tables from ``engine_config_path``, or the defaults."""
        if self.engine_config_path:
            return EngineConfig.from_yaml(self.engine_config_path)
        return EngineConfig()


# Global settings instance
settings = Settings()
