#!/usr/bin/env python3
"""
Navigator configuration

Named thresholds and weights shared by the scorer, the ranker and any display
layer. Defaults match the visible UI bands; every value can be overridden from
the environment (.env is loaded when present).

Environment:
    NAVIGATOR_CATALOG_SOURCE         "file" (default) or "neo4j" (uses NEO4J_URI/USER/PASSWORD)
    NAVIGATOR_CATALOG_PATH           knowledge base file (JSON/YAML) for the file source
    NAVIGATOR_MAX_DEPTH              max steps in a recommended path
    NAVIGATOR_RECOMMENDED_MIN        match % for "recommended"
    NAVIGATOR_AVAILABLE_MIN          match % for "available"
    NAVIGATOR_HIGH_CONFIDENCE_MIN    average match % for "high" confidence
    NAVIGATOR_MEDIUM_CONFIDENCE_MIN  average match % for "medium" confidence
"""

import os
from dataclasses import dataclass, field
from importlib import resources
from typing import Mapping, Optional

from dotenv import load_dotenv

from src.navigator.errors import ConfigurationError
from src.navigator.models import DIMENSIONS, Confidence, MatchStatus

load_dotenv()


def bundled_catalog_path() -> str:
    """Filesystem path of the visa catalog shipped inside the package."""
    return str(resources.files("src.navigator") / "data" / "visa_catalog.json")


DEFAULT_CATALOG_PATH = bundled_catalog_path()

CATALOG_SOURCES = ("file", "neo4j")

DEFAULT_MAX_DEPTH = 4

# Relative influence of each dimension in the weighted mean
DEFAULT_DIMENSION_WEIGHTS = {
    "education": 20,
    "workExperience": 20,
    "fieldOfWork": 15,
    "investment": 15,
    "language": 10,
    "citizenship": 10,
}


@dataclass(frozen=True)
class StatusThresholds:
    """Match percentage bands: >= recommended_min, >= available_min, else locked."""
    recommended_min: int = 90
    available_min: int = 70

    def __post_init__(self):
        if not 0 <= self.available_min <= self.recommended_min <= 100:
            raise ConfigurationError(
                f"Invalid status thresholds: available_min={self.available_min}, "
                f"recommended_min={self.recommended_min}"
            )

    def status_for(self, match_percentage: int) -> MatchStatus:
        if match_percentage >= self.recommended_min:
            return MatchStatus.RECOMMENDED
        if match_percentage >= self.available_min:
            return MatchStatus.AVAILABLE
        return MatchStatus.LOCKED


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Average path match bands: >= high_min, >= medium_min, else low."""
    high_min: float = 85
    medium_min: float = 65

    def __post_init__(self):
        if not 0 <= self.medium_min <= self.high_min <= 100:
            raise ConfigurationError(
                f"Invalid confidence thresholds: medium_min={self.medium_min}, high_min={self.high_min}"
            )

    def confidence_for(self, average_match: float) -> Confidence:
        if average_match >= self.high_min:
            return Confidence.HIGH
        if average_match >= self.medium_min:
            return Confidence.MEDIUM
        return Confidence.LOW


@dataclass(frozen=True)
class NavigatorConfig:
    status_thresholds: StatusThresholds = field(default_factory=StatusThresholds)
    confidence_thresholds: ConfidenceThresholds = field(default_factory=ConfidenceThresholds)
    dimension_weights: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_DIMENSION_WEIGHTS))
    max_depth: int = DEFAULT_MAX_DEPTH
    catalog_path: str = DEFAULT_CATALOG_PATH
    catalog_source: str = "file"

    def __post_init__(self):
        unknown = set(self.dimension_weights) - set(DIMENSIONS)
        if unknown:
            raise ConfigurationError(f"Weights given for unknown dimensions: {sorted(unknown)}")
        missing = [d for d in DIMENSIONS if d not in self.dimension_weights]
        if missing:
            raise ConfigurationError(f"Missing weights for dimensions: {missing}")
        if any(w <= 0 for w in self.dimension_weights.values()):
            raise ConfigurationError("Dimension weights must be positive")
        if self.max_depth < 1:
            raise ConfigurationError(f"max_depth must be at least 1, got {self.max_depth}")
        if self.catalog_source not in CATALOG_SOURCES:
            raise ConfigurationError(
                f"Unknown catalog source '{self.catalog_source}', expected one of {list(CATALOG_SOURCES)}"
            )


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be a number, got '{raw}'")


def load_config(env_file: Optional[str] = None) -> NavigatorConfig:
    """
    Build NavigatorConfig from environment variables.

    Args:
        env_file: Optional extra .env file to load before reading

    Returns:
        NavigatorConfig with defaults for anything not set

    Raises:
        ConfigurationError: If a value is not a number or thresholds are inconsistent
    """
    if env_file:
        load_dotenv(env_file, override=True)

    status = StatusThresholds(
        recommended_min=_env_number("NAVIGATOR_RECOMMENDED_MIN", StatusThresholds.recommended_min),
        available_min=_env_number("NAVIGATOR_AVAILABLE_MIN", StatusThresholds.available_min),
    )
    confidence = ConfidenceThresholds(
        high_min=_env_number("NAVIGATOR_HIGH_CONFIDENCE_MIN", ConfidenceThresholds.high_min, float),
        medium_min=_env_number("NAVIGATOR_MEDIUM_CONFIDENCE_MIN", ConfidenceThresholds.medium_min, float),
    )
    return NavigatorConfig(
        status_thresholds=status,
        confidence_thresholds=confidence,
        max_depth=_env_number("NAVIGATOR_MAX_DEPTH", DEFAULT_MAX_DEPTH),
        catalog_path=os.getenv("NAVIGATOR_CATALOG_PATH") or DEFAULT_CATALOG_PATH,
        catalog_source=(os.getenv("NAVIGATOR_CATALOG_SOURCE") or "file").strip().lower(),
    )
