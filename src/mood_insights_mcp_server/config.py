"""
Configuration management for the Mood Insights MCP Server.

This module holds the analysis thresholds, result store location, privacy
flags and performance knobs. Values come from a JSON config file when one is
present, otherwise from ``MOOD_INSIGHTS_*`` environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError

ENV_PREFIX = "MOOD_INSIGHTS_"


@dataclass
class AnalysisConfig:
    """Numeric parameters of the cross-analysis engine."""

    # All self-reported values share a 0..scale_max scale
    scale_max: float = 10.0
    primary_weight: float = 0.5
    intensity_weight: float = 0.3
    secondary_weight: float = 0.2
    # Typical daily fluctuation of about 2.5 points maps to stability ~0.75
    stability_divisor: float = 25.0
    stress_point_threshold: float = 7.0
    peak_intensity_threshold: float = 7.0
    low_energy_threshold: float = 4.0
    min_sync_members: int = 2
    window_days: int = 7


@dataclass
class ClassifierConfig:
    """Thresholds for interaction pattern classification."""

    mirroring_sync: float = 0.7
    mirroring_energy: float = 0.7
    supportive_stress: float = -0.3
    supportive_sync: float = 0.4
    conflicting_stress: float = 0.5
    conflicting_sync: float = 0.3


@dataclass
class StorageConfig:
    """Analysis result store configuration."""

    path: str = "~/.mood-insights/analysis.db"
    timeout_seconds: int = 30
    persist_by_default: bool = True


@dataclass
class PrivacyConfig:
    """Privacy-related configuration."""

    redact_by_default: bool = False
    hash_identifiers: bool = True


@dataclass
class PerformanceConfig:
    """Performance-related configuration."""

    # A 20-member group has 190 pairs; sequential is fast enough below this
    parallel_pair_threshold: int = 200
    max_workers: int = 4


@dataclass
class Config:
    """Main configuration class."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    privacy: PrivacyConfig = field(default_factory=PrivacyConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    log_level: str = "INFO"

    # Session-specific settings (not persisted)
    session_salt: Optional[bytes] = None

    def __post_init__(self):
        """Generate session salt on initialization."""
        self.session_salt = os.urandom(16)  # BLAKE2b max salt length

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        try:
            return cls(
                analysis=AnalysisConfig(**data.get("analysis", {})),
                classifier=ClassifierConfig(**data.get("classifier", {})),
                storage=StorageConfig(**data.get("storage", {})),
                privacy=PrivacyConfig(**data.get("privacy", {})),
                performance=PerformanceConfig(**data.get("performance", {})),
                log_level=data.get("log_level", "INFO"),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load config from JSON file."""
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(
                    f"Config file {path} is not valid JSON: {e}", {"path": str(path)}
                )
            return cls.from_dict(data)
        return cls()

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        config = cls()

        # Analysis settings
        if env_val := os.getenv(f"{ENV_PREFIX}STABILITY_DIVISOR"):
            config.analysis.stability_divisor = _parse_float("STABILITY_DIVISOR", env_val)

        if env_val := os.getenv(f"{ENV_PREFIX}STRESS_POINT_THRESHOLD"):
            config.analysis.stress_point_threshold = _parse_float(
                "STRESS_POINT_THRESHOLD", env_val
            )

        if env_val := os.getenv(f"{ENV_PREFIX}WINDOW_DAYS"):
            config.analysis.window_days = _parse_int("WINDOW_DAYS", env_val)

        # Storage settings
        if env_val := os.getenv(f"{ENV_PREFIX}STORE_PATH"):
            config.storage.path = env_val

        if env_val := os.getenv(f"{ENV_PREFIX}PERSIST_DEFAULT"):
            config.storage.persist_by_default = env_val.lower() == "true"

        # Privacy settings
        if env_val := os.getenv(f"{ENV_PREFIX}REDACT_DEFAULT"):
            config.privacy.redact_by_default = env_val.lower() == "true"

        if env_val := os.getenv(f"{ENV_PREFIX}HASH_IDENTIFIERS"):
            config.privacy.hash_identifiers = env_val.lower() == "true"

        # Performance settings
        if env_val := os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
            config.performance.max_workers = _parse_int("MAX_WORKERS", env_val)

        if env_val := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            config.log_level = env_val.upper()

        return config

    def get_store_path(self) -> Path:
        """Get expanded result store path."""
        return Path(self.storage.path).expanduser()

    def should_redact(self, explicit_redact: Optional[bool] = None) -> bool:
        """Determine if member ids should be redacted."""
        if explicit_redact is not None:
            return explicit_redact
        return self.privacy.redact_by_default

    def should_persist(self, explicit_persist: Optional[bool] = None) -> bool:
        """Determine if an analysis result should be stored."""
        if explicit_persist is not None:
            return explicit_persist
        return self.storage.persist_by_default

    @property
    def logging_level(self) -> int:
        """Numeric logging level for ``logging.basicConfig``."""
        return getattr(logging, self.log_level.upper(), logging.INFO)


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}")


def load_config() -> Config:
    """Load configuration from file or environment."""
    # Check for config file in standard locations
    config_paths = [
        Path("config.json"),
        Path("~/.mood-insights/config.json").expanduser(),
        Path("/etc/mood-insights/config.json"),
    ]

    for path in config_paths:
        if path.exists():
            return Config.from_file(path)

    # Fall back to environment variables
    return Config.from_env()


# Global config instance (lazy loaded)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration instance (``None`` forces a reload)."""
    global _config
    _config = config
