"""
Configuration Management Module
===============================
Centralized configuration system for the speech evaluation engine.

This module provides:
- Type-safe configuration via dataclasses
- Environment variable overrides
- JSON save/load for reproducible scoring runs
- Default values with documentation

Usage:
    from speech_eval.config import get_config
    config = get_config()

    # Access configuration
    ceiling = config.scoring.score_ceiling
    model = config.gemini.model_name
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os
import json
import logging

from dotenv import load_dotenv

# Pick up GOOGLE_GEMINI_API_KEY and friends from a local .env
load_dotenv()

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================

@dataclass
class PathConfig:
    """Configuration for file system paths."""

    # Base directory (defaults to package directory)
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent)

    logs_dir: str = "logs"

    @property
    def logs(self) -> Path:
        return self.base_dir / self.logs_dir

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.logs.mkdir(parents=True, exist_ok=True)


@dataclass
class ScoringConfig:
    """
    Configuration for the rubric scoring engine.

    The final score is rescaled so that the maximum achievable points of an
    evaluation land on a fixed ceiling, regardless of how many skills the
    coach actually scored:

        divider     = max_total_points / score_ceiling
        final_score = total_points / divider

    Every catalog skill is scored out of default_max_score with weight
    default_weight unless the evaluation overrides them.
    """

    score_ceiling: float = 110.0

    # Per-skill defaults applied when a score record omits them
    default_max_score: float = 10.0
    default_weight: float = 1.0

    # Substituted for a zero/negative/missing divider
    fallback_divider: float = 1.0

    # Category percentages are rawPoints / maxPossible * this
    category_percent_scale: int = 100


@dataclass
class GeminiConfig:
    """Configuration for the Google Gemini language analysis model."""

    model_name: str = "gemini-2.0-flash"

    # Low temperature keeps the JSON shape stable between runs
    temperature: float = 0.2
    max_output_tokens: int = 15000

    api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("GOOGLE_GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    )

    timeout_seconds: int = 60


@dataclass
class AnalysisConfig:
    """Configuration for transcript analysis requests."""

    # Transcripts shorter than this are rejected before calling the model
    min_transcript_length: int = 10


@dataclass
class FlaskConfig:
    """Configuration for Flask web server."""

    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False

    secret_key: str = field(default_factory=lambda: os.getenv("FLASK_SECRET_KEY", "dev-secret-key"))

    cors_origins: list = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    """Configuration for engine logging."""

    log_level: str = "INFO"

    # JSONL files under paths.logs/<logger name>/
    log_to_file: bool = False

    log_scores: bool = True
    log_decisions: bool = True


@dataclass
class AppConfig:
    """
    Master configuration class that aggregates all configuration sections.

    This is the main configuration object used throughout the application.
    """

    paths: PathConfig = field(default_factory=PathConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    flask: FlaskConfig = field(default_factory=FlaskConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for serialization."""
        def convert(obj):
            if hasattr(obj, '__dataclass_fields__'):
                return {k: convert(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, Path):
                return str(obj)
            return obj
        return convert(self)

    def save(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        data = self.to_dict()
        # Never write the API key to disk
        data['gemini']['api_key'] = None
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)
        logger.info(f"Configuration saved to {filepath}")

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """Create configuration from dictionary."""
        paths_data = dict(data.get('paths', {}))
        if 'base_dir' in paths_data and isinstance(paths_data['base_dir'], str):
            paths_data['base_dir'] = Path(paths_data['base_dir'])

        gemini_data = dict(data.get('gemini', {}))
        if gemini_data.get('api_key') is None:
            gemini_data.pop('api_key', None)

        return cls(
            paths=PathConfig(**paths_data),
            scoring=ScoringConfig(**data.get('scoring', {})),
            gemini=GeminiConfig(**gemini_data),
            analysis=AnalysisConfig(**data.get('analysis', {})),
            flask=FlaskConfig(**data.get('flask', {})),
            logging=LoggingConfig(**data.get('logging', {})),
        )

    @classmethod
    def load(cls, filepath: str) -> "AppConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        logger.info(f"Configuration loaded from {filepath}")
        return cls.from_dict(data)


# =============================================================================
# GLOBAL CONFIGURATION SINGLETON
# =============================================================================

_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global application configuration.

    Creates a default configuration on first access.

    Returns:
        The global AppConfig instance
    """
    global _config
    if _config is None:
        _config = AppConfig()
        logger.info("Initialized default application configuration")
    return _config


def set_config(config: AppConfig) -> None:
    """
    Set the global application configuration.

    Args:
        config: The AppConfig instance to use globally
    """
    global _config
    _config = config
    logger.info("Set global configuration")


def reset_config() -> None:
    """Reset the global configuration to None (forces reload on next get_config)."""
    global _config
    _config = None
    logger.info("Reset global configuration")


def load_config_file(filepath: str) -> AppConfig:
    """
    Load a configuration file and set it as global.

    Args:
        filepath: Path to the configuration JSON file

    Returns:
        The loaded AppConfig instance
    """
    config = AppConfig.load(filepath)
    set_config(config)
    return config


# =============================================================================
# ENVIRONMENT VARIABLE OVERRIDES
# =============================================================================

ENV_PREFIX = "SPEECH_EVAL_"

_SECTIONS = ('paths', 'scoring', 'gemini', 'analysis', 'flask', 'logging')


def apply_environment_overrides(config: AppConfig) -> AppConfig:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern:
    SPEECH_EVAL_{SECTION}_{KEY}

    Examples:
        SPEECH_EVAL_SCORING_SCORE_CEILING=100
        SPEECH_EVAL_FLASK_PORT=8080
        SPEECH_EVAL_LOGGING_LOG_LEVEL=DEBUG

    Also supports common simplified environment variables:
        PORT=8080 (maps to flask.port)
        LOG_LEVEL=DEBUG (maps to logging.log_level)

    Args:
        config: Base configuration to override

    Returns:
        Configuration with environment overrides applied
    """
    if os.getenv("PORT"):
        try:
            config.flask.port = int(os.getenv("PORT"))
            logger.info(f"Environment override: flask.port = {config.flask.port}")
        except ValueError:
            logger.warning(f"Ignoring non-integer PORT: {os.getenv('PORT')}")

    if os.getenv("LOG_LEVEL"):
        config.logging.log_level = os.getenv("LOG_LEVEL").upper()
        logger.info(f"Environment override: logging.log_level = {config.logging.log_level}")

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        parts = key[len(ENV_PREFIX):].lower().split('_', 1)
        if len(parts) != 2:
            continue

        section, attr = parts
        if section not in _SECTIONS:
            continue

        section_config = getattr(config, section, None)
        if section_config is None or not hasattr(section_config, attr):
            continue

        current_value = getattr(section_config, attr)
        try:
            if isinstance(current_value, bool):
                typed_value = value.lower() in ('true', '1', 'yes')
            elif isinstance(current_value, int):
                typed_value = int(value)
            elif isinstance(current_value, float):
                typed_value = float(value)
            elif isinstance(current_value, list):
                typed_value = [item.strip() for item in value.split(',') if item.strip()]
            elif isinstance(current_value, Path):
                typed_value = Path(value)
            else:
                typed_value = value

            setattr(section_config, attr, typed_value)
            logger.info(f"Environment override: {section}.{attr} = {typed_value}")

        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to apply environment override {key}: {e}")

    return config


# =============================================================================
# PRESET CONFIGURATIONS
# =============================================================================

def get_development_config() -> AppConfig:
    """Get configuration optimized for development."""
    config = AppConfig()
    config.flask.debug = True
    config.logging.log_level = "DEBUG"
    return config


def get_production_config() -> AppConfig:
    """Get configuration optimized for production."""
    config = AppConfig()
    config.flask.debug = False
    config.logging.log_level = "INFO"
    config.logging.log_to_file = True
    return config
