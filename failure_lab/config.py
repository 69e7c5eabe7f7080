"""
Failure Lab - Configuration.

============================================================
PURPOSE
============================================================
Configuration for simulator session behavior.

Configuration never changes transition math. It only
controls log retention, logging verbosity and the default
scenario.

============================================================
ENVIRONMENT
============================================================
FAILURE_LAB_MAX_LOG_ENTRIES    int, empty = unbounded
FAILURE_LAB_LOG_TRANSITIONS    true/false
FAILURE_LAB_DEFAULT_SCENARIO   scenario key
FAILURE_LAB_LOG_LEVEL          DEBUG/INFO/WARNING/ERROR

============================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

from .types import ConfigurationError, ScenarioKey


logger = logging.getLogger(__name__)


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


# ============================================================
# FAILURE LAB CONFIG
# ============================================================

@dataclass
class FailureLabConfig:
    """
    Simulator configuration.
    """

    max_log_entries: Optional[int] = None
    """
    Maximum number of log entries a session retains.
    None keeps the full log. Oldest entries are dropped first.
    """

    log_transitions: bool = True
    """Whether apply/reset emit log lines."""

    default_scenario: ScenarioKey = ScenarioKey.RETRY_STORM
    """Scenario used when none is requested."""

    log_level: str = "INFO"
    """Level used by configure_logging()."""

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value is out of range
        """
        entries = self.max_log_entries
        if entries is not None and (
            isinstance(entries, bool) or not isinstance(entries, int) or entries < 1
        ):
            raise ConfigurationError(
                f"max_log_entries must be an int >= 1 or None, got {entries!r}",
                field="max_log_entries",
            )

        try:
            self.default_scenario = ScenarioKey(self.default_scenario)
        except ValueError:
            raise ConfigurationError(
                f"Unknown default_scenario: {self.default_scenario!r}",
                field="default_scenario",
            ) from None

        level = str(self.log_level).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log_level: {self.log_level!r}",
                field="log_level",
            )
        self.log_level = level

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "max_log_entries": self.max_log_entries,
            "log_transitions": self.log_transitions,
            "default_scenario": self.default_scenario.value,
            "log_level": self.log_level,
        }


# ============================================================
# PRESET FACTORIES
# ============================================================

def get_default_config() -> FailureLabConfig:
    """
    Get default configuration.

    Full log retained, transitions logged.
    """
    return FailureLabConfig()


def get_testing_config() -> FailureLabConfig:
    """
    Get testing configuration.

    Quiet logging for test runs.
    """
    return FailureLabConfig(log_transitions=False, log_level="WARNING")


def load_config_from_dict(data: Dict[str, Any]) -> FailureLabConfig:
    """
    Load configuration from dictionary.

    Args:
        data: Configuration dictionary; unknown keys are ignored

    Returns:
        Validated configuration
    """
    config = get_default_config()

    if "max_log_entries" in data:
        config.max_log_entries = _parse_int("max_log_entries", data["max_log_entries"])
    if "log_transitions" in data:
        value = data["log_transitions"]
        if isinstance(value, str):
            value = _parse_bool("log_transitions", value)
        config.log_transitions = bool(value)
    if "default_scenario" in data:
        config.default_scenario = data["default_scenario"]
    if "log_level" in data:
        config.log_level = data["log_level"]

    config.validate()
    return config


def _parse_int(name: str, raw: Any) -> Optional[int]:
    if raw is None or (isinstance(raw, int) and not isinstance(raw, bool)):
        return raw
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            pass
    raise ConfigurationError(f"{name} must be an integer, got {raw!r}", field=name)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}", field=name)


def load_config_from_env() -> FailureLabConfig:
    """
    Load configuration from environment variables.

    A .env file in the working directory is read first.
    """
    load_dotenv(find_dotenv(usecwd=True))

    data: Dict[str, Any] = {}

    max_entries = os.getenv("FAILURE_LAB_MAX_LOG_ENTRIES")
    if max_entries is not None:
        max_entries = max_entries.strip()
        if not max_entries:
            data["max_log_entries"] = None
        else:
            try:
                data["max_log_entries"] = int(max_entries)
            except ValueError:
                raise ConfigurationError(
                    f"FAILURE_LAB_MAX_LOG_ENTRIES must be an integer, got {max_entries!r}",
                    field="max_log_entries",
                ) from None

    log_transitions = os.getenv("FAILURE_LAB_LOG_TRANSITIONS")
    if log_transitions is not None:
        data["log_transitions"] = _parse_bool("log_transitions", log_transitions)

    default_scenario = os.getenv("FAILURE_LAB_DEFAULT_SCENARIO")
    if default_scenario:
        data["default_scenario"] = default_scenario.strip()

    log_level = os.getenv("FAILURE_LAB_LOG_LEVEL")
    if log_level:
        data["log_level"] = log_level.strip()

    return load_config_from_dict(data)


def configure_logging(config: Optional[FailureLabConfig] = None) -> None:
    """Configure root logging for hosts that embed the engine."""
    config = config or get_default_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.debug(f"Logging configured at {config.log_level}")
