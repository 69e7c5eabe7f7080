"""
Failure Lab - Types.

============================================================
PURPOSE
============================================================
Enumerations and exceptions shared by every Failure Lab module.

- Scenario identifiers (closed set of three)
- Failure shape labels (quiz vocabulary)
- Metric names
- Exception hierarchy

============================================================
EXCEPTION HIERARCHY
============================================================
FailureLabError (base)
├── UnknownScenarioError
└── ConfigurationError

Unknown actions are NOT an error class. Applying an action id
that is not in the active scenario is a logged no-op.

============================================================
"""

from enum import Enum
from typing import Optional


# ============================================================
# SCENARIO KEYS
# ============================================================

class ScenarioKey(str, Enum):
    """Identifier of a failure-shape scenario."""
    RETRY_STORM = "retry_storm"
    BACKPRESSURE = "backpressure"
    RESOURCE_EXHAUSTION = "resource_exhaustion"


# ============================================================
# FAILURE SHAPES
# ============================================================

class FailureShape(str, Enum):
    """
    Canonical failure-shape labels.

    These strings are the answer vocabulary of the symptom quiz.
    Label equality is exact, byte for byte.

    They are NOT equal to any action reveal label; reveal labels
    are longer pattern names such as "Retry Storm (Load
    Amplification)". Use SHAPE_TO_SCENARIO to link a shape to the
    scenario whose actions reveal it.
    """
    RETRY_STORM = "Retry storm / load amplification"
    BACKPRESSURE_COLLAPSE = "Backpressure collapse"
    RESOURCE_EXHAUSTION = "Resource exhaustion"


# Scenario each failure shape is demonstrated by
SHAPE_TO_SCENARIO = {
    FailureShape.RETRY_STORM: ScenarioKey.RETRY_STORM,
    FailureShape.BACKPRESSURE_COLLAPSE: ScenarioKey.BACKPRESSURE,
    FailureShape.RESOURCE_EXHAUSTION: ScenarioKey.RESOURCE_EXHAUSTION,
}


# ============================================================
# METRIC NAMES
# ============================================================

class MetricName(str, Enum):
    """Names of the six simulated health signals."""
    INCOMING_LOAD = "incoming_load"
    ERROR_RATE = "error_rate"
    QUEUE_DEPTH = "queue_depth"
    P50 = "p50"
    P99 = "p99"
    HEALTHY_CAPACITY = "healthy_capacity"


# ============================================================
# EXCEPTIONS
# ============================================================

class FailureLabError(Exception):
    """Base exception for Failure Lab."""
    pass


class UnknownScenarioError(FailureLabError):
    """Raised when a scenario key is not one of the defined scenarios."""

    def __init__(self, key: object):
        self.key = key
        valid = ", ".join(k.value for k in ScenarioKey)
        super().__init__(
            f"Unknown scenario {key!r} (expected one of: {valid})"
        )


class ConfigurationError(FailureLabError):
    """Raised when a configuration value is invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
