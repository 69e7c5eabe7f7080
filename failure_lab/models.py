"""
Failure Lab Models.

============================================================
PURPOSE
============================================================
Data models for the failure-mode simulation engine.

- MetricSnapshot: six bounded health signals
- TransitionResult: output of one instinct action
- Action: named pure transition function
- ScenarioSpec: fixed bundle of initial state + actions
- LogEntry: one applied action in a session

All models except LogEntry are frozen. Scenario data is
constant and is never mutated at runtime.

============================================================
"""

from dataclasses import dataclass, field, replace, fields
from typing import Callable, Dict, Any, Optional, Tuple

from .types import ScenarioKey, MetricName


# ============================================================
# METRIC DOMAINS
# ============================================================

@dataclass(frozen=True)
class MetricDomain:
    """Closed interval a metric must lie in."""
    lower: float
    upper: float
    unit: str = "%"

    def contains(self, value: float) -> bool:
        """Check if value lies inside the domain."""
        return self.lower <= value <= self.upper


METRIC_DOMAINS: Dict[MetricName, MetricDomain] = {
    MetricName.INCOMING_LOAD: MetricDomain(0, 100),
    MetricName.ERROR_RATE: MetricDomain(0, 100),
    MetricName.QUEUE_DEPTH: MetricDomain(0, 100),
    MetricName.P50: MetricDomain(20, 5000, unit="ms"),
    MetricName.P99: MetricDomain(50, 20000, unit="ms"),
    MetricName.HEALTHY_CAPACITY: MetricDomain(0, 100),
}


# ============================================================
# METRIC SNAPSHOT
# ============================================================

@dataclass(frozen=True)
class MetricSnapshot:
    """
    Simulated system health at one point in a session.

    Transitions may produce out-of-domain values; only
    clamped snapshots become the current simulator state.
    """
    incoming_load: float
    """Offered request rate, relative units (0-100)."""

    error_rate: float
    """Fraction of requests failing (0-100)."""

    queue_depth: float
    """Relative backlog size (0-100)."""

    p50: float
    """Median latency in ms (20-5000)."""

    p99: float
    """Tail latency in ms (50-20000)."""

    healthy_capacity: float
    """Capacity not consumed by contention or failure (0-100)."""

    def evolve(self, **changes: float) -> "MetricSnapshot":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def get(self, name: MetricName) -> float:
        """Read a metric by name."""
        return getattr(self, MetricName(name).value)

    def delta(self, other: "MetricSnapshot") -> Dict[str, float]:
        """Per-field difference self - other."""
        return {
            f.name: getattr(self, f.name) - getattr(other, f.name)
            for f in fields(self)
        }

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ============================================================
# TRANSITIONS
# ============================================================

@dataclass(frozen=True)
class TransitionResult:
    """
    Result of applying one action to a snapshot.

    `next` is unclamped; the simulator clamps it before commit.
    """
    next: MetricSnapshot
    headline: str
    narrative: str
    reveal: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "next": self.next.to_dict(),
            "headline": self.headline,
            "narrative": self.narrative,
            "reveal": self.reveal,
        }


TransitionFn = Callable[[MetricSnapshot, int], TransitionResult]


@dataclass(frozen=True)
class Action:
    """
    An instinct action.

    The transition is a pure function of (snapshot, step_index),
    where step_index is the number of actions already applied
    in the session.
    """
    action_id: str
    label: str
    transition: TransitionFn = field(repr=False, compare=False)

    def __call__(self, snapshot: MetricSnapshot, step_index: int) -> TransitionResult:
        return self.transition(snapshot, step_index)


# ============================================================
# SCENARIO SPEC
# ============================================================

@dataclass(frozen=True)
class ScenarioSpec:
    """Fixed data bundle for one failure-shape scenario."""
    key: ScenarioKey
    title: str
    initial: MetricSnapshot
    actions: Tuple[Action, ...]
    prompt_title: str
    prompt_body: str
    diagram: str

    @property
    def action_ids(self) -> Tuple[str, ...]:
        """Action ids in display order."""
        return tuple(a.action_id for a in self.actions)

    def find_action(self, action_id: str) -> Optional[Action]:
        """Look up an action by id; None if absent."""
        for action in self.actions:
            if action.action_id == action_id:
                return action
        return None


# ============================================================
# SESSION LOG
# ============================================================

@dataclass(frozen=True)
class LogEntry:
    """One committed action in a simulator session."""
    action_id: str
    result: TransitionResult
    step: int
    """Step index the action was applied at (zero-based)."""

    @property
    def headline(self) -> str:
        return self.result.headline

    @property
    def narrative(self) -> str:
        return self.result.narrative

    @property
    def reveal(self) -> Optional[str]:
        return self.result.reveal

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "action_id": self.action_id,
            "step": self.step,
            "headline": self.headline,
            "narrative": self.narrative,
            "reveal": self.reveal,
        }
