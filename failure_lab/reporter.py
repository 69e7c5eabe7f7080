"""
Failure Lab Report Generator.

============================================================
PURPOSE
============================================================
Summarizes a simulator session for analysis.

Reports include:
- Step count and reveal state
- Reveal labels in the order they fired
- Action usage counts
- Initial vs current snapshot and per-field delta
- Whether a preventive instinct was used

Also provides the risk gauge used to render percentage
metrics, where healthy capacity is inverted.

============================================================
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .clamp import clamp
from .models import METRIC_DOMAINS, MetricSnapshot
from .scenario_library import is_prevention_label
from .simulator import Simulator
from .types import MetricName, ScenarioKey


logger = logging.getLogger(__name__)


# Metrics where a lower value means more risk
INVERTED_METRICS = {MetricName.HEALTHY_CAPACITY}


def metric_risk(name: MetricName, value: float) -> float:
    """
    Fill fraction (0..1) of a percentage metric's risk gauge.

    Raises:
        ValueError: For latency metrics, which are not gauged
    """
    name = MetricName(name)
    if METRIC_DOMAINS[name].unit != "%":
        raise ValueError(f"{name.value} is not a percentage metric")
    risk = 100 - value if name in INVERTED_METRICS else value
    return clamp(risk / 100, 0, 1)


# ============================================================
# SESSION REPORT
# ============================================================

@dataclass
class SessionReport:
    """Summary of one simulator session."""
    scenario_key: ScenarioKey
    steps: int
    revealed: bool
    first_reveal: Optional[str]
    initial: MetricSnapshot
    current: MetricSnapshot
    reveal_labels: List[str] = field(default_factory=list)
    action_counts: Dict[str, int] = field(default_factory=dict)
    headlines: List[str] = field(default_factory=list)

    @property
    def delta(self) -> Dict[str, float]:
        """Per-field change from the initial snapshot."""
        return self.current.delta(self.initial)

    @property
    def used_prevention(self) -> bool:
        """Whether any applied action avoided the failure shape."""
        return any(is_prevention_label(label) for label in self.reveal_labels)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scenario": self.scenario_key.value,
            "steps": self.steps,
            "revealed": self.revealed,
            "first_reveal": self.first_reveal,
            "reveal_labels": list(self.reveal_labels),
            "action_counts": dict(self.action_counts),
            "headlines": list(self.headlines),
            "used_prevention": self.used_prevention,
            "initial": self.initial.to_dict(),
            "current": self.current.to_dict(),
            "delta": self.delta,
        }


class ReportGenerator:
    """Generates session reports."""

    def generate(self, simulator: Simulator) -> SessionReport:
        """
        Build a report from a simulator's current session.

        Args:
            simulator: Session to summarize

        Returns:
            SessionReport
        """
        reveal_labels: List[str] = []
        action_counts: Dict[str, int] = {}
        headlines: List[str] = []

        for entry in simulator.log:
            action_counts[entry.action_id] = action_counts.get(entry.action_id, 0) + 1
            headlines.append(entry.headline)
            if entry.reveal:
                reveal_labels.append(entry.reveal)

        report = SessionReport(
            scenario_key=simulator.scenario_key,
            steps=simulator.step,
            revealed=simulator.revealed,
            first_reveal=simulator.first_reveal,
            initial=simulator.spec.initial,
            current=simulator.snapshot,
            reveal_labels=reveal_labels,
            action_counts=action_counts,
            headlines=headlines,
        )

        logger.debug(
            f"Generated report for {report.scenario_key.value}: "
            f"{report.steps} steps, revealed={report.revealed}"
        )
        return report


def create_report_generator() -> ReportGenerator:
    """Create a report generator."""
    return ReportGenerator()
