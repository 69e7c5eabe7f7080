"""
Failure Lab - Simulator.

============================================================
PURPOSE
============================================================
Owns one scenario session and its mutable state.

SESSION STATE:
- snapshot: current clamped MetricSnapshot
- step:     number of actions applied (starts at 0)
- log:      append-only list of LogEntry
- revealed: True once any action carried a reveal label

TRANSITION RULES:
- apply(known id)   -> transition, clamp, commit, step + 1,
                       append log, reveal on first label
- apply(unknown id) -> no-op, state unchanged
- reset()           -> initial snapshot, step 0, empty log,
                       revealed False

CONSTRAINTS:
- Every committed snapshot passes through the clamp policy
- step never decreases except on reset
- revealed never clears except on reset
- Actions are never rejected based on metric values

============================================================
"""

import logging
from typing import List, Optional, Union

from .clamp import clamp_snapshot
from .config import FailureLabConfig, get_default_config
from .models import LogEntry, MetricSnapshot, ScenarioSpec
from .scenario_library import HINT_AFTER_REVEAL, get_scenario_spec
from .types import ScenarioKey


logger = logging.getLogger(__name__)


class Simulator:
    """
    Discrete-step failure-mode simulator for one scenario.

    Each session gets its own instance; nothing is shared
    between simulators.
    """

    def __init__(
        self,
        spec: ScenarioSpec,
        config: Optional[FailureLabConfig] = None,
    ):
        """
        Initialize simulator.

        Args:
            spec: Scenario to simulate
            config: Session configuration
        """
        self._spec = spec
        self._config = config or get_default_config()
        self._snapshot: MetricSnapshot = spec.initial
        self._step = 0
        self._log: List[LogEntry] = []
        self._revealed = False
        self._first_reveal: Optional[str] = None

    # --------------------------------------------------------
    # Accessors
    # --------------------------------------------------------

    @property
    def spec(self) -> ScenarioSpec:
        """Scenario being simulated."""
        return self._spec

    @property
    def scenario_key(self) -> ScenarioKey:
        return self._spec.key

    @property
    def config(self) -> FailureLabConfig:
        return self._config

    @property
    def snapshot(self) -> MetricSnapshot:
        """Current clamped metric snapshot."""
        return self._snapshot

    @property
    def step(self) -> int:
        """Number of actions applied since the last reset."""
        return self._step

    @property
    def log(self) -> List[LogEntry]:
        """Copy of the session log, oldest first."""
        return list(self._log)

    @property
    def revealed(self) -> bool:
        return self._revealed

    @property
    def first_reveal(self) -> Optional[str]:
        """Reveal label that first flipped `revealed`, if any."""
        return self._first_reveal

    @property
    def latest_entry(self) -> Optional[LogEntry]:
        """Most recent log entry, the one a presentation layer shows."""
        return self._log[-1] if self._log else None

    @property
    def hint(self) -> Optional[str]:
        """Follow-up tip shown once a failure shape has been revealed."""
        return HINT_AFTER_REVEAL if self._revealed else None

    # --------------------------------------------------------
    # Operations
    # --------------------------------------------------------

    def apply(self, action_id: str) -> Optional[LogEntry]:
        """
        Apply an instinct action to the current snapshot.

        Args:
            action_id: Id of an action in the active scenario

        Returns:
            The committed LogEntry, or None if the id is unknown
        """
        action = self._spec.find_action(action_id)
        if action is None:
            logger.warning(
                f"Ignoring unknown action {action_id!r} "
                f"for scenario {self._spec.key.value}"
            )
            return None

        result = action(self._snapshot, self._step)
        entry = LogEntry(action_id=action_id, result=result, step=self._step)

        # Everything that can fail runs before any state is committed
        next_snapshot = clamp_snapshot(result.next)
        next_log = self._retained(self._log + [entry])

        self._snapshot = next_snapshot
        self._step += 1
        self._log = next_log

        if self._config.log_transitions:
            logger.debug(
                f"{self._spec.key.value}: applied {action_id} "
                f"at step {entry.step}: {result.headline}"
            )

        if result.reveal and not self._revealed:
            self._revealed = True
            self._first_reveal = result.reveal
            if self._config.log_transitions:
                logger.info(
                    f"{self._spec.key.value}: failure shape revealed: {result.reveal}"
                )

        return entry

    def reset(self) -> None:
        """Restore the scenario's initial state."""
        self._snapshot = self._spec.initial
        self._step = 0
        self._log = []
        self._revealed = False
        self._first_reveal = None

        if self._config.log_transitions:
            logger.info(f"{self._spec.key.value}: session reset")

    def _retained(self, log: List[LogEntry]) -> List[LogEntry]:
        """Apply the max_log_entries cap, dropping the oldest entries."""
        limit = self._config.max_log_entries
        if limit is not None and len(log) > limit:
            return log[len(log) - limit:]
        return log


# ============================================================
# FACTORY
# ============================================================

def select_scenario(
    key: Union[ScenarioKey, str, None] = None,
    config: Optional[FailureLabConfig] = None,
) -> Simulator:
    """
    Start a fresh session for a scenario.

    Args:
        key: Scenario key; config.default_scenario when omitted
        config: Session configuration

    Returns:
        New Simulator at step 0 with an empty log

    Raises:
        UnknownScenarioError: If key is not a defined scenario
    """
    config = config or get_default_config()
    spec = get_scenario_spec(config.default_scenario if key is None else key)
    logger.info(f"Scenario selected: {spec.key.value}")
    return Simulator(spec, config=config)
