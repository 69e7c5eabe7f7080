"""
Failure Lab - Scenario Library.

============================================================
RESPONSIBILITY
============================================================
Defines the three failure-shape scenarios.

- Initial metric snapshot per scenario
- Four instinct actions per scenario
- Prompt and diagram text

============================================================
SCENARIOS
============================================================
1. retry_storm          Load amplification / retry storms
2. backpressure         Backpressure collapse
3. resource_exhaustion  Resource exhaustion (hard limits)

Transition deltas are illustrative heuristics. What matters
is direction, relative size between good and bad instincts,
and the reveal labels.

The only history-dependent action is `restart` in
resource_exhaustion: it relapses once any action has
already been applied in the session.

============================================================
"""

import logging
from typing import Dict, List, Tuple, Union

from .models import Action, MetricSnapshot, ScenarioSpec, TransitionFn, TransitionResult
from .types import ScenarioKey, UnknownScenarioError


logger = logging.getLogger(__name__)


# ============================================================
# SHARED BASELINE
# ============================================================

SHARED_INITIAL = MetricSnapshot(
    incoming_load=55,
    error_rate=2,
    queue_depth=20,
    p50=80,
    p99=220,
    healthy_capacity=75,
)

HINT_AFTER_REVEAL = (
    "Tip: try a different instinct and watch which metric goes "
    "nonlinear first."
)


def create_action(action_id: str, label: str, transition: TransitionFn) -> Action:
    """Create an instinct action."""
    return Action(action_id=action_id, label=label, transition=transition)


# ============================================================
# RETRY STORM
# ============================================================

def _retry_harder(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            incoming_load=m.incoming_load + 25,
            error_rate=m.error_rate + 10,
            queue_depth=m.queue_depth + 22,
            p50=m.p50 + 60,
            p99=m.p99 + 1400,
            healthy_capacity=m.healthy_capacity - 18,
        ),
        headline="Retries became new traffic.",
        narrative=(
            "You turned a 2% failure into extra QPS. Retries stack on top of "
            "baseline load, saturate workers, and push p99 into seconds. The "
            "system is now failing because it’s trying to heal itself."
        ),
        reveal="Retry Storm (Load Amplification)",
    )


def _increase_timeouts(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            error_rate=m.error_rate + 4,
            queue_depth=m.queue_depth + 18,
            p50=m.p50 + 80,
            p99=m.p99 + 1800,
            healthy_capacity=m.healthy_capacity - 10,
        ),
        headline="You hid the failure by waiting longer.",
        narrative=(
            "Longer timeouts keep work in-flight. Threads stay occupied, "
            "queues deepen, and latency balloons. You didn’t reduce load, so "
            "the system has less room to recover."
        ),
        reveal="Retry/Timeout Amplification (Load Amplification family)",
    )


def _scale_everything(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            healthy_capacity=m.healthy_capacity + 8,
            error_rate=m.error_rate + 3,
            queue_depth=m.queue_depth + 10,
            p99=m.p99 + 700,
        ),
        headline="You added capacity… but also fed the hotspot.",
        narrative=(
            "Scaling can help, but if the bottleneck is downstream (DB, "
            "dependency, shared pool), you often accelerate collapse by "
            "allowing more concurrent work to pile into the constrained layer."
        ),
        reveal="Load Amplification risk (capacity without load control)",
    )


def _retry_budget(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            incoming_load=max(0, m.incoming_load - 8),
            error_rate=max(0, m.error_rate - 1),
            queue_depth=max(0, m.queue_depth - 8),
            p50=max(40, m.p50 - 10),
            p99=max(120, m.p99 - 60),
            healthy_capacity=min(100, m.healthy_capacity + 6),
        ),
        headline="You bounded the blast radius.",
        narrative=(
            "Backoff + budgets stop retries from becoming a second traffic "
            "source. Failures are now contained, and the system has space to "
            "recover without self-inflicted QPS spikes."
        ),
        reveal="Prevented: Retry Storm (by controlling retry load)",
    )


RETRY_STORM = ScenarioSpec(
    key=ScenarioKey.RETRY_STORM,
    title="Load Amplification / Retry Storms",
    initial=SHARED_INITIAL.evolve(
        incoming_load=55,
        error_rate=2,
        queue_depth=18,
        p50=90,
        p99=260,
        healthy_capacity=78,
    ),
    actions=(
        create_action("retry_harder", "Retry failed requests", _retry_harder),
        create_action("increase_timeouts", "Increase timeouts", _increase_timeouts),
        create_action("scale_everything", "Scale all services", _scale_everything),
        create_action("retry_budget", "Introduce retry limits + backoff", _retry_budget),
    ),
    prompt_title=(
        "The system starts returning 500s for ~2% of requests. What do you do?"
    ),
    prompt_body=(
        "A small downstream hiccup appears. Nothing is fully down (yet). Your "
        "next move determines whether this stays small or turns into "
        "self-inflicted load."
    ),
    diagram="Client → API → Worker Pool → DB",
)


# ============================================================
# BACKPRESSURE COLLAPSE
# ============================================================

def _queue_everything(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            queue_depth=m.queue_depth + 35,
            p99=m.p99 + 1800,
            p50=m.p50 + 200,
            error_rate=m.error_rate + 2,
            healthy_capacity=m.healthy_capacity - 12,
        ),
        headline="You stored pressure as space.",
        narrative=(
            "Queue depth climbs and becomes a memory/time bomb. Even if the "
            "downstream recovers, draining the backlog takes a long time, so "
            "users experience a long tail of slowness after the ‘fix.’"
        ),
        reveal="Backpressure Collapse",
    )


def _add_workers(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            queue_depth=m.queue_depth + 18,
            incoming_load=m.incoming_load + 8,
            p99=m.p99 + 1200,
            healthy_capacity=m.healthy_capacity - 20,
        ),
        headline="You amplified concurrency into the bottleneck.",
        narrative=(
            "More workers increase in-flight requests against a slower "
            "downstream. Throughput doesn’t improve much, but contention "
            "grows. The system feels ‘busier’ while making less progress."
        ),
        reveal="Backpressure Collapse risk (hidden pressure + concurrency)",
    )


def _apply_backpressure(m: MetricSnapshot, step: int) -> TransitionResult:
    # Shedding trades a few rejected requests for bounded latency
    return TransitionResult(
        next=m.evolve(
            incoming_load=max(0, m.incoming_load - 15),
            error_rate=m.error_rate + 2,
            queue_depth=max(0, m.queue_depth - 12),
            p50=max(60, m.p50 - 20),
            p99=max(150, m.p99 - 120),
            healthy_capacity=min(100, m.healthy_capacity + 10),
        ),
        headline="You preserved the system’s ability to breathe.",
        narrative=(
            "Shedding load is painful but stabilizing. You trade some errors "
            "for bounded latency and avoid creating a backlog that will haunt "
            "you after recovery."
        ),
        reveal="Prevented: Backpressure Collapse (by rejecting work)",
    )


def _pause_upstream(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            incoming_load=max(0, m.incoming_load - 22),
            queue_depth=max(0, m.queue_depth - 20),
            p99=max(160, m.p99 - 250),
            healthy_capacity=min(100, m.healthy_capacity + 8),
        ),
        headline="You stopped the pile-up.",
        narrative=(
            "Temporarily pausing upstream gives the slow component time to "
            "catch up. The main win is preventing queues and threads from "
            "filling until everything becomes a partial hang."
        ),
        reveal="Prevented: Backpressure Collapse (by stopping intake)",
    )


BACKPRESSURE = ScenarioSpec(
    key=ScenarioKey.BACKPRESSURE,
    title="Backpressure Collapse",
    initial=SHARED_INITIAL.evolve(
        incoming_load=60,
        error_rate=1,
        queue_depth=35,
        p50=110,
        p99=420,
        healthy_capacity=70,
    ),
    actions=(
        create_action(
            "queue_everything",
            "Queue requests if workers can't process fast enough",
            _queue_everything,
        ),
        create_action("add_workers", "Add workers to API", _add_workers),
        create_action(
            "apply_backpressure",
            "Apply backpressure (shed / reject)",
            _apply_backpressure,
        ),
        create_action("pause_upstream", "Pause upstream temporarily", _pause_upstream),
    ),
    prompt_title=(
        "A downstream service slows down ~3×. Requests start piling up. "
        "What do you do?"
    ),
    prompt_body=(
        "Nothing is “down.” But throughput dropped. If upstream keeps pushing "
        "at the same rate, pressure has to go somewhere."
    ),
    diagram=(
        "Client → API → Queue → Workers → Provider\n"
        "                         ↓\n"
        "                    slower x3"
    ),
)


# ============================================================
# RESOURCE EXHAUSTION
# ============================================================

RESTART_CLEARED_HEADLINE = "You cleared the stuck work—temporarily."
RESTART_RELAPSED_HEADLINE = "It worked…briefly. Then it relapsed."


def _increase_max_conn(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            healthy_capacity=m.healthy_capacity + 6,
            p99=m.p99 + 600,
            error_rate=m.error_rate + 4,
            queue_depth=m.queue_depth + 10,
        ),
        headline="You raised the ceiling… and worsened contention.",
        narrative=(
            "More DB connections can turn a limit into a thrash. If the DB is "
            "the bottleneck, higher concurrency can reduce per-query "
            "throughput and increase tail latency."
        ),
        reveal="Resource Exhaustion (hard limits + contention)",
    )


def _add_instances(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            incoming_load=m.incoming_load + 10,
            p99=m.p99 + 800,
            queue_depth=m.queue_depth + 12,
            healthy_capacity=m.healthy_capacity - 8,
        ),
        headline="You increased concurrency into the same cap.",
        narrative=(
            "Adding instances can increase the number of threads trying to "
            "acquire the same scarce resource. If the shared bottleneck is the "
            "DB pool, you can accelerate saturation."
        ),
        reveal="Resource Exhaustion risk (capacity added without ingress control)",
    )


def _restart(m: MetricSnapshot, step: int) -> TransitionResult:
    """
    Restart the service.

    Relapses whenever at least one action was applied before it
    in the session (step >= 1).
    """
    if step >= 1:
        return TransitionResult(
            next=m.evolve(
                error_rate=m.error_rate + 6,
                queue_depth=m.queue_depth + 18,
                p99=m.p99 + 1200,
                healthy_capacity=m.healthy_capacity - 10,
            ),
            headline=RESTART_RELAPSED_HEADLINE,
            narrative=(
                "Without reducing intake or concurrency, the same load pattern "
                "reappears and the pool exhausts again. This is the classic "
                "fast-relapse signature."
            ),
            reveal="Resource Exhaustion (fast relapse unless ingress is controlled)",
        )

    return TransitionResult(
        next=m.evolve(
            error_rate=max(0, m.error_rate - 2),
            queue_depth=max(0, m.queue_depth - 25),
            p99=max(250, m.p99 - 500),
            healthy_capacity=min(100, m.healthy_capacity + 10),
        ),
        headline=RESTART_CLEARED_HEADLINE,
        narrative=(
            "Restarts can drain in-flight requests and free resources. But "
            "unless you control load, the same pressure rebuilds."
        ),
        reveal="Resource Exhaustion (fast relapse unless ingress is controlled)",
    )


def _reduce_concurrency(m: MetricSnapshot, step: int) -> TransitionResult:
    return TransitionResult(
        next=m.evolve(
            incoming_load=max(0, m.incoming_load - 18),
            queue_depth=max(0, m.queue_depth - 18),
            error_rate=max(0, m.error_rate - 1),
            p50=max(70, m.p50 - 40),
            p99=max(180, m.p99 - 350),
            healthy_capacity=min(100, m.healthy_capacity + 14),
        ),
        headline="You created headroom so the system can drain.",
        narrative=(
            "Reducing concurrency lowers resource contention. Combined with "
            "load shedding, it prevents the system from immediately "
            "re-exhausting the resource while it recovers."
        ),
        reveal="Prevented: Resource Exhaustion (by controlling ingress and concurrency)",
    )


RESOURCE_EXHAUSTION = ScenarioSpec(
    key=ScenarioKey.RESOURCE_EXHAUSTION,
    title="Resource Exhaustion",
    initial=SHARED_INITIAL.evolve(
        incoming_load=65,
        error_rate=3,
        queue_depth=40,
        p50=140,
        p99=900,
        healthy_capacity=55,
    ),
    actions=(
        create_action(
            "increase_max_conn",
            "Increase max connections to DB",
            _increase_max_conn,
        ),
        create_action("add_instances", "Add instances to worker pool", _add_instances),
        create_action("restart", "Restart service", _restart),
        create_action(
            "reduce_concurrency",
            "Reduce concurrency of worker pool / shed load",
            _reduce_concurrency,
        ),
    ),
    prompt_title=(
        "DB connection pool is exhausted. Some requests hang. What do you do?"
    ),
    prompt_body=(
        "The system isn’t fully dead, it’s stuck. Work is in-flight, but "
        "progress is limited because a hard resource cap has been hit."
    ),
    diagram=(
        "API → Worker Pool → DB\n"
        "      (threads)    (conn pool maxed)"
    ),
)


# ============================================================
# REGISTRY
# ============================================================

SCENARIOS: Dict[ScenarioKey, ScenarioSpec] = {
    ScenarioKey.RETRY_STORM: RETRY_STORM,
    ScenarioKey.BACKPRESSURE: BACKPRESSURE,
    ScenarioKey.RESOURCE_EXHAUSTION: RESOURCE_EXHAUSTION,
}

PREVENTED_PREFIX = "Prevented:"


def resolve_scenario_key(key: Union[ScenarioKey, str]) -> ScenarioKey:
    """
    Resolve a scenario key from an enum member or its string value.

    Raises:
        UnknownScenarioError: If key is not a defined scenario
    """
    try:
        return ScenarioKey(key)
    except ValueError:
        logger.error(f"Unknown scenario requested: {key!r}")
        raise UnknownScenarioError(key) from None


def get_scenario_spec(key: Union[ScenarioKey, str]) -> ScenarioSpec:
    """Get the Scenario Spec for a key."""
    return SCENARIOS[resolve_scenario_key(key)]


def list_scenarios() -> List[ScenarioSpec]:
    """All scenarios in definition order."""
    return list(SCENARIOS.values())


def get_all_reveal_labels() -> Dict[ScenarioKey, Tuple[str, ...]]:
    """
    Reveal labels each scenario can emit.

    Evaluated against the initial snapshot at step 0 and step 1 so
    both branches of history-dependent actions are included.
    """
    labels: Dict[ScenarioKey, Tuple[str, ...]] = {}
    for key, spec in SCENARIOS.items():
        seen: List[str] = []
        for action in spec.actions:
            for step in (0, 1):
                reveal = action(spec.initial, step).reveal
                if reveal and reveal not in seen:
                    seen.append(reveal)
        labels[key] = tuple(seen)
    return labels


def is_prevention_label(label: str) -> bool:
    """Check if a reveal label names a failure shape that was avoided."""
    return label.startswith(PREVENTED_PREFIX)
