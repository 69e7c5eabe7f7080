"""
Failure Lab - Failure-Mode Simulation Engine.

============================================================
PURPOSE
============================================================
Deterministic, discrete-step simulator used to teach three
classic distributed-systems failure shapes:

1. Load amplification (retry storms)
2. Backpressure collapse
3. Resource exhaustion

A user applies "instinct" actions to a simulated service.
Each action maps the current metric snapshot to a new one,
with a headline, a narrative and a reveal label naming the
failure pattern.

============================================================
METRICS
============================================================

incoming_load     0-100       offered request rate
error_rate        0-100       fraction of requests failing
queue_depth       0-100       relative backlog size
p50               20-5000 ms  median latency
p99               50-20000 ms tail latency
healthy_capacity  0-100       capacity not lost to contention

Every committed snapshot is clamped into these domains.

============================================================
USAGE
============================================================

    from failure_lab import select_scenario, SymptomQuiz

    sim = select_scenario("resource_exhaustion")
    entry = sim.apply("restart")
    print(entry.headline)            # cleared temporarily
    entry = sim.apply("restart")
    print(entry.headline)            # relapsed
    print(sim.snapshot, sim.step, sim.revealed)
    sim.reset()

    quiz = SymptomQuiz()
    quiz.pick("Backpressure collapse")
    quiz.is_correct()
    quiz.next()

============================================================
"""

# Types
from .types import (
    ScenarioKey,
    FailureShape,
    MetricName,
    SHAPE_TO_SCENARIO,
    FailureLabError,
    UnknownScenarioError,
    ConfigurationError,
)

# Models
from .models import (
    MetricDomain,
    METRIC_DOMAINS,
    MetricSnapshot,
    TransitionResult,
    Action,
    ScenarioSpec,
    LogEntry,
)

# Clamp Policy
from .clamp import (
    clamp,
    clamp_metric,
    clamp_snapshot,
    is_within_domain,
    out_of_domain_fields,
)

# Configuration
from .config import (
    FailureLabConfig,
    get_default_config,
    get_testing_config,
    load_config_from_dict,
    load_config_from_env,
    configure_logging,
)

# Scenarios
from .scenario_library import (
    SCENARIOS,
    RETRY_STORM,
    BACKPRESSURE,
    RESOURCE_EXHAUSTION,
    SHARED_INITIAL,
    create_action,
    get_scenario_spec,
    list_scenarios,
    get_all_reveal_labels,
    is_prevention_label,
)

# Simulator
from .simulator import (
    Simulator,
    select_scenario,
)

# Quiz
from .quiz import (
    QuizQuestion,
    QuizFeedback,
    QUIZ_QUESTIONS,
    QUIZ_CHOICES,
    SymptomQuiz,
)

# Reporter
from .reporter import (
    SessionReport,
    ReportGenerator,
    create_report_generator,
    metric_risk,
)


__all__ = [
    # Types
    "ScenarioKey",
    "FailureShape",
    "MetricName",
    "SHAPE_TO_SCENARIO",

    # Exceptions
    "FailureLabError",
    "UnknownScenarioError",
    "ConfigurationError",

    # Models
    "MetricDomain",
    "METRIC_DOMAINS",
    "MetricSnapshot",
    "TransitionResult",
    "Action",
    "ScenarioSpec",
    "LogEntry",

    # Clamp Policy
    "clamp",
    "clamp_metric",
    "clamp_snapshot",
    "is_within_domain",
    "out_of_domain_fields",

    # Configuration
    "FailureLabConfig",
    "get_default_config",
    "get_testing_config",
    "load_config_from_dict",
    "load_config_from_env",
    "configure_logging",

    # Scenarios
    "SCENARIOS",
    "RETRY_STORM",
    "BACKPRESSURE",
    "RESOURCE_EXHAUSTION",
    "SHARED_INITIAL",
    "create_action",
    "get_scenario_spec",
    "list_scenarios",
    "get_all_reveal_labels",
    "is_prevention_label",

    # Simulator
    "Simulator",
    "select_scenario",

    # Quiz
    "QuizQuestion",
    "QuizFeedback",
    "QUIZ_QUESTIONS",
    "QUIZ_CHOICES",
    "SymptomQuiz",

    # Reporter
    "SessionReport",
    "ReportGenerator",
    "create_report_generator",
    "metric_risk",
]
