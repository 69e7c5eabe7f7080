"""
Shared fixtures for Failure Lab tests.
"""

import pytest

from failure_lab import (
    MetricSnapshot,
    ScenarioKey,
    SymptomQuiz,
    get_testing_config,
    select_scenario,
)


@pytest.fixture
def testing_config():
    """Quiet configuration for tests."""
    return get_testing_config()


@pytest.fixture
def retry_storm_sim(testing_config):
    """Fresh retry_storm session."""
    return select_scenario(ScenarioKey.RETRY_STORM, config=testing_config)


@pytest.fixture
def backpressure_sim(testing_config):
    """Fresh backpressure session."""
    return select_scenario(ScenarioKey.BACKPRESSURE, config=testing_config)


@pytest.fixture
def exhaustion_sim(testing_config):
    """Fresh resource_exhaustion session."""
    return select_scenario(ScenarioKey.RESOURCE_EXHAUSTION, config=testing_config)


@pytest.fixture
def quiz():
    """Fresh symptom quiz."""
    return SymptomQuiz()


@pytest.fixture
def out_of_range_snapshot():
    """Snapshot with every field outside its domain."""
    return MetricSnapshot(
        incoming_load=250,
        error_rate=-10,
        queue_depth=101,
        p50=1,
        p99=99999,
        healthy_capacity=-0.5,
    )
