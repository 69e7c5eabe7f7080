"""
Tests for the Scenario Library.

============================================================
TEST COVERAGE
============================================================
1. Registry and lookup
2. Action sets and reveal labels
3. Transition direction per action
4. Restart relapse rule
============================================================
"""

import pytest

from failure_lab import (
    BACKPRESSURE,
    RESOURCE_EXHAUSTION,
    RETRY_STORM,
    SCENARIOS,
    ScenarioKey,
    UnknownScenarioError,
    get_all_reveal_labels,
    get_scenario_spec,
    is_prevention_label,
    list_scenarios,
)
from failure_lab.scenario_library import (
    RESTART_CLEARED_HEADLINE,
    RESTART_RELAPSED_HEADLINE,
)


def _next(spec, action_id, step=0, snapshot=None):
    """Unclamped next snapshot for an action."""
    action = spec.find_action(action_id)
    return action(snapshot or spec.initial, step).next


# ============================================================
# REGISTRY TESTS
# ============================================================

class TestRegistry:
    """Test scenario lookup."""

    def test_three_scenarios(self):
        assert set(SCENARIOS) == set(ScenarioKey)
        assert [s.key for s in list_scenarios()] == [
            ScenarioKey.RETRY_STORM,
            ScenarioKey.BACKPRESSURE,
            ScenarioKey.RESOURCE_EXHAUSTION,
        ]

    @pytest.mark.parametrize("key", ["retry_storm", "backpressure", "resource_exhaustion"])
    def test_lookup_by_string(self, key):
        assert get_scenario_spec(key).key.value == key

    def test_lookup_by_enum(self):
        assert get_scenario_spec(ScenarioKey.BACKPRESSURE) is BACKPRESSURE

    @pytest.mark.parametrize("key", ["quiz", "", "RETRY_STORM", None, 3])
    def test_unknown_scenario(self, key):
        with pytest.raises(UnknownScenarioError) as exc_info:
            get_scenario_spec(key)
        assert exc_info.value.key == key

    def test_initial_snapshots(self):
        assert RETRY_STORM.initial.to_dict() == {
            "incoming_load": 55, "error_rate": 2, "queue_depth": 18,
            "p50": 90, "p99": 260, "healthy_capacity": 78,
        }
        assert BACKPRESSURE.initial.to_dict() == {
            "incoming_load": 60, "error_rate": 1, "queue_depth": 35,
            "p50": 110, "p99": 420, "healthy_capacity": 70,
        }
        assert RESOURCE_EXHAUSTION.initial.to_dict() == {
            "incoming_load": 65, "error_rate": 3, "queue_depth": 40,
            "p50": 140, "p99": 900, "healthy_capacity": 55,
        }

    def test_prompts_present(self):
        for spec in list_scenarios():
            assert spec.title
            assert spec.prompt_title.endswith("What do you do?")
            assert spec.prompt_body
            assert spec.diagram


# ============================================================
# ACTION SET TESTS
# ============================================================

class TestActionSets:
    """Test each scenario's closed action set."""

    def test_action_ids(self):
        assert RETRY_STORM.action_ids == (
            "retry_harder", "increase_timeouts", "scale_everything", "retry_budget",
        )
        assert BACKPRESSURE.action_ids == (
            "queue_everything", "add_workers", "apply_backpressure", "pause_upstream",
        )
        assert RESOURCE_EXHAUSTION.action_ids == (
            "increase_max_conn", "add_instances", "restart", "reduce_concurrency",
        )

    def test_action_ids_unique(self):
        for spec in list_scenarios():
            assert len(set(spec.action_ids)) == 4

    def test_find_action_missing(self):
        assert RETRY_STORM.find_action("restart") is None

    def test_every_action_reveals(self):
        for spec in list_scenarios():
            for action in spec.actions:
                for step in (0, 1, 5):
                    assert action(spec.initial, step).reveal

    def test_reveal_labels(self):
        labels = get_all_reveal_labels()

        assert labels[ScenarioKey.RETRY_STORM] == (
            "Retry Storm (Load Amplification)",
            "Retry/Timeout Amplification (Load Amplification family)",
            "Load Amplification risk (capacity without load control)",
            "Prevented: Retry Storm (by controlling retry load)",
        )
        assert labels[ScenarioKey.BACKPRESSURE] == (
            "Backpressure Collapse",
            "Backpressure Collapse risk (hidden pressure + concurrency)",
            "Prevented: Backpressure Collapse (by rejecting work)",
            "Prevented: Backpressure Collapse (by stopping intake)",
        )
        assert labels[ScenarioKey.RESOURCE_EXHAUSTION] == (
            "Resource Exhaustion (hard limits + contention)",
            "Resource Exhaustion risk (capacity added without ingress control)",
            "Resource Exhaustion (fast relapse unless ingress is controlled)",
            "Prevented: Resource Exhaustion (by controlling ingress and concurrency)",
        )

    def test_prevention_labels(self):
        assert is_prevention_label("Prevented: Backpressure Collapse (by rejecting work)")
        assert not is_prevention_label("Backpressure Collapse")

    def test_transitions_are_pure(self):
        """Same inputs give the same result and leave the input untouched."""
        for spec in list_scenarios():
            before = spec.initial
            for action in spec.actions:
                assert action(before, 0) == action(before, 0)
            assert spec.initial == before


# ============================================================
# TRANSITION DIRECTION TESTS
# ============================================================

class TestRetryStormTransitions:
    """Test retry_storm heuristics."""

    def test_retry_harder_literal_values(self):
        nxt = _next(RETRY_STORM, "retry_harder")

        assert nxt.incoming_load == 80
        assert nxt.error_rate == 12
        assert nxt.queue_depth == 40
        assert nxt.p99 == 1660
        assert nxt.healthy_capacity == 60

    def test_increase_timeouts_worsens(self):
        m = RETRY_STORM.initial
        nxt = _next(RETRY_STORM, "increase_timeouts")

        assert nxt.error_rate > m.error_rate
        assert nxt.queue_depth > m.queue_depth
        assert nxt.p99 > m.p99
        assert nxt.healthy_capacity < m.healthy_capacity

    def test_scale_everything_mixed(self):
        m = RETRY_STORM.initial
        nxt = _next(RETRY_STORM, "scale_everything")

        assert nxt.healthy_capacity > m.healthy_capacity
        assert nxt.error_rate > m.error_rate
        assert nxt.queue_depth > m.queue_depth
        assert nxt.p99 > m.p99

    def test_retry_budget_improves(self):
        m = RETRY_STORM.initial
        nxt = _next(RETRY_STORM, "retry_budget")

        assert nxt.incoming_load < m.incoming_load
        assert nxt.error_rate < m.error_rate
        assert nxt.queue_depth < m.queue_depth
        assert nxt.p99 < m.p99
        assert nxt.healthy_capacity > m.healthy_capacity

    def test_retry_harder_worse_than_timeouts_on_load(self):
        assert (
            _next(RETRY_STORM, "retry_harder").incoming_load
            > _next(RETRY_STORM, "increase_timeouts").incoming_load
        )


class TestBackpressureTransitions:
    """Test backpressure heuristics."""

    def test_queue_everything_balloons_queue(self):
        m = BACKPRESSURE.initial
        nxt = _next(BACKPRESSURE, "queue_everything")

        assert nxt.queue_depth == m.queue_depth + 35
        assert nxt.p99 > m.p99
        assert nxt.p50 > m.p50
        assert nxt.healthy_capacity < m.healthy_capacity

    def test_add_workers_drops_capacity_sharply(self):
        m = BACKPRESSURE.initial
        nxt = _next(BACKPRESSURE, "add_workers")

        assert nxt.incoming_load > m.incoming_load
        assert nxt.queue_depth > m.queue_depth
        assert m.healthy_capacity - nxt.healthy_capacity == 20

    @pytest.mark.parametrize("action_id", ["apply_backpressure", "pause_upstream"])
    def test_good_instincts_improve(self, action_id):
        m = BACKPRESSURE.initial
        nxt = _next(BACKPRESSURE, action_id)

        assert nxt.incoming_load < m.incoming_load
        assert nxt.queue_depth < m.queue_depth
        assert nxt.p99 < m.p99
        assert nxt.healthy_capacity > m.healthy_capacity

    def test_shedding_costs_errors(self):
        m = BACKPRESSURE.initial
        assert _next(BACKPRESSURE, "apply_backpressure").error_rate > m.error_rate


class TestResourceExhaustionTransitions:
    """Test resource_exhaustion heuristics."""

    def test_increase_max_conn(self):
        m = RESOURCE_EXHAUSTION.initial
        nxt = _next(RESOURCE_EXHAUSTION, "increase_max_conn")

        assert nxt.healthy_capacity > m.healthy_capacity
        assert nxt.p99 > m.p99
        assert nxt.error_rate > m.error_rate
        assert nxt.queue_depth > m.queue_depth

    def test_add_instances(self):
        m = RESOURCE_EXHAUSTION.initial
        nxt = _next(RESOURCE_EXHAUSTION, "add_instances")

        assert nxt.incoming_load > m.incoming_load
        assert nxt.p99 > m.p99
        assert nxt.queue_depth > m.queue_depth
        assert nxt.healthy_capacity < m.healthy_capacity

    def test_reduce_concurrency_improves(self):
        m = RESOURCE_EXHAUSTION.initial
        nxt = _next(RESOURCE_EXHAUSTION, "reduce_concurrency")

        assert nxt.incoming_load < m.incoming_load
        assert nxt.queue_depth < m.queue_depth
        assert nxt.error_rate < m.error_rate
        assert nxt.p99 < m.p99
        assert nxt.healthy_capacity > m.healthy_capacity

    def test_restart_first_action_clears(self):
        m = RESOURCE_EXHAUSTION.initial
        result = RESOURCE_EXHAUSTION.find_action("restart")(m, 0)

        assert result.headline == RESTART_CLEARED_HEADLINE
        assert result.next.queue_depth < m.queue_depth
        assert result.next.p99 < m.p99
        assert result.next.healthy_capacity > m.healthy_capacity

    @pytest.mark.parametrize("step", [1, 2, 10])
    def test_restart_later_relapses(self, step):
        m = RESOURCE_EXHAUSTION.initial
        result = RESOURCE_EXHAUSTION.find_action("restart")(m, step)

        assert result.headline == RESTART_RELAPSED_HEADLINE
        assert result.next.error_rate > m.error_rate
        assert result.next.queue_depth > m.queue_depth
        assert result.next.p99 > m.p99
        assert result.next.healthy_capacity < m.healthy_capacity

    def test_restart_branches_share_reveal(self):
        restart = RESOURCE_EXHAUSTION.find_action("restart")
        m = RESOURCE_EXHAUSTION.initial

        assert restart(m, 0).reveal == restart(m, 1).reveal == (
            "Resource Exhaustion (fast relapse unless ingress is controlled)"
        )

    def test_headline_text(self):
        assert RESTART_CLEARED_HEADLINE == "You cleared the stuck work—temporarily."
        assert RESTART_RELAPSED_HEADLINE == "It worked…briefly. Then it relapsed."
