"""
Unit tests for the evaluation driver.
"""

import pytest
from unittest.mock import MagicMock

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.errors import CyclicHierarchyError
from shared.metrics import get_metrics_collector
from service_distribution.app.driver import EvaluationDriver, run_all
from service_distribution.app.reporting.sinks import CollectingSink
from service_distribution.app.rules.engine import PermissionEvaluator
from service_distribution.app.rules.models import City, Decision, PermissionRuleSet


class TestEvaluationDriver:
    """Test cases for EvaluationDriver."""

    @pytest.fixture
    def cities(self):
        """Create sample cities."""
        return [
            City(code="PARIS", name="Paris", province="Ile-de-France", country="France"),
            City(code="LYON", name="Lyon", province="Auvergne-Rhone-Alpes", country="France"),
            City(code="CHIAO", name="Chicago", province="Illinois", country="United States"),
        ]

    @pytest.fixture
    def rule_sets(self):
        """Create a two-level distributor chain."""
        parent = PermissionRuleSet("DISTRIBUTOR1", include_regions=["France", "United States"])
        child = PermissionRuleSet(
            "DISTRIBUTOR2",
            include_regions=["France"],
            exclude_regions=["Ile-de-France"],
            parent=parent
        )
        return [parent, child]

    @pytest.fixture
    def cyclic_rule_set(self):
        """Create a rule set whose chain loops."""
        a = PermissionRuleSet("LOOP_A", include_regions=["France"])
        b = PermissionRuleSet("LOOP_B", include_regions=["France"], parent=a)
        a.link_parent(b)
        return b

    def test_cartesian_order(self, cities, rule_sets):
        """Test cities are the outer loop and distributors the inner loop."""
        run = EvaluationDriver().run_all(cities, rule_sets)

        pairs = [(r.city_code, r.distributor_name) for r in run]
        assert pairs == [
            ("PARIS", "DISTRIBUTOR1"), ("PARIS", "DISTRIBUTOR2"),
            ("LYON", "DISTRIBUTOR1"), ("LYON", "DISTRIBUTOR2"),
            ("CHIAO", "DISTRIBUTOR1"), ("CHIAO", "DISTRIBUTOR2"),
        ]

    def test_decisions(self, cities, rule_sets):
        """Test each pair carries the evaluator's decision."""
        run = EvaluationDriver().run_all(cities, rule_sets)

        assert [r.decision for r in run] == [
            Decision.GRANTED, Decision.DENIED,
            Decision.GRANTED, Decision.GRANTED,
            Decision.GRANTED, Decision.DENIED,
        ]
        assert run.ok is True
        assert len(run) == 6
        assert run[1].reason == "province 'Ile-de-France' is excluded by 'Ile-de-France'"

    def test_records_forwarded_to_sink(self, cities, rule_sets):
        """Test every record reaches the sink in order."""
        sink = CollectingSink()

        run = EvaluationDriver(sink=sink).run_all(cities, rule_sets)

        assert sink.records == run.records

    def test_empty_inputs(self, rule_sets):
        """Test no cities yields no records."""
        sink = MagicMock()

        run = EvaluationDriver(sink=sink).run_all([], rule_sets)

        assert len(run) == 0
        sink.emit.assert_not_called()

    def test_cycle_aborts_before_output(self, cities, rule_sets, cyclic_rule_set):
        """Test a cycle aborts the run before any record is emitted."""
        sink = MagicMock()

        with pytest.raises(CyclicHierarchyError) as exc_info:
            EvaluationDriver(sink=sink).run_all(cities, rule_sets + [cyclic_rule_set])

        assert exc_info.value.distributor_name == "LOOP_B"
        sink.emit.assert_not_called()

    def test_continue_on_error(self, cities, rule_sets, cyclic_rule_set):
        """Test unaffected pairs are still reported when continuing."""
        sink = CollectingSink()
        driver = EvaluationDriver(sink=sink, continue_on_error=True)

        run = driver.run_all(cities, rule_sets + [cyclic_rule_set])

        assert len(run) == 6
        assert len(run.failures) == 3
        assert {f.distributor_name for f in run.failures} == {"LOOP_B"}
        assert [f.city_code for f in run.failures] == ["PARIS", "LYON", "CHIAO"]
        assert run.ok is False
        assert all(r.distributor_name != "LOOP_B" for r in sink.records)

    def test_metrics_recorded(self, cities, rule_sets, cyclic_rule_set):
        """Test decisions and failures are counted."""
        metrics = get_metrics_collector("distribution")
        driver = EvaluationDriver(continue_on_error=True, metrics=metrics)

        driver.run_all(cities, rule_sets + [cyclic_rule_set])

        assert metrics.sample("decisions_total", {"decision": "YES"}) == 4
        assert metrics.sample("decisions_total", {"decision": "NO"}) == 2
        assert metrics.sample(
            "evaluation_failures_total", {"error_type": "CYCLIC_HIERARCHY_ERROR"}
        ) == 3
        assert metrics.sample("evaluation_duration_seconds_count") == 6

    def test_uses_given_evaluator(self, cities, rule_sets):
        """Test the driver honours the evaluator's depth limit."""
        driver = EvaluationDriver(evaluator=PermissionEvaluator(max_depth=1))

        with pytest.raises(CyclicHierarchyError):
            driver.run_all(cities, rule_sets)

    def test_module_level_run_all(self, cities, rule_sets):
        """Test the convenience function."""
        run = run_all(cities, rule_sets)

        assert len(run) == len(cities) * len(rule_sets)
