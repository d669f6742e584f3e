"""
Evaluation driver: every city against every distributor.
"""

from typing import Optional, Sequence

from shared.logging import get_logger, set_distributor_context
from shared.errors import CyclicHierarchyError
from shared.metrics import MetricsCollector
from .rules.engine import PermissionEvaluator
from .rules.models import (
    City, DecisionRecord, EvaluationFailure, EvaluationRun, PermissionRuleSet
)
from .reporting.sinks import CollectingSink, ReportSink


class EvaluationDriver:
    """Runs the Cartesian product of cities x rule sets through the evaluator.

    Cities form the outer loop and rule sets the inner loop, both in input
    order. Each pair is evaluated independently.
    """

    def __init__(
        self,
        evaluator: Optional[PermissionEvaluator] = None,
        sink: Optional[ReportSink] = None,
        continue_on_error: bool = False,
        metrics: Optional[MetricsCollector] = None
    ):
        self.logger = get_logger("distribution.driver")
        self.evaluator = evaluator or PermissionEvaluator()
        self.sink = sink if sink is not None else CollectingSink()
        self.continue_on_error = continue_on_error
        self.metrics = metrics

    def validate_hierarchies(self, rule_sets: Sequence[PermissionRuleSet]) -> None:
        """Raise CyclicHierarchyError for the first rule set with a broken chain."""
        for rule_set in rule_sets:
            self.evaluator.ancestry(rule_set)

    def run_all(self, cities: Sequence[City], rule_sets: Sequence[PermissionRuleSet]) -> EvaluationRun:
        """Evaluate every pair and emit one record per pair to the sink."""
        if not self.continue_on_error:
            self.validate_hierarchies(rule_sets)

        self.logger.info("Evaluation started", cities=len(cities), distributors=len(rule_sets))
        run = EvaluationRun()

        for city in cities:
            for rule_set in rule_sets:
                set_distributor_context(rule_set.distributor_name)
                try:
                    record = self._evaluate_pair(rule_set, city)
                except CyclicHierarchyError as e:
                    if not self.continue_on_error:
                        raise
                    self.logger.warning(
                        "Skipping pair with cyclic hierarchy",
                        distributor=rule_set.distributor_name,
                        city=city.code,
                        chain=e.chain
                    )
                    if self.metrics:
                        self.metrics.record_failure(e.code)
                    run.failures.append(EvaluationFailure(rule_set.distributor_name, city.code, e))
                    continue
                finally:
                    set_distributor_context(None)

                run.records.append(record)
                self.sink.emit(record)

        self.logger.info(
            "Evaluation finished",
            records=len(run.records),
            failures=len(run.failures)
        )
        return run

    def _evaluate_pair(self, rule_set: PermissionRuleSet, city: City) -> DecisionRecord:
        if self.metrics:
            with self.metrics.time_operation("evaluation_duration_seconds"):
                result = self.evaluator.explain(rule_set, city)
            self.metrics.record_decision(result.decision.value)
        else:
            result = self.evaluator.explain(rule_set, city)

        return DecisionRecord(
            distributor_name=rule_set.distributor_name,
            city=city,
            decision=result.decision,
            reason=result.reason
        )


def run_all(
    cities: Sequence[City],
    rule_sets: Sequence[PermissionRuleSet],
    sink: Optional[ReportSink] = None
) -> EvaluationRun:
    """Evaluate all pairs with a default driver."""
    return EvaluationDriver(sink=sink).run_all(cities, rule_sets)
