"""
Permission evaluation engine for the Distribution service.
"""

from typing import List, Optional, Tuple

from shared.logging import get_logger
from shared.errors import CyclicHierarchyError
from .matcher import first_match
from .models import (
    City, Decision, DecisionLevel, EvaluationResult, PermissionRuleSet
)

DEFAULT_MAX_DEPTH = 64


class PermissionEvaluator:
    """Evaluates a distributor's rule set, and its ancestors', against a city.

    A decision is GRANTED only when every level of the ancestor chain,
    root first, grants on its own rules. At each level exclusions are
    checked before inclusions and the absence of a matching include is a
    denial. A denying ancestor ends the evaluation before the child's own
    rules are looked at.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.logger = get_logger("distribution.evaluator")
        self.max_depth = max_depth

    def ancestry(self, rule_set: PermissionRuleSet) -> List[PermissionRuleSet]:
        """Return the chain from the root ancestor down to ``rule_set``."""
        chain = [rule_set]
        seen = {id(rule_set)}
        current = rule_set.parent
        while current is not None:
            if id(current) in seen:
                names = [rs.distributor_name for rs in chain]
                names.append(current.distributor_name)
                raise CyclicHierarchyError(rule_set.distributor_name, names)
            if len(chain) >= self.max_depth:
                names = [rs.distributor_name for rs in chain]
                raise CyclicHierarchyError(rule_set.distributor_name, names, reason="depth")
            seen.add(id(current))
            chain.append(current)
            current = current.parent
        chain.reverse()
        return chain

    def evaluate(self, rule_set: PermissionRuleSet, city: City) -> Decision:
        """Decide whether the distributor may operate in ``city``."""
        return self.explain(rule_set, city).decision

    def explain(self, rule_set: PermissionRuleSet, city: City) -> EvaluationResult:
        """Evaluate and report which level and rule produced the decision."""
        chain = self.ancestry(rule_set)

        for ancestor in chain[:-1]:
            result = self._evaluate_level(ancestor, city)
            if result.decision is Decision.DENIED:
                self.logger.debug(
                    "Ancestor denied",
                    distributor=rule_set.distributor_name,
                    ancestor=ancestor.distributor_name,
                    city=city.code
                )
                return EvaluationResult(
                    decision=Decision.DENIED,
                    reason=f"Parent distributor '{ancestor.distributor_name}' denied: {result.reason}",
                    decided_by=ancestor.distributor_name,
                    level=DecisionLevel.ANCESTOR,
                    matched_rule=result.matched_rule,
                    matched_field=result.matched_field
                )

        return self._evaluate_level(rule_set, city)

    def _evaluate_level(self, rule_set: PermissionRuleSet, city: City) -> EvaluationResult:
        """Apply one rule set's own include/exclude lists."""
        name = rule_set.distributor_name

        excluded = self._match_city(rule_set.exclude_regions, city, exclusion_mode=True)
        if excluded:
            field_name, rule = excluded
            return EvaluationResult(
                decision=Decision.DENIED,
                reason=f"{field_name} '{getattr(city, field_name)}' is excluded by '{rule}'",
                decided_by=name,
                matched_rule=rule,
                matched_field=field_name
            )

        included = self._match_city(rule_set.include_regions, city, exclusion_mode=False)
        if included:
            field_name, rule = included
            return EvaluationResult(
                decision=Decision.GRANTED,
                reason=f"{field_name} '{getattr(city, field_name)}' is included by '{rule}'",
                decided_by=name,
                matched_rule=rule,
                matched_field=field_name
            )

        return EvaluationResult(
            decision=Decision.DENIED,
            reason="No include region matched",
            decided_by=name
        )

    @staticmethod
    def _match_city(
        rules: Tuple[str, ...], city: City, exclusion_mode: bool
    ) -> Optional[Tuple[str, str]]:
        if not rules:
            return None
        for field_name, token in city.region_tokens():
            rule = first_match(rules, token, exclusion_mode)
            if rule is not None:
                return field_name, rule
        return None


def evaluate(rule_set: PermissionRuleSet, city: City) -> Decision:
    """Evaluate with a default-configured evaluator."""
    return PermissionEvaluator().evaluate(rule_set, city)
