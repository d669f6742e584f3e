"""
Build linked permission rule sets from parsed requests.
"""

from typing import Dict, List, Sequence

from shared.logging import get_logger
from shared.errors import RuleRequestError
from ..rules.models import PermissionRequest, PermissionRuleSet

logger = get_logger("distribution.intake")


def build_rule_sets(requests: Sequence[PermissionRequest]) -> List[PermissionRuleSet]:
    """Create one rule set per request, in input order, and link parents by name."""
    by_name: Dict[str, PermissionRuleSet] = {}
    rule_sets: List[PermissionRuleSet] = []

    for request in requests:
        if request.distributor_name in by_name:
            raise RuleRequestError(
                f"Duplicate distributor '{request.distributor_name}'",
                {"distributor": request.distributor_name}
            )
        rule_set = PermissionRuleSet(
            distributor_name=request.distributor_name,
            include_regions=request.include_regions,
            exclude_regions=request.exclude_regions,
        )
        by_name[request.distributor_name] = rule_set
        rule_sets.append(rule_set)

    for request in requests:
        if request.parent is None:
            continue
        if request.parent == request.distributor_name:
            raise RuleRequestError(
                f"Distributor '{request.distributor_name}' cannot be its own parent",
                {"distributor": request.distributor_name}
            )
        parent = by_name.get(request.parent)
        if parent is None:
            raise RuleRequestError(
                f"Unknown parent '{request.parent}' for distributor '{request.distributor_name}'",
                {"distributor": request.distributor_name, "parent": request.parent}
            )
        by_name[request.distributor_name].link_parent(parent)

    logger.info("Rule sets built", distributors=len(rule_sets))
    return rule_sets
