"""
Region matching for distributor include/exclude lists.

Inclusion and exclusion deliberately use different strictness:

- exclusion requires the city token to equal a rule exactly, so an exclude
  rule such as "USA" never knocks out a longer, merely similar token;
- inclusion accepts a rule that contains the city token, so a descriptive
  rule like "France (metropolitan)" still covers a city in "France".

Both comparisons are case-insensitive.
"""

from typing import Optional, Sequence

from shared.logging import get_logger

logger = get_logger("distribution.matcher")


def normalize(value: str) -> str:
    return value.lower()


def first_match(rule_list: Sequence[str], token: str, exclusion_mode: bool) -> Optional[str]:
    """Return the first rule in ``rule_list`` matching ``token``, or None."""
    item = normalize(token)
    for rule in rule_list:
        candidate = normalize(rule)
        if exclusion_mode:
            if candidate == item:
                logger.debug("Exclusion matched", token=token, rule=rule)
                return rule
        elif item in candidate:
            logger.debug("Inclusion matched", token=token, rule=rule)
            return rule
    return None


def matches(rule_list: Sequence[str], token: str, exclusion_mode: bool) -> bool:
    """Check whether ``token`` is covered by ``rule_list``."""
    return first_match(rule_list, token, exclusion_mode) is not None
