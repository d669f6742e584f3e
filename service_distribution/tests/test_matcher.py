"""
Unit tests for the region matcher.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_distribution.app.rules.matcher import first_match, matches


class TestRegionMatcher:
    """Test cases for include/exclude region matching."""

    @pytest.mark.parametrize("exclusion_mode", [True, False])
    def test_empty_rule_list_never_matches(self, exclusion_mode):
        """Test that an empty rule list matches nothing."""
        assert matches([], "France", exclusion_mode) is False
        assert matches((), "", exclusion_mode) is False

    def test_exclusion_requires_exact_match(self):
        """Test exclusion only matches whole tokens."""
        assert matches(["United States"], "United States", True) is True
        assert matches(["States"], "United States", True) is False
        assert matches(["United States of America"], "United States", True) is False

    def test_inclusion_matches_substring_of_rule(self):
        """Test inclusion matches when the rule contains the token."""
        assert matches(["united states"], "United States", False) is True
        assert matches(["France (metropolitan)"], "France", False) is True

    def test_inclusion_does_not_match_token_containing_rule(self):
        """Test inclusion is rule-contains-token, not token-contains-rule."""
        assert matches(["States"], "United States", False) is False

    def test_matching_is_case_insensitive(self):
        """Test both modes ignore case."""
        assert matches(["FRANCE"], "france", True) is True
        assert matches(["ile-de-FRANCE"], "Ile-de-France", False) is True

    def test_first_match_returns_original_rule(self):
        """Test first_match reports the rule as written."""
        rules = ["Spain", "Western EUROPE", "Europe"]

        assert first_match(rules, "europe", False) == "Western EUROPE"
        assert first_match(rules, "europe", True) == "Europe"
        assert first_match(rules, "Italy", False) is None

    def test_usa_exclusion_does_not_over_match(self):
        """Test a short exclusion does not knock out a longer token."""
        assert matches(["USA"], "USA Minor Outlying Islands", True) is False
        assert matches(["USA"], "usa", True) is True
