"""
Permission rules package.

Defines the territory data model and the evaluation algorithm used by the
Distribution service. A distributor's rule set is matched against a city's
country, province and name, and the outcome is composed with the same
evaluation for every ancestor in its delegation chain.

Modules of interest:
- models: City, PermissionRuleSet, Decision and result records.
- matcher: Case-insensitive region matching (substring include, exact exclude).
- engine: Ancestor-chain evaluation with cycle and depth guards.
"""
