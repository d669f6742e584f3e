"""
Distribution service package.

This package decides whether each distributor in a delegation hierarchy
may operate in each city of a catalog. It provides:

- app.rules: Territory model, region matcher and permission evaluator.
- app.catalog: CSV city catalog loading.
- app.intake: Permission requests from YAML files or an operator prompt.
- app.reporting: Sinks that render decision records.
- app.driver: Cartesian evaluation of cities x distributors.
- app.main: Command line entry point.

Guidelines:
- Evaluation is pure; all I/O happens before or after the driver runs.
- Keep decisions deterministic and observable (metrics + logs).
"""
