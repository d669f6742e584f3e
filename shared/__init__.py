"""
Shared utilities for the Distribution Territory Checker.

This package aggregates common building blocks consumed by the service:

- config: Settings via pydantic-settings
- logging: Structured logging with run correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses

Any cross-component logic should live here to avoid import cycles. Do not
import from service_* packages into shared/.
"""
