"""
Shared error handling for the Distribution Territory Checker.
"""

from typing import Dict, Any, List, Optional, Sequence
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class DistributionException(Exception):
    """Base exception for the distribution checker."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(DistributionException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class CatalogError(DistributionException):
    """City catalog could not be read or parsed."""

    def __init__(self, message: str = "City catalog error", details: Optional[Dict[str, Any]] = None):
        super().__init__("CATALOG_ERROR", message, details)


class RuleRequestError(DistributionException):
    """Distributor permission requests could not be read or linked."""

    def __init__(self, message: str = "Invalid permission request", details: Optional[Dict[str, Any]] = None):
        super().__init__("RULE_REQUEST_ERROR", message, details)


class CyclicHierarchyError(DistributionException):
    """A distributor's parent chain loops back on itself or exceeds the depth limit."""

    def __init__(self, distributor_name: str, chain: Sequence[str], reason: str = "cycle"):
        self.distributor_name = distributor_name
        self.chain: List[str] = list(chain)
        if reason == "cycle":
            message = f"Cyclic permission hierarchy for distributor '{distributor_name}'"
        else:
            message = f"Permission hierarchy for distributor '{distributor_name}' is too deep"
        super().__init__(
            "CYCLIC_HIERARCHY_ERROR",
            f"{message}: {' -> '.join(self.chain)}",
            {"distributor": distributor_name, "chain": self.chain, "reason": reason}
        )
