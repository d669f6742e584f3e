"""
Permission data models for the Distribution service.
"""

from typing import Any, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from shared.errors import ValidationError


class Decision(str, Enum):
    """Outcome of evaluating one distributor against one city."""
    GRANTED = "YES"
    DENIED = "NO"

    @property
    def granted(self) -> bool:
        return self is Decision.GRANTED


class DecisionLevel(str, Enum):
    """Which part of the hierarchy produced a decision."""
    ANCESTOR = "ancestor"
    LOCAL = "local"


@dataclass(frozen=True)
class City:
    """City record from the catalog."""
    code: str
    name: str
    province: str
    country: str

    def label(self) -> str:
        return f"{self.name}-{self.province}-{self.country}"

    def region_tokens(self) -> Tuple[Tuple[str, str], ...]:
        """Geographic attributes in matching order: country, province, name."""
        return (
            ("country", self.country),
            ("province", self.province),
            ("name", self.name),
        )


@dataclass(eq=False)
class PermissionRuleSet:
    """Include/exclude regions for one distributor.

    ``parent`` is a shared, non-owning link to the delegating distributor.
    It is set once, either at construction or through ``link_parent``.
    """
    distributor_name: str
    include_regions: Tuple[str, ...] = ()
    exclude_regions: Tuple[str, ...] = ()
    parent: Optional["PermissionRuleSet"] = None

    def __post_init__(self):
        self.include_regions = tuple(self.include_regions)
        self.exclude_regions = tuple(self.exclude_regions)

    def link_parent(self, parent: "PermissionRuleSet") -> None:
        """Attach this rule set beneath ``parent``."""
        if self.parent is not None:
            raise ValidationError(
                f"Distributor '{self.distributor_name}' already has parent "
                f"'{self.parent.distributor_name}'",
                {"distributor": self.distributor_name}
            )
        self.parent = parent

    def __repr__(self) -> str:
        parent_name = self.parent.distributor_name if self.parent else None
        return (
            f"PermissionRuleSet(distributor_name={self.distributor_name!r}, "
            f"include_regions={self.include_regions!r}, "
            f"exclude_regions={self.exclude_regions!r}, parent={parent_name!r})"
        )


@dataclass
class EvaluationResult:
    """Result of evaluating a rule set for a city."""
    decision: Decision
    reason: str
    decided_by: str
    level: DecisionLevel = DecisionLevel.LOCAL
    matched_rule: Optional[str] = None
    matched_field: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision.granted


@dataclass
class DecisionRecord:
    """One (distributor, city) outcome handed to a reporting sink."""
    distributor_name: str
    city: City
    decision: Decision
    reason: Optional[str] = None

    @property
    def city_code(self) -> str:
        return self.city.code


@dataclass
class EvaluationFailure:
    """A (distributor, city) pair that could not be evaluated."""
    distributor_name: str
    city_code: str
    error: Exception


@dataclass
class EvaluationRun:
    """Ordered decision records from a driver run plus any failures."""
    records: List[DecisionRecord] = field(default_factory=list)
    failures: List[EvaluationFailure] = field(default_factory=list)

    def __iter__(self):
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index):
        return self.records[index]

    @property
    def ok(self) -> bool:
        return not self.failures


def parse_region_list(raw: Union[str, Sequence[str], None]) -> Tuple[str, ...]:
    """Split a comma-separated region string into trimmed, non-empty tokens.

    Anything other than a string or a list/tuple of strings is rejected with
    ``ValueError``; YAML reads unquoted ``NO`` or ``5`` as a bool or int, and
    the original spelling is lost by then.
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        parts: Sequence[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        parts = raw
    else:
        raise ValueError(
            f"regions must be text or a list of text, got {type(raw).__name__} {raw!r}; quote the value"
        )
    tokens = []
    for part in parts:
        if not isinstance(part, str):
            raise ValueError(
                f"region entries must be text, got {type(part).__name__} {part!r}; quote the value"
            )
        token = part.strip()
        if token:
            tokens.append(token)
    return tuple(tokens)


class PermissionRequest(BaseModel):
    """Already-collected permission request for one distributor."""
    distributor_name: str = Field(..., description="Distributor name (single token)")
    include_regions: Tuple[str, ...] = Field(default=(), description="Regions the distributor may serve")
    exclude_regions: Tuple[str, ...] = Field(default=(), description="Regions the distributor may not serve")
    parent: Optional[str] = Field(None, description="Name of the delegating distributor")

    @field_validator("distributor_name")
    @classmethod
    def _single_token_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("distributor name must not be empty")
        if any(ch.isspace() for ch in value):
            raise ValueError("distributor name must be a single token")
        return value

    @field_validator("include_regions", "exclude_regions", mode="before")
    @classmethod
    def _split_regions(cls, value: Any) -> Tuple[str, ...]:
        return parse_region_list(value)

    @field_validator("parent")
    @classmethod
    def _blank_parent(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None
