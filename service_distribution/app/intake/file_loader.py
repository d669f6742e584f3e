"""
Load permission requests from a YAML document.

Expected layout::

    distributors:
      - name: DISTRIBUTOR1
        include: India, United States
        exclude: Karnataka
      - name: DISTRIBUTOR2
        parent: DISTRIBUTOR1
        include: [India]
        exclude: [Tamil Nadu]
"""

from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from shared.errors import RuleRequestError
from ..rules.models import PermissionRequest


def parse_rule_document(document: Any) -> List[PermissionRequest]:
    """Validate a loaded YAML document into permission requests."""
    if not isinstance(document, dict) or "distributors" not in document:
        raise RuleRequestError("Rules document must contain a 'distributors' list")

    entries = document["distributors"]
    if not isinstance(entries, list):
        raise RuleRequestError("'distributors' must be a list")

    requests = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise RuleRequestError(f"Distributor entry {index} must be a mapping", {"index": index})
        try:
            requests.append(PermissionRequest(
                distributor_name=entry.get("name", ""),
                include_regions=entry.get("include"),
                exclude_regions=entry.get("exclude"),
                parent=entry.get("parent"),
            ))
        except PydanticValidationError as e:
            raise RuleRequestError(
                f"Invalid distributor entry {index}",
                {"index": index, "errors": [err["msg"] for err in e.errors()]}
            ) from e
    return requests


def load_rule_requests(path: Union[str, Path]) -> List[PermissionRequest]:
    """Read and validate permission requests from a YAML file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise RuleRequestError(f"Error while opening the file {path}", {"path": str(path), "error": str(e)}) from e
    except yaml.YAMLError as e:
        raise RuleRequestError(f"Invalid YAML in {path}", {"path": str(path), "error": str(e)}) from e

    return parse_rule_document(document)
