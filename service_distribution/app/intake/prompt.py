"""
Interactive collection of distributor permissions from an operator.
"""

import sys
from typing import Callable, List, Optional, TextIO

from pydantic import ValidationError as PydanticValidationError

from shared.logging import get_logger
from shared.errors import RuleRequestError
from ..rules.models import PermissionRequest

logger = get_logger("distribution.prompt")


class PermissionPrompt:
    """Asks the operator for each distributor's name and region lists.

    Every distributor after the first is recorded as a sub-distributor of the
    one entered just before it, so the prompt always yields a single chain.
    """

    def __init__(
        self,
        input_fn: Callable[[], str] = input,
        output: Optional[TextIO] = None
    ):
        self.input_fn = input_fn
        self.output = output if output is not None else sys.stderr

    def _ask(self, prompt: str) -> str:
        print(prompt, file=self.output)
        try:
            return self.input_fn()
        except EOFError as e:
            raise RuleRequestError(f"Input ended while waiting for: {prompt}") from e

    def collect_one(self, parent: Optional[str] = None) -> PermissionRequest:
        """Collect a single distributor's permission request."""
        name = self._ask("Please enter Distributor Name:").strip()
        print(f"Permissions for {name}", file=self.output)
        include = self._ask("INCLUDE:")
        exclude = self._ask("EXCLUDE:")

        try:
            return PermissionRequest(
                distributor_name=name,
                include_regions=include,
                exclude_regions=exclude,
                parent=parent,
            )
        except PydanticValidationError as e:
            raise RuleRequestError(
                f"Invalid input for distributor '{name}'",
                {"errors": [err["msg"] for err in e.errors()]}
            ) from e

    def collect(self, count: int = 2) -> List[PermissionRequest]:
        """Collect ``count`` distributors, each linked beneath the previous one."""
        requests: List[PermissionRequest] = []
        parent: Optional[str] = None
        for _ in range(count):
            request = self.collect_one(parent)
            requests.append(request)
            parent = request.distributor_name
        logger.info("Permissions collected from operator", distributors=len(requests))
        return requests


def collect_from_prompt(
    count: int = 2,
    input_fn: Callable[[], str] = input,
    output: Optional[TextIO] = None
) -> List[PermissionRequest]:
    """Collect a chain of ``count`` permission requests interactively."""
    return PermissionPrompt(input_fn, output).collect(count)
