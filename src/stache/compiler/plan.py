# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Invocation plans: validated, immutable descriptions of a presenter call.

A plan is plain data plus a tiny executor. It is produced only by the
reference compiler, after validation, and is executed against live presenter
instances at render time without being checked again.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


def is_truthy(value: object) -> bool:
    """Truthiness used by conditionals.

    Only ``False`` and ``None`` are false. Empty strings, zero and empty
    collections are true, unlike Python's ``bool()``.
    """
    return value is not False and value is not None


class InvocationPlan(BaseModel):
    """How to call one presenter capability.

    Attributes:
        identifier: Template identifier the plan was compiled from.
        attribute: Name of the method looked up on the presenter instance.
        passes_argument: Whether the parameter is passed positionally.
        argument: The positional argument, when passed.
        keyword_arguments: ``(name, value)`` pairs passed by keyword.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    attribute: str
    passes_argument: bool = False
    argument: str | None = None
    keyword_arguments: tuple[tuple[str, str], ...] = ()

    def execute(self, presenter: Any) -> Any:
        """Call the method on *presenter* and return its raw result.

        Exceptions raised by the method propagate unchanged.
        """
        method = getattr(presenter, self.attribute)
        args = (self.argument,) if self.passes_argument else ()
        return method(*args, **dict(self.keyword_arguments))


class ConditionalPlan(InvocationPlan):
    """A plan whose result is coerced with :func:`is_truthy`."""

    def execute(self, presenter: Any) -> bool:
        return is_truthy(super().execute(presenter))
