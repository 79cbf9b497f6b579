# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""The reference value produced for each template placeholder."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############

CONDITIONAL_SUFFIX = "?"


class Reference(BaseModel):
    """A parsed template reference: ``identifier[.parameter] [key=value ...]``.

    Attributes are kept as an ordered tuple of pairs rather than a mapping so
    that a key supplied twice is still visible to the compiler.

    Attributes:
        identifier: Name of the presenter capability, including any trailing ``?``.
        parameter: Optional single positional parameter.
        attributes: Ordered ``(key, value)`` pairs.
        source: Raw tag text the reference was scanned from, if known.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    parameter: str | None = None
    attributes: tuple[tuple[str, str], ...] = ()
    source: str | None = None

    @property
    def is_conditional(self) -> bool:
        return self.identifier.endswith(CONDITIONAL_SUFFIX)

    @property
    def attribute_keys(self) -> list[str]:
        return [key for key, _ in self.attributes]

    @property
    def text(self) -> str:
        """The tag text for this reference, used in diagnostics and cache keys."""
        if self.source is not None:
            return self.source
        return self.render()

    def render(self) -> str:
        """Render the canonical tag text.

        A conditional identifier with a parameter is rendered with the ``?``
        after the parameter (``even.42?``), matching how it is written in tags.
        """
        name = self.identifier
        suffix = ""
        if self.parameter is not None and self.is_conditional:
            name = name[: -len(CONDITIONAL_SUFFIX)]
            suffix = CONDITIONAL_SUFFIX
        head = name if self.parameter is None else f"{name}.{self.parameter}{suffix}"
        pairs = [f"{key}={_quote(value)}" for key, value in self.attributes]
        return " ".join([head, *pairs])


# ################
# Implementation
# ################


def _quote(value: str) -> str:
    """Quote an attribute value when it would not survive as a bare word."""
    if value and not any(ch.isspace() or ch in "\"'" for ch in value):
        return value
    if '"' not in value:
        return f'"{value}"'
    return f"'{value}'"
