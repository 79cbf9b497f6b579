# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Call-shape descriptions of presenter methods exposed to templates."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class PresenterCapability(BaseModel):
    """One presenter method as seen by the template compiler.

    Attributes:
        identifier: Name used in templates (e.g. ``title`` or ``even?``).
        attribute: Python attribute name of the method on the presenter.
        positional_count: Number of positional parameters the method declares.
        positional_optional: Whether the single positional parameter has a default.
        variadic: Whether the method declares ``*args``.
        required_keywords: Keyword-only parameters without a default.
        optional_keywords: Keyword-only parameters with a default.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    attribute: str
    positional_count: int = 0
    positional_optional: bool = False
    variadic: bool = False
    required_keywords: frozenset[str] = _Field(default_factory=frozenset)
    optional_keywords: frozenset[str] = _Field(default_factory=frozenset)

    @property
    def unsupported_arity(self) -> bool:
        """True when no reference can ever call this method."""
        return self.variadic or self.positional_count > 1

    @property
    def accepts_parameter(self) -> bool:
        return self.positional_count == 1

    @property
    def requires_parameter(self) -> bool:
        return self.positional_count == 1 and not self.positional_optional

    @property
    def keywords(self) -> frozenset[str]:
        """All keyword parameter names, required and optional."""
        return self.required_keywords | self.optional_keywords

    @property
    def is_conditional(self) -> bool:
        return self.identifier.endswith("?")

    def call_shape(self) -> str:
        """Render a short human-readable call shape, e.g. ``widget(size=, [color=])``."""
        parts: list[str] = []
        if self.unsupported_arity:
            parts.append("<unsupported arity>")
        elif self.accepts_parameter:
            parts.append("[parameter]" if self.positional_optional else "parameter")
        parts.extend(f"{name}=" for name in sorted(self.required_keywords))
        parts.extend(f"[{name}=]" for name in sorted(self.optional_keywords))
        return f"{self.identifier}({', '.join(parts)})"
