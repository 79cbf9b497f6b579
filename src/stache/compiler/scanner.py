# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scanner for reference tag text.

Converts the inside of a single tag, e.g. ``i18n.home.welcome fallback="Hi there"``,
into a :class:`~stache.model.reference.Reference`. Finding tag boundaries in
full template text is the template compiler's job, not this module's.

Grammar::

    reference  := head (WS attribute)*
    head       := name ["." parameter] ["?"]
    name       := [A-Za-z_][A-Za-z0-9_]*
    parameter  := any non-whitespace characters (may contain dots)
    attribute  := key "=" (bare | '"' chars '"' | "'" chars "'")
"""

from __future__ import annotations

from stache.errors import StacheError
from stache.model.reference import CONDITIONAL_SUFFIX, Reference

# ###############
# Public Interface
# ###############


class ReferenceSyntaxError(StacheError):
    """Raised when reference tag text is malformed.

    Attributes:
        text: The tag text being scanned.
        column: 1-based column of the error within *text*.
    """

    def __init__(self, message: str, text: str, column: int) -> None:
        super().__init__(f"Column {column} of '{text}': {message}")
        self.text = text
        self.column = column


def parse_reference(text: str) -> Reference:
    """Scan tag text into a Reference.

    A trailing ``?`` on the head belongs to the identifier, so ``even.42?``
    yields identifier ``even?`` with parameter ``42``.

    Args:
        text: The tag contents without delimiters.

    Returns:
        The scanned Reference, with ``source`` set to the stripped text.

    Raises:
        ReferenceSyntaxError: On an empty reference, an invalid name, an empty
            parameter, or a malformed attribute.
    """
    return _Scanner(text.strip()).scan()


# ################
# Implementation
# ################

_QUOTES = "\"'"


def _is_name_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class _Scanner:
    """Single-pass scanner over one tag's text."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def scan(self) -> Reference:
        if not self._text:
            raise self._error("Empty reference")
        identifier, parameter = self._scan_head()
        attributes: list[tuple[str, str]] = []
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            attributes.append(self._scan_attribute())
        return Reference(
            identifier=identifier,
            parameter=parameter,
            attributes=tuple(attributes),
            source=self._text,
        )

    # ------------------------------------------------------------------
    # Character access helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _advance(self) -> str:
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._current().isspace():
            self._advance()

    def _error(self, message: str, pos: int | None = None) -> ReferenceSyntaxError:
        return ReferenceSyntaxError(message, self._text, (self._pos if pos is None else pos) + 1)

    # ------------------------------------------------------------------
    # Head: name[.parameter][?]
    # ------------------------------------------------------------------

    def _scan_head(self) -> tuple[str, str | None]:
        start = self._pos
        if not _is_name_start(self._current()):
            raise self._error(f"Invalid reference name starting with {self._current()!r}")
        while not self._at_end() and _is_name_char(self._current()):
            self._advance()
        name = self._text[start : self._pos]

        parameter: str | None = None
        if self._current() == ".":
            self._advance()
            param_start = self._pos
            while not self._at_end() and not self._current().isspace():
                self._advance()
            parameter = self._text[param_start : self._pos]
            if parameter.endswith(CONDITIONAL_SUFFIX):
                parameter = parameter[: -len(CONDITIONAL_SUFFIX)]
                name += CONDITIONAL_SUFFIX
            if not parameter:
                raise self._error(f"Empty parameter for '{name}'", param_start)
        elif self._current() == CONDITIONAL_SUFFIX:
            self._advance()
            name += CONDITIONAL_SUFFIX

        if not self._at_end() and not self._current().isspace():
            raise self._error(f"Unexpected character {self._current()!r} in reference name")
        return name, parameter

    # ------------------------------------------------------------------
    # Attributes: key=value
    # ------------------------------------------------------------------

    def _scan_attribute(self) -> tuple[str, str]:
        start = self._pos
        if not _is_name_start(self._current()):
            raise self._error(f"Expected attribute name, found {self._current()!r}")
        while not self._at_end() and _is_name_char(self._current()):
            self._advance()
        key = self._text[start : self._pos]

        if self._current() != "=":
            raise self._error(f"Expected '=' after attribute '{key}'")
        self._advance()

        if not self._at_end() and self._current() in _QUOTES:
            value = self._scan_quoted(key)
        else:
            value_start = self._pos
            while not self._at_end() and not self._current().isspace():
                self._advance()
            value = self._text[value_start : self._pos]
            if not value:
                raise self._error(f"Missing value for attribute '{key}'")
        return key, value

    def _scan_quoted(self, key: str) -> str:
        quote_pos = self._pos
        quote = self._advance()
        value_start = self._pos
        while not self._at_end():
            if self._current() == quote:
                value = self._text[value_start : self._pos]
                self._advance()
                if not self._at_end() and not self._current().isspace():
                    raise self._error(f"Expected whitespace after value of attribute '{key}'")
                return value
            self._advance()
        raise self._error(f"Unterminated quoted value for attribute '{key}'", quote_pos)
