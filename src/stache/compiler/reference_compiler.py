# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Static validation of template references against presenter capabilities.

A reference names a presenter method, an optional single parameter and a set
of keyword attributes. Compiling it checks the call against the method's
declared signature and produces an :class:`~stache.compiler.plan.InvocationPlan`.
No presenter code runs during compilation.

Checks, in order (the first failure is raised):

1. Conditionals only: the identifier must end with ``?``.
2. No attribute key may be supplied twice (unless the policy is ``last-wins``).
3. The identifier must be available on the presenter class.
4. The method must declare at most one positional parameter and no ``*args``.
5. A parameter is only allowed when the method declares a positional parameter.
6. A parameter is required when that positional parameter has no default.
7. Every attribute key must be a declared keyword parameter.
8. Every required keyword parameter must be supplied.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from typing import NoReturn, cast

from stache.compiler.plan import ConditionalPlan, InvocationPlan
from stache.compiler.scanner import ReferenceSyntaxError, parse_reference
from stache.config.settings import DuplicateAttributes
from stache.errors import StacheError
from stache.model.reference import CONDITIONAL_SUFFIX, Reference
from stache.presenter.inspector import PresenterDescriptor, UnavailableMethodError, describe

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class CompileErrorReason(enum.Enum):
    """Why a reference failed to compile."""

    UNAVAILABLE_METHOD = "unavailable-method"
    UNSUPPORTED_ARITY = "unsupported-arity"
    UNEXPECTED_PARAMETER = "unexpected-parameter"
    MISSING_PARAMETER = "missing-parameter"
    UNKNOWN_ATTRIBUTE = "unknown-attribute"
    MISSING_REQUIRED_ATTRIBUTE = "missing-required-attribute"
    NOT_BOOLEAN_SHAPED = "not-boolean-shaped"
    DUPLICATE_ATTRIBUTE = "duplicate-attribute"


class CompileError(StacheError):
    """Raised when a reference cannot be called on the presenter class.

    Attributes:
        reason: Machine-readable reason code.
        reference: Text of the offending reference.
    """

    def __init__(self, reason: CompileErrorReason, reference: str, message: str) -> None:
        super().__init__(f"Invalid reference '{reference}': {message}")
        self.reason = reason
        self.reference = reference


class TemplateCompileError(StacheError):
    """Raised by :func:`compile_all` when one or more references are invalid.

    Attributes:
        errors: Every error found, in reference order.
    """

    def __init__(self, errors: list[StacheError]) -> None:
        lines = "\n".join(f"  {error}" for error in errors)
        super().__init__(f"{len(errors)} invalid reference(s):\n{lines}")
        self.errors = errors


PresenterSource = PresenterDescriptor | type
ReferenceSource = Reference | str


def compile_reference(
    presenter: PresenterSource,
    reference: ReferenceSource,
    *,
    duplicate_attributes: DuplicateAttributes = DuplicateAttributes.ERROR,
) -> InvocationPlan:
    """Validate a value reference and build its invocation plan.

    Args:
        presenter: A presenter descriptor, or a presenter class to describe.
        reference: A parsed Reference, or tag text to scan.
        duplicate_attributes: What to do with a repeated attribute key.

    Returns:
        A plan whose ``execute`` returns the method's raw result.

    Raises:
        ReferenceSyntaxError: If *reference* is text that cannot be scanned.
        CompileError: If the reference does not match the method's signature.
    """
    return _ReferenceValidator(presenter, reference, duplicate_attributes).compile(conditional=False)


def compile_conditional(
    presenter: PresenterSource,
    reference: ReferenceSource,
    *,
    duplicate_attributes: DuplicateAttributes = DuplicateAttributes.ERROR,
) -> ConditionalPlan:
    """Validate a conditional reference and build its plan.

    Same as :func:`compile_reference`, except the identifier must end with
    ``?`` and the plan coerces its result with
    :func:`~stache.compiler.plan.is_truthy`.
    """
    plan = _ReferenceValidator(presenter, reference, duplicate_attributes).compile(conditional=True)
    return cast(ConditionalPlan, plan)


def compile_all(
    presenter: PresenterSource,
    references: Iterable[ReferenceSource],
    *,
    duplicate_attributes: DuplicateAttributes = DuplicateAttributes.ERROR,
) -> list[InvocationPlan]:
    """Compile every reference of one template, all or nothing.

    References whose identifier ends with ``?`` are compiled as conditionals,
    all others as value references.

    Returns:
        The plans, in reference order.

    Raises:
        TemplateCompileError: Listing every syntax and compile error found.
    """
    descriptor = as_descriptor(presenter)
    return compile_each(
        references,
        lambda ref: _ReferenceValidator(descriptor, ref, duplicate_attributes).compile(conditional=ref.is_conditional),
    )


# ################
# Implementation
# ################


def as_descriptor(presenter: PresenterSource) -> PresenterDescriptor:
    if isinstance(presenter, PresenterDescriptor):
        return presenter
    if isinstance(presenter, type):
        return describe(presenter)
    raise TypeError(f"expected a presenter class or descriptor, got {type(presenter).__name__}")


def as_reference(reference: ReferenceSource) -> Reference:
    if isinstance(reference, Reference):
        return reference
    return parse_reference(reference)


def compile_each(
    references: Iterable[ReferenceSource],
    compile_one: Callable[[Reference], InvocationPlan],
) -> list[InvocationPlan]:
    """Scan and compile every reference, raising once with all errors found."""
    plans: list[InvocationPlan] = []
    errors: list[StacheError] = []
    for item in references:
        try:
            plans.append(compile_one(as_reference(item)))
        except (ReferenceSyntaxError, CompileError) as exc:
            errors.append(exc)
    if errors:
        raise TemplateCompileError(errors)
    return plans


class _ReferenceValidator:
    """Validates one reference against one presenter descriptor."""

    def __init__(
        self,
        presenter: PresenterSource,
        reference: ReferenceSource,
        duplicate_attributes: DuplicateAttributes,
    ) -> None:
        self._descriptor = as_descriptor(presenter)
        self._reference = as_reference(reference)
        self._duplicates = duplicate_attributes

    def compile(self, *, conditional: bool) -> InvocationPlan:
        ref = self._reference
        if conditional and not ref.is_conditional:
            self._fail(
                CompileErrorReason.NOT_BOOLEAN_SHAPED,
                f"conditional '{ref.identifier}' must end with '{CONDITIONAL_SUFFIX}'",
            )

        attributes = self._attributes()

        try:
            capability = self._descriptor.capability_of(ref.identifier)
        except UnavailableMethodError as exc:
            raise CompileError(CompileErrorReason.UNAVAILABLE_METHOD, ref.text, str(exc)) from exc

        if capability.unsupported_arity:
            self._fail(
                CompileErrorReason.UNSUPPORTED_ARITY,
                f"'{ref.identifier}' takes more than one positional argument",
            )
        if ref.parameter is not None and not capability.accepts_parameter:
            self._fail(
                CompileErrorReason.UNEXPECTED_PARAMETER,
                f"'{ref.identifier}' does not take a parameter",
            )
        if ref.parameter is None and capability.requires_parameter:
            self._fail(
                CompileErrorReason.MISSING_PARAMETER,
                f"'{ref.identifier}' requires a parameter",
            )

        unknown = [key for key in attributes if key not in capability.keywords]
        if unknown:
            self._fail(
                CompileErrorReason.UNKNOWN_ATTRIBUTE,
                f"'{ref.identifier}' does not accept attribute(s) {_names(unknown)}",
            )
        missing = sorted(capability.required_keywords - attributes.keys())
        if missing:
            self._fail(
                CompileErrorReason.MISSING_REQUIRED_ATTRIBUTE,
                f"'{ref.identifier}' requires attribute(s) {_names(missing)}",
            )

        plan_class = ConditionalPlan if conditional else InvocationPlan
        plan = plan_class(
            identifier=ref.identifier,
            attribute=capability.attribute,
            passes_argument=ref.parameter is not None,
            argument=ref.parameter,
            keyword_arguments=tuple(sorted(attributes.items())),
        )
        logger.debug(
            "Compiled %s '%s' against %s",
            "conditional" if conditional else "reference",
            ref.text,
            self._descriptor.presenter_class.__qualname__,
        )
        return plan

    def _attributes(self) -> dict[str, str]:
        """Collapse attribute pairs into a mapping, enforcing the duplicate policy."""
        resolved: dict[str, str] = {}
        duplicates: list[str] = []
        for key, value in self._reference.attributes:
            if key in resolved and key not in duplicates:
                duplicates.append(key)
            resolved[key] = value
        if duplicates and self._duplicates is DuplicateAttributes.ERROR:
            self._fail(
                CompileErrorReason.DUPLICATE_ATTRIBUTE,
                f"attribute(s) {_names(duplicates)} given more than once",
            )
        return resolved

    def _fail(self, reason: CompileErrorReason, message: str) -> NoReturn:
        raise CompileError(reason, self._reference.text, message)


def _names(names: list[str]) -> str:
    return ", ".join(f"'{name}'" for name in names)
