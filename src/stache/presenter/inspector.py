# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Signature inspection for presenter classes.

Builds a :class:`PresenterDescriptor` holding the call shape of every method
a presenter class exposes to templates. The descriptor is computed once per
class with :mod:`inspect` and is immutable afterwards, so methods added to the
class later never become callable from templates.

A method is exposed when it is a plain function defined on the class or any
of its bases, other than the :class:`~stache.presenter.base.Presenter` root and
``object``, whose name does not start with an underscore. Mixins listed after
``Presenter`` in the bases are included. Static methods, class methods and
properties are never exposed. A class may withhold exposed methods by defining
a ``method_available(identifier)`` classmethod or staticmethod; that hook is
never itself a capability.
"""

from __future__ import annotations

import inspect
import logging
import threading
import weakref
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from stache.errors import StacheError
from stache.model.capability import PresenterCapability
from stache.model.reference import CONDITIONAL_SUFFIX

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

IDENTIFIER_MARKER = "__stache_identifier__"
ROOT_MARKER = "_stache_root"
POLICY_NAME = "method_available"


class UnavailableMethodError(StacheError):
    """Raised when looking up a capability the presenter class does not expose.

    Attributes:
        presenter_class: The presenter class that was queried.
        identifier: The identifier that is not available.
    """

    def __init__(self, presenter_class: type, identifier: str) -> None:
        super().__init__(f"{presenter_class.__name__} does not expose '{identifier}'")
        self.presenter_class = presenter_class
        self.identifier = identifier


@dataclass(frozen=True)
class PresenterDescriptor:
    """The full, immutable capability set of one presenter class.

    The class is held by weak reference so that describing a class does not
    keep it alive.

    Attributes:
        class_ref: Weak reference to the described class.
        capabilities: Every method the class declares, keyed by identifier.
        withheld: Identifiers the class declares but its availability policy
            refuses to expose.
    """

    class_ref: weakref.ReferenceType[type]
    capabilities: Mapping[str, PresenterCapability]
    withheld: frozenset[str] = frozenset()

    @property
    def presenter_class(self) -> type:
        presenter_class = self.class_ref()
        if presenter_class is None:
            raise ReferenceError("described presenter class no longer exists")
        return presenter_class

    @property
    def identifiers(self) -> list[str]:
        """Sorted identifiers of all available capabilities."""
        return sorted(name for name in self.capabilities if name not in self.withheld)

    def available(self, identifier: str) -> bool:
        return identifier in self.capabilities and identifier not in self.withheld

    def capability_of(self, identifier: str) -> PresenterCapability:
        """Return the capability for *identifier*.

        Raises:
            UnavailableMethodError: If *identifier* is not available.
        """
        if not self.available(identifier):
            raise UnavailableMethodError(self.presenter_class, identifier)
        return self.capabilities[identifier]


def describe(presenter_class: type) -> PresenterDescriptor:
    """Return the descriptor of *presenter_class*, building it on first use.

    Subclasses of :class:`~stache.presenter.base.Presenter` are registered when
    the class statement executes; any other class is described on demand and
    memoized.
    """
    registered = presenter_class.__dict__.get("_stache_descriptor")
    if isinstance(registered, PresenterDescriptor):
        return registered

    with _memo_lock:
        cached = _memo.get(presenter_class)
    if cached is not None:
        return cached

    descriptor = build_descriptor(presenter_class)
    with _memo_lock:
        # Another thread may have won the race; both results are equal.
        return _memo.setdefault(presenter_class, descriptor)


def available(descriptor: PresenterDescriptor, identifier: str) -> bool:
    """True if the presenter class declares *identifier* and does not withhold it."""
    return descriptor.available(identifier)


def capability_of(descriptor: PresenterDescriptor, identifier: str) -> PresenterCapability:
    """Return the capability for *identifier*, raising :class:`UnavailableMethodError`."""
    return descriptor.capability_of(identifier)


def build_descriptor(presenter_class: type) -> PresenterDescriptor:
    """Inspect *presenter_class* and build a fresh descriptor (no memoization)."""
    capabilities: dict[str, PresenterCapability] = {}
    for attribute, function in _exposed_functions(presenter_class):
        capability = inspect_method(function, attribute)
        if capability.identifier in capabilities:
            continue
        capabilities[capability.identifier] = capability

    policy = _availability_policy(presenter_class)
    withheld = frozenset(name for name in capabilities if policy is not None and not policy(name))
    logger.debug(
        "Described %s: %d capabilities, %d withheld",
        presenter_class.__qualname__,
        len(capabilities),
        len(withheld),
    )
    return PresenterDescriptor(
        class_ref=weakref.ref(presenter_class),
        capabilities=MappingProxyType(capabilities),
        withheld=withheld,
    )


def inspect_method(function: Callable[..., Any], attribute: str | None = None) -> PresenterCapability:
    """Build the capability of a single unbound method.

    The first parameter (``self``) is skipped. Positional parameters are
    counted; keyword-only parameters are split into required and optional
    names. ``**kwargs`` is ignored: only declared keyword names are accepted.
    """
    attribute = attribute or function.__name__
    identifier = getattr(function, IDENTIFIER_MARKER, attribute)

    params = list(inspect.signature(function).parameters.values())
    if params and params[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        params = params[1:]

    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    keyword_only = [p for p in params if p.kind is inspect.Parameter.KEYWORD_ONLY]

    return PresenterCapability(
        identifier=identifier,
        attribute=attribute,
        positional_count=len(positional),
        positional_optional=len(positional) == 1 and positional[0].default is not inspect.Parameter.empty,
        variadic=any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params),
        required_keywords=frozenset(p.name for p in keyword_only if p.default is inspect.Parameter.empty),
        optional_keywords=frozenset(p.name for p in keyword_only if p.default is not inspect.Parameter.empty),
    )


def mark_conditional(function: Callable[..., Any], identifier: str) -> Callable[..., Any]:
    """Expose *function* under the boolean-shaped *identifier*."""
    if not identifier.endswith(CONDITIONAL_SUFFIX):
        raise ValueError(f"conditional identifier '{identifier}' must end with '{CONDITIONAL_SUFFIX}'")
    setattr(function, IDENTIFIER_MARKER, identifier)
    return function


# ################
# Implementation
# ################

_memo: weakref.WeakKeyDictionary[type, PresenterDescriptor] = weakref.WeakKeyDictionary()
_memo_lock = threading.Lock()


def _exposed_functions(presenter_class: type) -> list[tuple[str, Callable[..., Any]]]:
    """Collect public plain functions along the MRO, nearest definition first."""
    seen: set[str] = set()
    functions: list[tuple[str, Callable[..., Any]]] = []
    for klass in presenter_class.__mro__:
        if klass is object:
            continue
        if klass.__dict__.get(ROOT_MARKER, False):
            seen.update(vars(klass))
            continue
        for name, value in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if name.startswith("_") or name == POLICY_NAME or not inspect.isfunction(value):
                continue
            functions.append((name, value))
    return functions


def _availability_policy(presenter_class: type) -> Callable[[str], Any] | None:
    """Return the class's ``method_available`` hook, bound, or None when absent."""
    raw = inspect.getattr_static(presenter_class, POLICY_NAME, None)
    if raw is None:
        return None
    if inspect.isfunction(raw):
        raise TypeError(f"{presenter_class.__qualname__}.{POLICY_NAME} must be a classmethod or staticmethod")
    return getattr(presenter_class, POLICY_NAME)
