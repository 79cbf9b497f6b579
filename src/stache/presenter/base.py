# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Base class for presenters and the ``conditional`` marker."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

from stache.model.reference import CONDITIONAL_SUFFIX
from stache.presenter.inspector import PresenterDescriptor, build_descriptor, describe, mark_conditional

_F = TypeVar("_F", bound=Callable[..., Any])

# ###############
# Public Interface
# ###############


class Presenter:
    """Object a template is bound to.

    Every public method of a subclass becomes a template capability. The
    capability set is captured when the class statement runs and cannot be
    changed afterwards.

    Subclasses may override :meth:`method_available` to withhold methods::

        class ArticlePresenter(Presenter):
            def title(self):
                return self._article.title

            def internal_notes(self):
                ...

            @classmethod
            def method_available(cls, identifier: str) -> bool:
                return identifier != "internal_notes"
    """

    _stache_root = True
    _stache_descriptor: PresenterDescriptor

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._stache_descriptor = build_descriptor(cls)

    @classmethod
    def method_available(cls, identifier: str) -> bool:
        """Availability policy; every declared method is available by default."""
        return True

    @classmethod
    def descriptor(cls) -> PresenterDescriptor:
        return describe(cls)


@overload
def conditional(target: _F) -> _F: ...


@overload
def conditional(target: str | None = None) -> Callable[[_F], _F]: ...


def conditional(target: Any = None) -> Any:
    """Expose a method as a boolean-shaped capability.

    Python names cannot end with ``?``, so the template identifier is the
    method name plus ``?`` unless given explicitly::

        @conditional
        def even(self, number): ...          # {{#even.42?}}

        @conditional("empty?")
        def has_no_items(self): ...          # {{#empty?}}

    The method is exposed only under its conditional identifier.
    """
    if callable(target):
        return mark_conditional(target, target.__name__ + CONDITIONAL_SUFFIX)

    def decorator(function: _F) -> _F:
        identifier = target if target is not None else function.__name__ + CONDITIONAL_SUFFIX
        return mark_conditional(function, identifier)  # type: ignore[return-value]

    return decorator
