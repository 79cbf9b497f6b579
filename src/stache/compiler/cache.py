# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Plan cache and the configured compiler facade.

Compilation is a pure function of ``(presenter class, reference text)``, so a
plan computed once can be reused for the lifetime of a compiled template.
Several threads may compile the same key at the same time; the lock only
protects the dictionary, and the first plan stored wins.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import NamedTuple, cast

from stache.compiler.plan import ConditionalPlan, InvocationPlan
from stache.compiler.reference_compiler import (
    ReferenceSource,
    as_reference,
    compile_conditional,
    compile_each,
    compile_reference,
)
from stache.config.settings import CompilerConfig, DuplicateAttributes
from stache.model.reference import Reference

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class PlanKey(NamedTuple):
    """Cache key of a compiled plan.

    The duplicate-attribute policy is part of the key because the same text
    can be valid under one policy and invalid under another.
    """

    presenter_class: type
    reference: str
    conditional: bool
    duplicate_attributes: DuplicateAttributes = DuplicateAttributes.ERROR


class PlanCache:
    """Thread-safe map from :class:`PlanKey` to compiled plans."""

    def __init__(self) -> None:
        self._plans: dict[PlanKey, InvocationPlan] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._plans)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._plans

    def get_or_compile(self, key: PlanKey, factory: Callable[[], InvocationPlan]) -> InvocationPlan:
        """Return the cached plan for *key*, compiling it with *factory* on a miss.

        *factory* runs outside the lock. Errors it raises are not cached.
        """
        with self._lock:
            plan = self._plans.get(key)
            if plan is not None:
                self.hits += 1
                logger.debug("Plan cache hit for '%s' on %s", key.reference, key.presenter_class.__qualname__)
                return plan
            self.misses += 1

        logger.debug("Plan cache miss for '%s' on %s", key.reference, key.presenter_class.__qualname__)
        plan = factory()
        with self._lock:
            return self._plans.setdefault(key, plan)

    def clear(self) -> None:
        with self._lock:
            self._plans.clear()
            self.hits = 0
            self.misses = 0


class ReferenceCompiler:
    """Compiles references with a fixed configuration and an optional plan cache.

    Example::

        compiler = ReferenceCompiler()
        plan = compiler.compile_reference(ArticlePresenter, "title")
        plan.execute(ArticlePresenter(article))
    """

    def __init__(self, config: CompilerConfig | None = None, cache: PlanCache | None = None) -> None:
        self.config = config or CompilerConfig()
        self.cache = cache if cache is not None else PlanCache()

    def compile_reference(self, presenter_class: type, reference: ReferenceSource) -> InvocationPlan:
        ref = as_reference(reference)
        return self._cached(
            PlanKey(presenter_class, ref.text, False, self.config.duplicate_attributes),
            lambda: compile_reference(presenter_class, ref, duplicate_attributes=self.config.duplicate_attributes),
        )

    def compile_conditional(self, presenter_class: type, reference: ReferenceSource) -> ConditionalPlan:
        ref = as_reference(reference)
        plan = self._cached(
            PlanKey(presenter_class, ref.text, True, self.config.duplicate_attributes),
            lambda: compile_conditional(presenter_class, ref, duplicate_attributes=self.config.duplicate_attributes),
        )
        return cast(ConditionalPlan, plan)

    def compile_all(self, presenter_class: type, references: Iterable[ReferenceSource]) -> list[InvocationPlan]:
        """All-or-nothing compilation of one template's references.

        Raises:
            TemplateCompileError: Listing every syntax and compile error found.
        """
        return compile_each(references, lambda ref: self._compile_one(presenter_class, ref))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _compile_one(self, presenter_class: type, ref: Reference) -> InvocationPlan:
        if ref.is_conditional:
            return self.compile_conditional(presenter_class, ref)
        return self.compile_reference(presenter_class, ref)

    def _cached(self, key: PlanKey, factory: Callable[[], InvocationPlan]) -> InvocationPlan:
        if not self.config.cache_plans:
            return factory()
        return self.cache.get_or_compile(key, factory)
