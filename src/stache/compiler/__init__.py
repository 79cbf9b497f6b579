# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reference compiler pipeline: scanning, validation, invocation plans and caching."""

from stache.compiler.cache import PlanCache, PlanKey, ReferenceCompiler
from stache.compiler.plan import ConditionalPlan, InvocationPlan, is_truthy
from stache.compiler.reference_compiler import (
    CompileError,
    CompileErrorReason,
    TemplateCompileError,
    compile_all,
    compile_conditional,
    compile_each,
    compile_reference,
)
from stache.compiler.scanner import ReferenceSyntaxError, parse_reference

__all__ = [
    "parse_reference",
    "ReferenceSyntaxError",
    "compile_reference",
    "compile_conditional",
    "compile_all",
    "compile_each",
    "CompileError",
    "CompileErrorReason",
    "TemplateCompileError",
    "InvocationPlan",
    "ConditionalPlan",
    "is_truthy",
    "PlanCache",
    "PlanKey",
    "ReferenceCompiler",
]
