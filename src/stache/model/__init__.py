# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value types shared by the inspector and the compiler (references, capabilities)."""

from stache.model.capability import PresenterCapability
from stache.model.reference import CONDITIONAL_SUFFIX, Reference

__all__ = [
    "CONDITIONAL_SUFFIX",
    "PresenterCapability",
    "Reference",
]
