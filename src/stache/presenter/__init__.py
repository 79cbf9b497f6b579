# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Presenter base class and signature inspection."""

from stache.presenter.base import Presenter, conditional
from stache.presenter.inspector import (
    PresenterDescriptor,
    UnavailableMethodError,
    available,
    build_descriptor,
    capability_of,
    describe,
    inspect_method,
)

__all__ = [
    "Presenter",
    "PresenterDescriptor",
    "UnavailableMethodError",
    "available",
    "build_descriptor",
    "capability_of",
    "conditional",
    "describe",
    "inspect_method",
]
