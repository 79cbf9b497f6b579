# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Root of the Stache exception hierarchy."""


class StacheError(Exception):
    """Base class for every error raised by Stache itself.

    Errors raised by presenter methods at render time are not wrapped and do
    not derive from this class.
    """
