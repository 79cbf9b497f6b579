# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0
