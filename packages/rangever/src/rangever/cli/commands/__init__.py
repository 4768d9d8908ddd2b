# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import versions, ranges

__all__ = ["versions", "ranges"]
