# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import sopm

__all__ = ["sopm"]
