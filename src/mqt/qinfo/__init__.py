# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Entropies, entanglement measures, gates and quantum deficit optimization."""

from __future__ import annotations

__version__ = "0.1.0"
