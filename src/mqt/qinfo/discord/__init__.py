# Copyright (c) 2025 - 2026 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Quantum deficit (discord-type correlation) package."""

from mqt.qinfo.discord.deficit import DeficitSpace
from mqt.qinfo.discord.optimization import DeficitOptions, minimize_angles

__all__ = ["DeficitOptions", "DeficitSpace", "minimize_angles"]
