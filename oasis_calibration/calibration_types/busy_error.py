################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Reentrancy error shared by calibration estimators and generators."""

from __future__ import annotations


class BusyError(Exception):
    """Raised when a mutating call arrives while a sample is being processed."""
