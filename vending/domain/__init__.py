# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .coins import DENOMINATIONS, compute_change, validate_deposit
from .exceptions import (
    InvariantViolation,
    NoPermissionError,
    RecordNotFoundError,
)
from .validation import Validator

__all__ = [
    "DENOMINATIONS",
    "compute_change",
    "validate_deposit",
    "InvariantViolation",
    "NoPermissionError",
    "RecordNotFoundError",
    "Validator",
]
