# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Field-keyed validation used by entities and services."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from vending.shared.errors.base import FailedValidationError


class Validator:
    """Collects ``field -> message`` errors; the first message per field wins."""

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        self.errors.setdefault(key, message)

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise FailedValidationError(self.errors)


def permitted_value(value: Any, allowed: Iterable[Any]) -> bool:
    return value in set(allowed)


__all__ = ["Validator", "permitted_value"]
