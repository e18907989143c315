# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from vending.shared.errors.base import DomainError


class InvariantViolation(Exception):
    """Raised when state that validation should have rejected reaches the core.

    Not an ``AppError``: it is never rendered as a client error and surfaces as
    an internal error.
    """

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {super().__str__()}"
        return super().__str__()


class RecordNotFoundError(DomainError):
    code = "record_not_found"
    status = HTTPStatus.NOT_FOUND


class NoPermissionError(DomainError):
    code = "no_permission"
    status = HTTPStatus.FORBIDDEN
