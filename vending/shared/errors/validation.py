# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import FailedValidationError


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}

    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None)
        # first message per field wins, same as the domain validator
        errors.setdefault(field_path or "body", error.get("msg", "is invalid"))

    return errors


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise FailedValidationError(format_pydantic_errors(exc)) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
