# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(code=resolved_code, status=resolved_status, context=context)


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


class FailedValidationError(ValidationError):
    """Caller input was well formed but broke a business rule.

    ``errors`` maps a field name to the first message recorded for it.
    """

    def __init__(self, errors: Mapping[str, str]) -> None:
        super().__init__(context={"errors": dict(errors)})

    @property
    def errors(self) -> dict[str, str]:
        return dict((self.context or {}).get("errors", {}))


class InvalidAuthenticationTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(
            code="invalid_authentication_token",
            status=HTTPStatus.UNAUTHORIZED,
        )


class AuthenticationRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(
            code="authentication_required",
            status=HTTPStatus.UNAUTHORIZED,
        )


class NotPermittedError(AppError):
    def __init__(self, permission: str | None = None) -> None:
        context = None
        if permission is not None:
            context = {"permission": permission}
        super().__init__(
            code="not_permitted",
            status=HTTPStatus.FORBIDDEN,
            context=context,
        )
