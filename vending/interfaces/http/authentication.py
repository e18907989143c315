# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-token authentication and capability gates for Flask views.

Only gated views read the ``Authorization`` header. ``require_authenticated``
and ``require_permission`` resolve the bearer token once per request and keep
the identity on ``flask.g.identity``; a header that is malformed or names no
live token is rejected with 401. Public views never look at the header, so a
stale token does not block login or the catalogue.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import Flask, Response, g, request

from vending.application.services.permissions import PermissionService
from vending.application.services.tokens import TokenService
from vending.domain.exceptions import RecordNotFoundError
from vending.domain.users.entities import (
    ANONYMOUS,
    TOKEN_SCOPE_AUTHENTICATION,
    AuthenticatedIdentity,
    Identity,
    User,
)
from vending.domain.users.exceptions import InvalidTokenError
from vending.shared.errors import (
    AuthenticationRequiredError,
    InvalidAuthenticationTokenError,
    NotPermittedError,
)
from vending.shared.logging import logger


def current_identity() -> Identity:
    return getattr(g, "identity", ANONYMOUS)


def current_user() -> User:
    identity = current_identity()
    if not isinstance(identity, AuthenticatedIdentity):
        raise AuthenticationRequiredError()
    return identity.user


class Authenticator:
    def __init__(self, *, tokens: TokenService, permissions: PermissionService) -> None:
        self._tokens = tokens
        self._permissions = permissions

    def configure(self, app: Flask) -> None:
        @app.after_request
        def _vary_on_authorization(response: Response) -> Response:
            response.vary.add("Authorization")
            return response

    def authenticate(self) -> Identity:
        if "identity" in g:
            return g.identity

        header = request.headers.get("Authorization", "")
        if not header:
            g.identity = ANONYMOUS
            return g.identity

        scheme, _, token = header.partition(" ")
        if scheme != "Bearer" or not token:
            raise InvalidAuthenticationTokenError()

        try:
            user = self._tokens.resolve(token, TOKEN_SCOPE_AUTHENTICATION)
        except (InvalidTokenError, RecordNotFoundError) as exc:
            logger.warning(f"auth.authenticate: rejected token on {request.method} {request.path}")
            raise InvalidAuthenticationTokenError() from exc

        g.identity = AuthenticatedIdentity(user)
        g.user_id = user.id
        return g.identity

    def require_authenticated(self, view: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if self.authenticate().is_anonymous:
                raise AuthenticationRequiredError()
            return view(*args, **kwargs)

        return wrapper

    def require_permission(self, code: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(view: Callable[..., Any]) -> Callable[..., Any]:
            @wraps(view)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                identity = self.authenticate()
                if identity.is_anonymous:
                    raise AuthenticationRequiredError()
                if not self._permissions.has_capability(identity, code):
                    logger.warning(
                        f"auth.permission: denied (user_id={g.get('user_id')}, permission={code})"
                    )
                    raise NotPermittedError(code)
                return view(*args, **kwargs)

            return wrapper

        return decorator


__all__ = ["Authenticator", "current_identity", "current_user"]
