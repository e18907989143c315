# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from time import perf_counter

from flask import Blueprint, Response, request
from pydantic import ValidationError

from vending.application.use_cases.users.login_user import LoginUserUseCase
from vending.application.use_cases.users.logout_user import LogoutUserUseCase
from vending.interfaces.http.authentication import Authenticator, current_user
from vending.interfaces.http.dto.responses import success
from vending.interfaces.http.dto.users import LoginRequestDTO, TokenDTO
from vending.shared.errors.validation import raise_validation_error
from vending.shared.logging import logger
from vending.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
    ) -> None:
        self._authenticator = authenticator
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        t0 = perf_counter()
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        token = self._login_use_case.execute(dto.username, dto.password)

        dt_ms = (perf_counter() - t0) * 1000
        logger.info(f"auth.login: ok (user_id={token.user_id}, dt_ms={dt_ms:.1f})")
        data = {"token": TokenDTO.from_entity(token).model_dump(mode="json")}
        return success(data=data), 200

    def logout(self) -> tuple[Response, int]:
        user = current_user()
        self._logout_use_case.execute(user)
        logger.info(f"auth.logout: ok (user_id={user.id})")
        return success(message="logged out"), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/v1/auth")
        bp.add_url_rule("/tokens", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/tokens",
            endpoint="logout",
            view_func=self._authenticator.require_authenticated(self.logout),
            methods=["DELETE"],
        )
        return bp
