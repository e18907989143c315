# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from time import perf_counter

from flask import Blueprint, Response, request
from pydantic import ValidationError

from vending.application.services.transactions import TransactionService
from vending.application.use_cases.users.register_user import RegisterUserUseCase
from vending.domain.users.permissions import PERMISSION_PRODUCTS_BUY
from vending.interfaces.http.authentication import Authenticator, current_user
from vending.interfaces.http.dto.responses import success
from vending.interfaces.http.dto.users import RegisterUserRequestDTO, UserDTO
from vending.shared.errors.validation import raise_validation_error
from vending.shared.logging import logger
from vending.shared.middleware.rate_limit import rate_limit


class UsersController:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        register_use_case: RegisterUserUseCase,
        transactions: TransactionService,
    ) -> None:
        self._authenticator = authenticator
        self._register_use_case = register_use_case
        self._transactions = transactions

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        t0 = perf_counter()
        try:
            dto = RegisterUserRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(dto.username, dto.password, dto.role)

        dt_ms = (perf_counter() - t0) * 1000
        logger.info(f"users.register: ok (user_id={user.id}, dt_ms={dt_ms:.1f})")
        return success(data={"user": UserDTO.from_entity(user).model_dump(mode="json")}), 201

    def deposit(self, amount: int) -> tuple[Response, int]:
        user = self._transactions.deposit_coin(current_user(), amount)
        return (
            success(
                message="Deposit was successful",
                data={"user": UserDTO.from_entity(user).model_dump(mode="json")},
            ),
            200,
        )

    def reset_deposit(self) -> tuple[Response, int]:
        user = self._transactions.deposit_reset(current_user())
        return (
            success(
                message="Reset balance was successful",
                data={"user": UserDTO.from_entity(user).model_dump(mode="json")},
            ),
            200,
        )

    def as_blueprint(self) -> Blueprint:
        buyers_only = self._authenticator.require_permission(PERMISSION_PRODUCTS_BUY)

        bp = Blueprint("users", __name__, url_prefix="/v1/users")
        bp.add_url_rule("", view_func=self.register, methods=["POST"])
        bp.add_url_rule(
            "/deposit/<int:amount>",
            endpoint="deposit",
            view_func=buyers_only(self.deposit),
            methods=["GET"],
        )
        bp.add_url_rule(
            "/deposit/reset",
            endpoint="reset_deposit",
            view_func=buyers_only(self.reset_deposit),
            methods=["GET"],
        )
        return bp
