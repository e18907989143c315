# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from vending.application.services.tokens import TokenService
from vending.domain.users.entities import TOKEN_SCOPE_AUTHENTICATION, Token
from vending.domain.users.exceptions import InvalidCredentialsError
from vending.domain.users.repositories import PasswordHasher, UserRepository
from vending.domain.validation import Validator
from vending.shared.logging import logger


class LoginUserUseCase:
    """Exchange a username and password for an authentication token."""

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        token_ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._token_ttl = token_ttl

    def execute(self, username: str, password: str) -> Token:
        v = Validator()
        v.check(len(username) > 0, "username", "must not be empty")
        v.check(len(password) > 0, "password", "must not be empty")
        v.raise_if_invalid()

        user = self._users.find_by_username(username)
        password_valid = (
            user is not None
            and bool(user.password_hash)
            and self._password_hasher.verify(password, user.password_hash)
        )
        if not password_valid:
            logger.info("auth.login: rejected (reason=invalid_credentials)")
            raise InvalidCredentialsError()

        return self._tokens.issue(user.id, self._token_ttl, TOKEN_SCOPE_AUTHENTICATION)
