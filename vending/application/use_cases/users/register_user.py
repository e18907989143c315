# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from vending.application.services.permissions import PermissionService
from vending.domain.users.entities import User
from vending.domain.users.exceptions import DuplicateUsernameError
from vending.domain.users.repositories import PasswordHasher, UserRepository
from vending.domain.validation import Validator
from vending.shared.errors.base import FailedValidationError
from vending.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        permissions: PermissionService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._permissions = permissions
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str, role: str) -> User:
        user = User(
            id=0,
            username=username,
            role=role,
            password_hash=self._password_hasher.hash(password),
            created_at=datetime.now(UTC),
            password_plaintext=password,
        )
        v = Validator()
        user.validate(v)
        v.raise_if_invalid()

        try:
            persisted = self._users.add(user)
        except DuplicateUsernameError as exc:
            raise FailedValidationError(
                {"username": "a user with this username already exists"}
            ) from exc

        self._permissions.grant_role(persisted.id, persisted.role)
        logger.info(f"users.register: ok (user_id={persisted.id}, role={persisted.role})")
        return persisted
