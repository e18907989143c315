# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from vending.domain.coins import is_valid_balance
from vending.domain.exceptions import InvariantViolation
from vending.domain.validation import Validator, permitted_value

ROLE_SELLER = "seller"
ROLE_BUYER = "buyer"
ROLES = (ROLE_SELLER, ROLE_BUYER)

TOKEN_SCOPE_AUTHENTICATION = "authentication"


@dataclass(slots=True)
class User:
    """Account holder. ``deposit`` is the buyer balance in cents."""

    id: int
    username: str
    role: str
    password_hash: str | None
    deposit: int = 0
    created_at: datetime | None = None
    # only set while a new password is being chosen; never persisted
    password_plaintext: str | None = field(default=None, repr=False, compare=False)

    def validate(self, v: Validator) -> None:
        v.check(self.username != "", "username", "must be provided")
        v.check(
            len(self.username.encode()) <= 500,
            "username",
            "must not be more than 500 bytes long",
        )

        if self.password_plaintext is not None:
            validate_password_plaintext(v, self.password_plaintext)

        if self.deposit != 0:
            v.check(
                is_valid_balance(self.deposit),
                "deposit",
                "must be a sum of 5, 10, 20, 50 and 100 cent coins",
            )

        v.check(permitted_value(self.role, ROLES), "role", "must be seller or buyer")

        if not self.password_hash:
            raise InvariantViolation("missing password hash for user", field="password_hash")

    def reset_deposit(self) -> None:
        self.deposit = 0


def validate_password_plaintext(v: Validator, password: str) -> None:
    size = len(password.encode())
    v.check(password != "", "password", "must be provided")
    v.check(size >= 6, "password", "must be at least 6 bytes long")
    v.check(size <= 72, "password", "must not be more than 72 bytes long")


@dataclass(slots=True, frozen=True)
class Token:
    """Bearer credential. ``plaintext`` is returned to the caller exactly once."""

    plaintext: str = field(repr=False)
    hash: bytes = field(repr=False)
    user_id: int
    expiry: datetime
    scope: str


@dataclass(slots=True, frozen=True)
class AnonymousIdentity:
    @property
    def is_anonymous(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class AuthenticatedIdentity:
    user: User

    @property
    def is_anonymous(self) -> bool:
        return False


Identity = AnonymousIdentity | AuthenticatedIdentity

ANONYMOUS = AnonymousIdentity()
