# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from .entities import Token, User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update(self, user: User) -> User: ...
    def credit_deposit(self, user_id: int, amount: int) -> User: ...
    # None when the stored balance is below ``amount``
    def debit_deposit(self, user_id: int, amount: int) -> User | None: ...


class TokenRepository(Protocol):
    def add(self, token: Token) -> None: ...
    def find_user(self, token_hash: bytes, scope: str, now: datetime) -> User | None: ...
    def delete_all_for_user(self, user_id: int, scope: str) -> None: ...


class PermissionRepository(Protocol):
    def list_for_user(self, user_id: int) -> frozenset[str]: ...
    def add_for_user(self, user_id: int, codes: Iterable[str]) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
