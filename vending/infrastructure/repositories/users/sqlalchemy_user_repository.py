# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vending.domain.exceptions import RecordNotFoundError
from vending.domain.users.entities import Token as DomainToken
from vending.domain.users.entities import User as DomainUser
from vending.domain.users.exceptions import DuplicateUsernameError
from vending.domain.users.repositories import (
    PermissionRepository,
    TokenRepository,
    UserRepository,
)
from vending.infrastructure.db.models import Permission, Token, User, users_permissions
from vending.infrastructure.unit_of_work import unit_of_work_scope


def is_unique_violation(exc: IntegrityError) -> bool:
    return "unique" in str(exc.orig).lower()


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        role=row.role,
        password_hash=row.password_hash,
        deposit=int(row.deposit or 0),
        created_at=row.created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    username=user.username,
                    role=user.role,
                    deposit=user.deposit,
                    password_hash=user.password_hash,
                    created_at=user.created_at or datetime.now(UTC),
                )
                session.add(row)
                session.flush()
                persisted = _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise DuplicateUsernameError() from exc
            raise
        return persisted

    def update(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.get(User, user.id)
                if row is None:
                    raise RecordNotFoundError()
                row.username = user.username
                row.role = user.role
                row.deposit = user.deposit
                row.password_hash = user.password_hash
                session.flush()
                persisted = _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise DuplicateUsernameError() from exc
            raise
        return persisted

    def credit_deposit(self, user_id: int, amount: int) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id)
                .values(deposit=User.deposit + amount)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError()
            return _to_domain(session.get(User, user_id))

    def debit_deposit(self, user_id: int, amount: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id, User.deposit >= amount)
                .values(deposit=User.deposit - amount)
                .execution_options(synchronize_session=False)
            )
            row = session.get(User, user_id)
            if row is None:
                raise RecordNotFoundError()
            if result.rowcount == 0:
                return None
            return _to_domain(row)


class SqlAlchemyTokenRepository(TokenRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(self, token: DomainToken) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.add(
                Token(
                    hash=token.hash,
                    user_id=token.user_id,
                    expiry=token.expiry,
                    scope=token.scope,
                )
            )

    def find_user(self, token_hash: bytes, scope: str, now: datetime) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                select(User)
                .join(Token, Token.user_id == User.id)
                .where(Token.hash == token_hash, Token.scope == scope, Token.expiry > now)
            ).first()
            return _to_domain(row) if row else None

    def delete_all_for_user(self, user_id: int, scope: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.execute(delete(Token).where(Token.user_id == user_id, Token.scope == scope))


class SqlAlchemyPermissionRepository(PermissionRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_for_user(self, user_id: int) -> frozenset[str]:
        with unit_of_work_scope(self._session_factory) as session:
            codes = session.scalars(
                select(Permission.code)
                .join(users_permissions, users_permissions.c.permission_id == Permission.id)
                .where(users_permissions.c.user_id == user_id)
            ).all()
        return frozenset(codes)

    def add_for_user(self, user_id: int, codes: Iterable[str]) -> None:
        wanted = list(codes)
        if not wanted:
            return
        with unit_of_work_scope(self._session_factory) as session:
            permission_ids = session.scalars(
                select(Permission.id).where(Permission.code.in_(wanted))
            ).all()
            if len(permission_ids) != len(set(wanted)):
                raise RecordNotFoundError(context={"permissions": sorted(wanted)})
            session.execute(
                insert(users_permissions),
                [{"user_id": user_id, "permission_id": pid} for pid in permission_ids],
            )
