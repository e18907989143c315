from __future__ import annotations

from datetime import timedelta

import pytest

from vending.application.services.permissions import PermissionService
from vending.application.services.tokens import TokenService
from vending.application.use_cases.users.login_user import LoginUserUseCase
from vending.application.use_cases.users.logout_user import LogoutUserUseCase
from vending.application.use_cases.users.register_user import RegisterUserUseCase
from vending.domain.exceptions import RecordNotFoundError
from vending.domain.users.entities import TOKEN_SCOPE_AUTHENTICATION
from vending.domain.users.exceptions import InvalidCredentialsError
from vending.domain.users.permissions import PERMISSION_PRODUCTS_READ, PERMISSION_PRODUCTS_WRITE
from vending.shared.errors import FailedValidationError


@pytest.fixture()
def token_service(tokens, clock) -> TokenService:
    return TokenService(tokens=tokens, clock=clock)


@pytest.fixture()
def register(users, permissions, hasher) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        users=users,
        permissions=PermissionService(permissions=permissions),
        password_hasher=hasher,
    )


@pytest.fixture()
def login(users, token_service, hasher) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, tokens=token_service, password_hasher=hasher)


def test_register_user_hashes_password_and_grants_role(
    register: RegisterUserUseCase, users, permissions
) -> None:
    user = register.execute("alice", "secret123", "seller")

    assert user.id == 1
    assert user.deposit == 0
    assert user.password_hash == "hashed:secret123"
    assert user.password_plaintext is None
    assert users.find_by_username("alice") is not None
    assert permissions.list_for_user(user.id) == {
        PERMISSION_PRODUCTS_READ,
        PERMISSION_PRODUCTS_WRITE,
    }


def test_register_duplicate_username(register: RegisterUserUseCase) -> None:
    register.execute("alice", "secret123", "buyer")

    with pytest.raises(FailedValidationError) as excinfo:
        register.execute("alice", "other-secret", "buyer")
    assert excinfo.value.errors == {"username": "a user with this username already exists"}


def test_register_collects_field_errors(register: RegisterUserUseCase, users) -> None:
    with pytest.raises(FailedValidationError) as excinfo:
        register.execute("", "123", "admin")

    assert excinfo.value.errors == {
        "username": "must be provided",
        "password": "must be at least 6 bytes long",
        "role": "must be seller or buyer",
    }
    assert users.find_by_username("") is None


def test_login_issues_authentication_token(
    register: RegisterUserUseCase, login: LoginUserUseCase, token_service: TokenService, clock
) -> None:
    user = register.execute("alice", "secret123", "buyer")

    token = login.execute("alice", "secret123")

    assert token.user_id == user.id
    assert token.scope == TOKEN_SCOPE_AUTHENTICATION
    assert token.expiry == clock.now + timedelta(hours=24)
    assert token_service.resolve(token.plaintext, TOKEN_SCOPE_AUTHENTICATION).id == user.id


def test_login_requires_both_fields(login: LoginUserUseCase) -> None:
    with pytest.raises(FailedValidationError) as excinfo:
        login.execute("", "")

    assert excinfo.value.errors == {
        "username": "must not be empty",
        "password": "must not be empty",
    }


@pytest.mark.parametrize(("username", "password"), [("alice", "wrong-pass"), ("nobody", "secret123")])
def test_login_invalid_credentials(
    register: RegisterUserUseCase, login: LoginUserUseCase, tokens, username: str, password: str
) -> None:
    register.execute("alice", "secret123", "buyer")

    with pytest.raises(InvalidCredentialsError):
        login.execute(username, password)
    assert tokens.tokens == []


def test_logout_revokes_authentication_tokens(
    register: RegisterUserUseCase, login: LoginUserUseCase, token_service: TokenService, users
) -> None:
    register.execute("alice", "secret123", "buyer")
    first = login.execute("alice", "secret123")
    second = login.execute("alice", "secret123")
    user = users.find_by_username("alice")

    LogoutUserUseCase(tokens=token_service).execute(user)

    for token in (first, second):
        with pytest.raises(RecordNotFoundError):
            token_service.resolve(token.plaintext, TOKEN_SCOPE_AUTHENTICATION)
