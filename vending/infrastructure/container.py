# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from vending.application.services.password_hashing import WerkzeugPasswordHasher
from vending.application.services.permissions import PermissionService
from vending.application.services.products import ProductService
from vending.application.services.tokens import TokenService
from vending.application.services.transactions import TransactionService
from vending.application.use_cases.users.login_user import LoginUserUseCase
from vending.application.use_cases.users.logout_user import LogoutUserUseCase
from vending.application.use_cases.users.register_user import RegisterUserUseCase
from vending.infrastructure.db import SessionLocal
from vending.infrastructure.repositories.products.sqlalchemy_product_repository import (
    SqlAlchemyProductRepository,
)
from vending.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyPermissionRepository,
    SqlAlchemyTokenRepository,
    SqlAlchemyUserRepository,
)
from vending.interfaces.http.authentication import Authenticator
from vending.interfaces.http.controllers.auth_controller import AuthController
from vending.interfaces.http.controllers.misc_controller import MiscController
from vending.interfaces.http.controllers.products_controller import ProductsController
from vending.interfaces.http.controllers.users_controller import UsersController
from vending.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(SessionLocal)

    @cached_property
    def token_repository(self) -> SqlAlchemyTokenRepository:
        return SqlAlchemyTokenRepository(SessionLocal)

    @cached_property
    def permission_repository(self) -> SqlAlchemyPermissionRepository:
        return SqlAlchemyPermissionRepository(SessionLocal)

    @cached_property
    def product_repository(self) -> SqlAlchemyProductRepository:
        return SqlAlchemyProductRepository(SessionLocal)

    # Services

    @cached_property
    def token_service(self) -> TokenService:
        return TokenService(tokens=self.token_repository)

    @cached_property
    def permission_service(self) -> PermissionService:
        return PermissionService(permissions=self.permission_repository)

    @cached_property
    def product_service(self) -> ProductService:
        return ProductService(products=self.product_repository)

    @cached_property
    def transaction_service(self) -> TransactionService:
        return TransactionService(users=self.user_repository, products=self.product_repository)

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            permissions=self.permission_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            token_ttl=timedelta(hours=self._config.auth.token_ttl_hours),
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(tokens=self.token_service)

    # HTTP

    @cached_property
    def authenticator(self) -> Authenticator:
        return Authenticator(tokens=self.token_service, permissions=self.permission_service)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            authenticator=self.authenticator,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            authenticator=self.authenticator,
            register_use_case=self.register_user_use_case,
            transactions=self.transaction_service,
        )

    @cached_property
    def products_controller(self) -> ProductsController:
        return ProductsController(
            authenticator=self.authenticator,
            products=self.product_service,
            transactions=self.transaction_service,
        )


container = Container()
