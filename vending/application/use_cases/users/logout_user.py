"""Use-case for revoking access tokens."""

from __future__ import annotations

from vending.application.services.tokens import TokenService
from vending.domain.users.entities import TOKEN_SCOPE_AUTHENTICATION, User


class LogoutUserUseCase:
    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, user: User) -> None:
        self._tokens.revoke(user.id, TOKEN_SCOPE_AUTHENTICATION)
