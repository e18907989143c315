# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Opaque bearer tokens.

A token is 16 random bytes rendered as unpadded base32. Only the SHA-256 of
the plaintext is stored, so the token table alone cannot be replayed. Lookups
match on hash, scope and a future expiry; an expired token and an unknown one
both come back as ``RecordNotFoundError``.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from vending.domain.exceptions import RecordNotFoundError
from vending.domain.users.entities import Token, User
from vending.domain.users.exceptions import InvalidTokenError, RandomSourceError
from vending.domain.users.repositories import TokenRepository
from vending.shared.logging import logger

TOKEN_BYTES = 16
# base32 without padding: ceil(16 * 8 / 5)
TOKEN_LENGTH = 26


def _now() -> datetime:
    return datetime.now(UTC)


def hash_token(plaintext: str) -> bytes:
    return hashlib.sha256(plaintext.encode()).digest()


class TokenService:
    def __init__(
        self,
        *,
        tokens: TokenRepository,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._tokens = tokens
        self._random_bytes = random_bytes
        self._clock = clock

    def issue(self, user_id: int, ttl: timedelta, scope: str) -> Token:
        token = self._generate(user_id, ttl, scope)
        self._tokens.add(token)
        logger.info(
            f"tokens.issue: ok (user_id={user_id}, scope={scope}, exp={token.expiry.isoformat()})"
        )
        return token

    def resolve(self, plaintext: str, scope: str) -> User:
        if not plaintext or len(plaintext) != TOKEN_LENGTH:
            raise InvalidTokenError()

        user = self._tokens.find_user(hash_token(plaintext), scope, self._clock())
        if user is None:
            raise RecordNotFoundError()
        return user

    def revoke(self, user_id: int, scope: str) -> None:
        self._tokens.delete_all_for_user(user_id, scope)
        logger.info(f"tokens.revoke: ok (user_id={user_id}, scope={scope})")

    def _generate(self, user_id: int, ttl: timedelta, scope: str) -> Token:
        try:
            raw = self._random_bytes(TOKEN_BYTES)
        except (OSError, NotImplementedError) as exc:
            logger.error(f"tokens.issue: entropy source failed (user_id={user_id})")
            raise RandomSourceError() from exc

        plaintext = base64.b32encode(raw).decode("ascii").rstrip("=")
        return Token(
            plaintext=plaintext,
            hash=hash_token(plaintext),
            user_id=user_id,
            expiry=self._clock() + ttl,
            scope=scope,
        )


__all__ = ["TOKEN_LENGTH", "TokenService", "hash_token"]
