from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from vending.domain.users.entities import Token, User


class RegisterUserRequestDTO(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    username: str = ""
    password: str = ""
    role: str = ""


class LoginRequestDTO(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    username: str = ""
    password: str = ""


class UserDTO(BaseModel):
    id: int
    username: str
    role: str
    deposit: int
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            username=user.username,
            role=user.role,
            deposit=user.deposit,
            created_at=user.created_at,
        )


class TokenDTO(BaseModel):
    token: str
    expiry: datetime

    @classmethod
    def from_entity(cls, token: Token) -> TokenDTO:
        return cls(token=token.plaintext, expiry=token.expiry)
