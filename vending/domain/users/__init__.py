# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (
    ANONYMOUS,
    ROLE_BUYER,
    ROLE_SELLER,
    TOKEN_SCOPE_AUTHENTICATION,
    AnonymousIdentity,
    AuthenticatedIdentity,
    Identity,
    Token,
    User,
)
from .permissions import (
    PERMISSION_PRODUCTS_BUY,
    PERMISSION_PRODUCTS_READ,
    PERMISSION_PRODUCTS_WRITE,
    permissions_for_role,
)

__all__ = [
    "ANONYMOUS",
    "PERMISSION_PRODUCTS_BUY",
    "PERMISSION_PRODUCTS_READ",
    "PERMISSION_PRODUCTS_WRITE",
    "ROLE_BUYER",
    "ROLE_SELLER",
    "TOKEN_SCOPE_AUTHENTICATION",
    "AnonymousIdentity",
    "AuthenticatedIdentity",
    "Identity",
    "Token",
    "User",
    "permissions_for_role",
]
