# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from .entities import ROLE_BUYER, ROLE_SELLER

PERMISSION_PRODUCTS_READ = "products:read"
PERMISSION_PRODUCTS_WRITE = "products:write"
PERMISSION_PRODUCTS_BUY = "products:buy"

ALL_PERMISSIONS = (
    PERMISSION_PRODUCTS_READ,
    PERMISSION_PRODUCTS_WRITE,
    PERMISSION_PRODUCTS_BUY,
)

_ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    ROLE_SELLER: frozenset({PERMISSION_PRODUCTS_READ, PERMISSION_PRODUCTS_WRITE}),
    ROLE_BUYER: frozenset({PERMISSION_PRODUCTS_READ, PERMISSION_PRODUCTS_BUY}),
}


def permissions_for_role(role: str) -> frozenset[str]:
    return _ROLE_PERMISSIONS.get(role, frozenset())
