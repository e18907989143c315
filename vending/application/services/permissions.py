# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from vending.domain.users.entities import AuthenticatedIdentity, Identity
from vending.domain.users.permissions import permissions_for_role
from vending.domain.users.repositories import PermissionRepository
from vending.shared.logging import logger


class PermissionService:
    def __init__(self, *, permissions: PermissionRepository) -> None:
        self._permissions = permissions

    def grant_role(self, user_id: int, role: str) -> frozenset[str]:
        codes = permissions_for_role(role)
        self._permissions.add_for_user(user_id, sorted(codes))
        logger.info(f"permissions.grant: ok (user_id={user_id}, role={role}, codes={sorted(codes)})")
        return codes

    def has_capability(self, identity: Identity, code: str) -> bool:
        if not isinstance(identity, AuthenticatedIdentity):
            return False
        return code in self._permissions.list_for_user(identity.user.id)


__all__ = ["PermissionService"]
