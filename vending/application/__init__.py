# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.permissions import PermissionService
from .services.products import ProductPage, ProductService
from .services.tokens import TokenService
from .services.transactions import TransactionService

__all__ = [
    "PermissionService",
    "ProductPage",
    "ProductService",
    "TokenService",
    "TransactionService",
]
