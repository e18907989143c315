# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Filters, Metadata, Product, PurchaseReceipt
from .exceptions import DuplicateProductNameError
from .repositories import ProductRepository

__all__ = [
    "DuplicateProductNameError",
    "Filters",
    "Metadata",
    "Product",
    "ProductRepository",
    "PurchaseReceipt",
]
