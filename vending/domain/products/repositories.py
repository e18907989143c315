# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import Filters, Product


class ProductRepository(Protocol):
    def add(self, product: Product) -> Product: ...
    def get(self, product_id: int) -> Product | None: ...
    def update(self, product: Product) -> Product: ...
    def delete(self, product_id: int) -> None: ...
    def list(self, name: str, filters: Filters) -> tuple[list[Product], int]: ...

    def decrement_stock(self, product_id: int, quantity: int) -> Product | None:
        """Take ``quantity`` units only if that many are available.

        Returns the updated product, or ``None`` when stock is short. Raises
        ``RecordNotFoundError`` when the product is gone.
        """
        ...

    def restock(self, product_id: int, quantity: int) -> None: ...
