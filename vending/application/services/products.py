# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from vending.domain.exceptions import NoPermissionError, RecordNotFoundError
from vending.domain.products.entities import Filters, Metadata, Product
from vending.domain.products.exceptions import DuplicateProductNameError
from vending.domain.products.repositories import ProductRepository
from vending.domain.validation import Validator
from vending.shared.errors.base import FailedValidationError
from vending.shared.logging import logger

DUPLICATE_NAME_MESSAGE = "a product with this name already exists"


@dataclass(slots=True, frozen=True)
class ProductPage:
    products: list[Product]
    metadata: Metadata


class ProductService:
    """Catalogue management. Only the owning seller may change a product."""

    def __init__(self, *, products: ProductRepository) -> None:
        self._products = products

    def create(self, product: Product) -> Product:
        v = Validator()
        product.validate(v)
        v.raise_if_invalid()

        try:
            created = self._products.add(product)
        except DuplicateProductNameError as exc:
            raise FailedValidationError({"name": DUPLICATE_NAME_MESSAGE}) from exc
        logger.info(f"products.create: ok (id={created.id}, seller_id={created.seller_id})")
        return created

    def get_one(self, product_id: int) -> Product:
        if product_id < 1:
            raise RecordNotFoundError()
        product = self._products.get(product_id)
        if product is None:
            raise RecordNotFoundError()
        return product

    def list(self, name: str, filters: Filters) -> ProductPage:
        v = Validator()
        filters.validate(v)
        v.raise_if_invalid()

        products, total = self._products.list(name, filters)
        return ProductPage(
            products=products,
            metadata=Metadata.calculate(total, filters.page, filters.page_size),
        )

    def update(self, request: Product) -> Product:
        v = Validator()
        request.validate(v)
        v.raise_if_invalid()

        product = self._get_for_user(request.id, request.seller_id)
        product.name = request.name
        product.cost = request.cost
        product.amount_available = request.amount_available

        try:
            updated = self._products.update(product)
        except DuplicateProductNameError as exc:
            raise FailedValidationError({"name": DUPLICATE_NAME_MESSAGE}) from exc
        logger.info(f"products.update: ok (id={updated.id}, seller_id={updated.seller_id})")
        return updated

    def remove(self, product_id: int, seller_id: int) -> None:
        product = self._get_for_user(product_id, seller_id)
        self._products.delete(product.id)
        logger.info(f"products.remove: ok (id={product.id}, seller_id={seller_id})")

    def _get_for_user(self, product_id: int, seller_id: int) -> Product:
        product = self.get_one(product_id)
        if not product.is_owned_by(seller_id):
            raise NoPermissionError()
        return product


__all__ = ["ProductPage", "ProductService"]
