# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vending.domain.exceptions import RecordNotFoundError
from vending.domain.products.entities import Filters
from vending.domain.products.entities import Product as DomainProduct
from vending.domain.products.exceptions import DuplicateProductNameError
from vending.domain.products.repositories import ProductRepository
from vending.infrastructure.db.models import Product
from vending.infrastructure.repositories.users.sqlalchemy_user_repository import (
    is_unique_violation,
)
from vending.infrastructure.unit_of_work import unit_of_work_scope

_SORT_COLUMNS = {
    "id": Product.id,
    "name": Product.name,
}


def _to_domain(row: Product) -> DomainProduct:
    return DomainProduct(
        id=row.id,
        name=row.name,
        cost=row.cost,
        amount_available=row.quantity,
        seller_id=row.seller_id,
        created_at=row.created_at,
    )


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def add(self, product: DomainProduct) -> DomainProduct:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = Product(
                    name=product.name,
                    cost=product.cost,
                    quantity=product.amount_available,
                    seller_id=product.seller_id,
                )
                session.add(row)
                session.flush()
                persisted = _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise DuplicateProductNameError() from exc
            raise
        return persisted

    def get(self, product_id: int) -> DomainProduct | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Product, product_id)
            return _to_domain(row) if row else None

    def update(self, product: DomainProduct) -> DomainProduct:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.get(Product, product.id)
                if row is None:
                    raise RecordNotFoundError()
                row.name = product.name
                row.cost = product.cost
                row.quantity = product.amount_available
                session.flush()
                persisted = _to_domain(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise DuplicateProductNameError() from exc
            raise
        return persisted

    def delete(self, product_id: int) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Product, product_id)
            if row is None:
                raise RecordNotFoundError()
            session.delete(row)

    def list(self, name: str, filters: Filters) -> tuple[list[DomainProduct], int]:
        query = select(Product)
        if name:
            query = query.where(Product.name.icontains(name, autoescape=True))

        column = _SORT_COLUMNS[filters.sort_column()]
        order = column.desc() if filters.descending() else column.asc()

        with unit_of_work_scope(self._session_factory) as session:
            total = session.scalar(select(func.count()).select_from(query.subquery())) or 0
            rows = session.scalars(
                query.order_by(order, Product.id.asc())
                .limit(filters.limit())
                .offset(filters.offset())
            ).all()
            products = [_to_domain(row) for row in rows]
        return products, int(total)

    def decrement_stock(self, product_id: int, quantity: int) -> DomainProduct | None:
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                update(Product)
                .where(Product.id == product_id, Product.quantity >= quantity)
                .values(quantity=Product.quantity - quantity)
                .execution_options(synchronize_session=False)
            )
            row = session.get(Product, product_id)
            if row is None:
                raise RecordNotFoundError()
            if result.rowcount == 0:
                return None
            session.refresh(row)
            return _to_domain(row)

    def restock(self, product_id: int, quantity: int) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.execute(
                update(Product)
                .where(Product.id == product_id)
                .values(quantity=Product.quantity + quantity)
                .execution_options(synchronize_session=False)
            )
