# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Purchase and balance engine.

Every operation validates first and raises ``FailedValidationError`` before
touching storage. Stock and balance both change at the store through
conditional updates; when the balance debit fails or finds the money already
spent, the units are put back before the error propagates.
"""

from __future__ import annotations

from time import perf_counter

from vending.domain.coins import compute_change, validate_deposit
from vending.domain.products.entities import Product, PurchaseReceipt
from vending.domain.products.repositories import ProductRepository
from vending.domain.users.entities import User
from vending.domain.users.repositories import UserRepository
from vending.domain.validation import Validator
from vending.shared.errors.base import FailedValidationError
from vending.shared.logging import logger


class TransactionService:
    def __init__(self, *, users: UserRepository, products: ProductRepository) -> None:
        self._users = users
        self._products = products

    def buy_product(self, user: User, product: Product, quantity: int) -> PurchaseReceipt:
        t0 = perf_counter()
        cost = product.cost * quantity

        v = Validator()
        v.check(quantity > 0, "product", "purchase quantity must be greater zero")
        v.check(
            product.amount_available >= quantity,
            "product",
            f"not enough quantity only {product.amount_available} remaining",
        )
        v.check(user.deposit >= cost, "product", "you do not have sufficient balance")
        v.raise_if_invalid()

        updated = self._products.decrement_stock(product.id, quantity)
        if updated is None:
            # stock moved between the read and the write
            raise FailedValidationError({"product": "not enough quantity remaining"})
        product.amount_available = updated.amount_available

        try:
            debited = self._users.debit_deposit(user.id, cost)
        except Exception:
            logger.warning(
                f"transactions.buy: balance write failed, restocking "
                f"(user_id={user.id}, product_id={product.id}, qty={quantity})"
            )
            self._restock(product, quantity)
            raise
        if debited is None:
            # balance spent by a concurrent request
            self._restock(product, quantity)
            raise FailedValidationError({"product": "you do not have sufficient balance"})
        user.deposit = debited.deposit

        receipt = PurchaseReceipt(
            amount_spent=cost,
            product_name=updated.name,
            product_cost=updated.cost,
            quantity=quantity,
            change=compute_change(debited.deposit),
        )
        dt_ms = (perf_counter() - t0) * 1000
        logger.info(
            f"transactions.buy: ok (user_id={user.id}, product_id={product.id}, "
            f"qty={quantity}, spent={cost}, dt_ms={dt_ms:.1f})"
        )
        return receipt

    def _restock(self, product: Product, quantity: int) -> None:
        try:
            self._products.restock(product.id, quantity)
        except Exception:
            logger.exception(
                f"transactions.buy: restock failed (product_id={product.id}, qty={quantity})"
            )
            return
        product.amount_available += quantity

    def deposit_coin(self, user: User, amount: int) -> User:
        v = Validator()
        v.check(amount > 0, "deposit", "must be greater than zero")
        validate_deposit(v, amount)
        v.raise_if_invalid()

        persisted = self._users.credit_deposit(user.id, amount)
        user.deposit = persisted.deposit
        logger.info(f"transactions.deposit: ok (user_id={user.id}, amount={amount}, balance={user.deposit})")
        return persisted

    def deposit_reset(self, user: User) -> User:
        user.reset_deposit()
        v = Validator()
        user.validate(v)
        v.raise_if_invalid()

        persisted = self._users.update(user)
        logger.info(f"transactions.reset: ok (user_id={user.id})")
        return persisted


__all__ = ["TransactionService"]
