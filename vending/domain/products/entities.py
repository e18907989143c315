# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from vending.domain.coins import COIN_FIVE_CENT
from vending.domain.validation import Validator, permitted_value

SORT_SAFE_LIST = ("id", "name", "-id", "-name")


@dataclass(slots=True)
class Product:
    id: int
    name: str
    cost: int
    amount_available: int
    seller_id: int
    created_at: datetime | None = None

    def validate(self, v: Validator) -> None:
        v.check(self.name != "", "name", "must be provided")
        v.check(len(self.name.encode()) <= 255, "name", "must not be more than 255 bytes long")

        v.check(self.cost > COIN_FIVE_CENT, "cost", "must be greater than 5")
        v.check(self.cost % COIN_FIVE_CENT == 0, "cost", "must be a multiple of 5")
        v.check(self.amount_available >= 0, "amount_available", "must not be negative")

    def is_owned_by(self, user_id: int) -> bool:
        return self.seller_id == user_id


@dataclass(slots=True, frozen=True)
class PurchaseReceipt:
    amount_spent: int
    product_name: str
    product_cost: int
    quantity: int
    change: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "amount_spent": self.amount_spent,
            "product_details": {
                "name": self.product_name,
                "cost": self.product_cost,
                "quantity_purchased": self.quantity,
            },
            "change": list(self.change),
        }


@dataclass(slots=True, frozen=True)
class Filters:
    page: int = 1
    page_size: int = 10
    sort: str = "id"

    def validate(self, v: Validator) -> None:
        v.check(self.page > 0, "page", "must be greater than zero")
        v.check(self.page <= 10_000_000, "page", "must be a maximum of 10 million")
        v.check(self.page_size > 0, "page_size", "must be greater than zero")
        v.check(self.page_size <= 100, "page_size", "must be a maximum of 100")
        v.check(permitted_value(self.sort, SORT_SAFE_LIST), "sort", "invalid sort value")

    def sort_column(self) -> str:
        return self.sort.lstrip("-")

    def descending(self) -> bool:
        return self.sort.startswith("-")

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(slots=True, frozen=True)
class Metadata:
    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    @classmethod
    def calculate(cls, total_records: int, page: int, page_size: int) -> Metadata:
        if total_records == 0:
            return cls()
        return cls(
            current_page=page,
            page_size=page_size,
            first_page=1,
            last_page=math.ceil(total_records / page_size),
            total_records=total_records,
        )
