# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Coin denominations and change making.

Balances are integer cents. Every balance the service holds is a sum of the
accepted denominations, which for this set means a non-negative multiple of 5.
"""

from __future__ import annotations

from .exceptions import InvariantViolation
from .validation import Validator, permitted_value

COIN_FIVE_CENT = 5
COIN_TEN_CENT = 10
COIN_TWENTY_CENT = 20
COIN_FIFTY_CENT = 50
COIN_HUNDRED_CENT = 100

# descending, greedy change making relies on this order
DENOMINATIONS: tuple[int, ...] = (
    COIN_HUNDRED_CENT,
    COIN_FIFTY_CENT,
    COIN_TWENTY_CENT,
    COIN_TEN_CENT,
    COIN_FIVE_CENT,
)


def validate_deposit(v: Validator, amount: int) -> None:
    v.check(
        permitted_value(amount, DENOMINATIONS),
        "deposit",
        "you can only deposit 5, 10, 20, 50 and 100 cent coins",
    )


def is_valid_balance(balance: int) -> bool:
    return balance >= 0 and balance % COIN_FIVE_CENT == 0


def compute_change(balance: int) -> list[int]:
    """Return ``balance`` as the shortest list of coins, largest first.

    >>> compute_change(275)
    [100, 100, 50, 20, 5]

    A balance that no coin combination can pay out means the deposit invariant
    was broken upstream; that raises ``InvariantViolation`` instead of
    returning partial change.
    """

    if balance < 0:
        raise InvariantViolation(f"system error balance {balance} is not valid", field="deposit")

    change: list[int] = []
    remaining = balance
    for coin in DENOMINATIONS:
        count, remaining = divmod(remaining, coin)
        change.extend([coin] * count)

    if remaining:
        raise InvariantViolation(f"system error balance {balance} is not valid", field="deposit")
    return change


__all__ = [
    "COIN_FIFTY_CENT",
    "COIN_FIVE_CENT",
    "COIN_HUNDRED_CENT",
    "COIN_TEN_CENT",
    "COIN_TWENTY_CENT",
    "DENOMINATIONS",
    "compute_change",
    "is_valid_balance",
    "validate_deposit",
]
