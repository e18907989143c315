from __future__ import annotations

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="vending-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'vending.db')}"
os.environ.setdefault("LOG_FILE", os.path.join(_TMP_DIR, "app.log"))
os.environ["ENABLE_RATE_LIMIT"] = "false"
os.environ.setdefault("APP_ENV", "test")

from collections.abc import Iterable  # noqa: E402
from dataclasses import replace  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402

from vending.domain.exceptions import RecordNotFoundError  # noqa: E402
from vending.domain.products.entities import Filters, Product  # noqa: E402
from vending.domain.products.exceptions import DuplicateProductNameError  # noqa: E402
from vending.domain.users.entities import ROLE_BUYER, ROLE_SELLER, Token, User  # noqa: E402
from vending.domain.users.exceptions import DuplicateUsernameError  # noqa: E402
from vending.domain.users.repositories import PasswordHasher  # noqa: E402


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1
        self.update_calls = 0
        self.balance_writes = 0
        self.fail_balance_write: Exception | None = None

    def find_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return replace(user)
        return None

    def find_by_id(self, user_id: int) -> User | None:
        user = self._users.get(user_id)
        return replace(user) if user else None

    def add(self, user: User) -> User:
        if self.find_by_username(user.username) is not None:
            raise DuplicateUsernameError()
        stored = replace(user, id=self._seq, password_plaintext=None)
        self._seq += 1
        self._users[stored.id] = stored
        return replace(stored)

    def update(self, user: User) -> User:
        self.update_calls += 1
        if user.id not in self._users:
            raise RecordNotFoundError()
        stored = replace(user, password_plaintext=None)
        self._users[user.id] = stored
        return replace(stored)

    def credit_deposit(self, user_id: int, amount: int) -> User:
        self.balance_writes += 1
        stored = self._users.get(user_id)
        if stored is None:
            raise RecordNotFoundError()
        stored.deposit += amount
        return replace(stored)

    def debit_deposit(self, user_id: int, amount: int) -> User | None:
        self.balance_writes += 1
        if self.fail_balance_write is not None:
            raise self.fail_balance_write
        stored = self._users.get(user_id)
        if stored is None:
            raise RecordNotFoundError()
        if stored.deposit < amount:
            return None
        stored.deposit -= amount
        return replace(stored)


class InMemoryTokenRepository:
    def __init__(self, users: InMemoryUserRepository) -> None:
        self._users = users
        self.tokens: list[Token] = []
        self.find_calls = 0

    def add(self, token: Token) -> None:
        self.tokens.append(token)

    def find_user(self, token_hash: bytes, scope: str, now: datetime) -> User | None:
        self.find_calls += 1
        for token in self.tokens:
            if token.hash == token_hash and token.scope == scope and token.expiry > now:
                return self._users.find_by_id(token.user_id)
        return None

    def delete_all_for_user(self, user_id: int, scope: str) -> None:
        self.tokens = [t for t in self.tokens if not (t.user_id == user_id and t.scope == scope)]


class InMemoryPermissionRepository:
    def __init__(self) -> None:
        self._codes: dict[int, set[str]] = {}
        self.lookups = 0

    def list_for_user(self, user_id: int) -> frozenset[str]:
        self.lookups += 1
        return frozenset(self._codes.get(user_id, set()))

    def add_for_user(self, user_id: int, codes: Iterable[str]) -> None:
        self._codes.setdefault(user_id, set()).update(codes)


class InMemoryProductRepository:
    def __init__(self) -> None:
        self._products: dict[int, Product] = {}
        self._seq = 1
        self.decrement_calls = 0
        self.restock_calls = 0
        self.fail_restock: Exception | None = None

    def _check_unique(self, product: Product) -> None:
        for other in self._products.values():
            if (
                other.id != product.id
                and other.name == product.name
                and other.seller_id == product.seller_id
            ):
                raise DuplicateProductNameError()

    def add(self, product: Product) -> Product:
        self._check_unique(replace(product, id=0))
        stored = replace(product, id=self._seq, created_at=datetime.now(UTC))
        self._seq += 1
        self._products[stored.id] = stored
        return replace(stored)

    def get(self, product_id: int) -> Product | None:
        product = self._products.get(product_id)
        return replace(product) if product else None

    def update(self, product: Product) -> Product:
        if product.id not in self._products:
            raise RecordNotFoundError()
        self._check_unique(product)
        self._products[product.id] = replace(product)
        return replace(product)

    def delete(self, product_id: int) -> None:
        if self._products.pop(product_id, None) is None:
            raise RecordNotFoundError()

    def list(self, name: str, filters: Filters) -> tuple[list[Product], int]:
        rows = [p for p in self._products.values() if name.lower() in p.name.lower()]
        rows.sort(key=lambda p: p.id)
        rows.sort(key=lambda p: getattr(p, filters.sort_column()), reverse=filters.descending())
        page = rows[filters.offset() : filters.offset() + filters.limit()]
        return [replace(p) for p in page], len(rows)

    def decrement_stock(self, product_id: int, quantity: int) -> Product | None:
        self.decrement_calls += 1
        product = self._products.get(product_id)
        if product is None:
            raise RecordNotFoundError()
        if product.amount_available < quantity:
            return None
        product.amount_available -= quantity
        return replace(product)

    def restock(self, product_id: int, quantity: int) -> None:
        self.restock_calls += 1
        if self.fail_restock is not None:
            raise self.fail_restock
        self._products[product_id].amount_available += quantity


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FrozenClock:
    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens(users: InMemoryUserRepository) -> InMemoryTokenRepository:
    return InMemoryTokenRepository(users)


@pytest.fixture()
def permissions() -> InMemoryPermissionRepository:
    return InMemoryPermissionRepository()


@pytest.fixture()
def products() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def buyer(users: InMemoryUserRepository) -> User:
    return users.add(
        User(id=0, username="bob", role=ROLE_BUYER, password_hash="hashed:secret123")
    )


@pytest.fixture()
def seller(users: InMemoryUserRepository) -> User:
    return users.add(
        User(id=0, username="sally", role=ROLE_SELLER, password_hash="hashed:secret123")
    )
