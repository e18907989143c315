from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest
from flask import Flask
from flask.testing import FlaskClient

from vending.application.services.permissions import PermissionService
from vending.application.services.products import ProductService
from vending.application.services.tokens import TokenService
from vending.application.services.transactions import TransactionService
from vending.application.use_cases.users.login_user import LoginUserUseCase
from vending.application.use_cases.users.logout_user import LogoutUserUseCase
from vending.application.use_cases.users.register_user import RegisterUserUseCase
from vending.domain.products.entities import Product
from vending.domain.users.entities import TOKEN_SCOPE_AUTHENTICATION, User
from vending.interfaces.http.authentication import Authenticator
from vending.interfaces.http.controllers.auth_controller import AuthController
from vending.interfaces.http.controllers.products_controller import ProductsController
from vending.interfaces.http.controllers.users_controller import UsersController
from vending.shared.middleware.error_handler import configure_error_handling


@pytest.fixture()
def token_service(tokens) -> TokenService:
    return TokenService(tokens=tokens)


@pytest.fixture()
def flask_app(users, products, permissions, hasher, token_service) -> Flask:
    permission_service = PermissionService(permissions=permissions)
    transactions = TransactionService(users=users, products=products)
    authenticator = Authenticator(tokens=token_service, permissions=permission_service)

    app = Flask(__name__)
    configure_error_handling(app)
    authenticator.configure(app)

    users_controller = UsersController(
        authenticator=authenticator,
        register_use_case=RegisterUserUseCase(
            users=users, permissions=permission_service, password_hasher=hasher
        ),
        transactions=transactions,
    )
    auth_controller = AuthController(
        authenticator=authenticator,
        login_use_case=LoginUserUseCase(users=users, tokens=token_service, password_hasher=hasher),
        logout_use_case=LogoutUserUseCase(tokens=token_service),
    )
    products_controller = ProductsController(
        authenticator=authenticator,
        products=ProductService(products=products),
        transactions=transactions,
    )
    app.register_blueprint(users_controller.as_blueprint())
    app.register_blueprint(auth_controller.as_blueprint())
    app.register_blueprint(products_controller.as_blueprint())
    return app


@pytest.fixture()
def client(flask_app: Flask) -> FlaskClient:
    return flask_app.test_client()


def _bearer(token_service: TokenService, user: User, permissions) -> dict[str, str]:
    PermissionService(permissions=permissions).grant_role(user.id, user.role)
    token = token_service.issue(user.id, timedelta(hours=1), TOKEN_SCOPE_AUTHENTICATION)
    return {"Authorization": f"Bearer {token.plaintext}"}


def test_register_returns_created_user(client: FlaskClient) -> None:
    response = client.post(
        "/v1/users", json={"username": "alice", "password": "secret123", "role": "buyer"}
    )

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["status"] == "success"
    assert payload["data"]["user"]["username"] == "alice"
    assert payload["data"]["user"]["deposit"] == 0
    assert "password_hash" not in payload["data"]["user"]


def test_register_rejects_unknown_fields(client: FlaskClient) -> None:
    response = client.post(
        "/v1/users",
        json={"username": "alice", "password": "secret123", "role": "buyer", "deposit": 100},
    )

    assert response.status_code == 422
    assert "deposit" in response.get_json()["context"]["errors"]


def test_login_and_logout(client: FlaskClient, users, hasher, tokens) -> None:
    users.add(User(id=0, username="alice", role="buyer", password_hash=hasher.hash("secret123")))

    login = client.post("/v1/auth/tokens", json={"username": "alice", "password": "secret123"})
    assert login.status_code == 200
    plaintext = login.get_json()["data"]["token"]["token"]
    assert len(plaintext) == 26

    headers = {"Authorization": f"Bearer {plaintext}"}
    assert client.delete("/v1/auth/tokens", headers=headers).status_code == 200
    assert tokens.tokens == []

    again = client.delete("/v1/auth/tokens", headers=headers)
    assert again.status_code == 401
    assert again.get_json()["error"] == "invalid_authentication_token"


def test_login_wrong_password(client: FlaskClient, users, hasher) -> None:
    users.add(User(id=0, username="alice", role="buyer", password_hash=hasher.hash("secret123")))

    response = client.post("/v1/auth/tokens", json={"username": "alice", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_credentials"


def test_logout_requires_authentication(client: FlaskClient) -> None:
    response = client.delete("/v1/auth/tokens")

    assert response.status_code == 401
    assert response.get_json()["error"] == "authentication_required"


@pytest.mark.parametrize(
    "header",
    ["Token abcdefghijklmnopqrstuvwxyz", "Bearer", "Bearer short", "Bearer " + "A" * 26],
)
def test_bad_authorization_header_is_rejected(client: FlaskClient, header: str) -> None:
    response = client.delete("/v1/auth/tokens", headers={"Authorization": header})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.get_json() == {"error": "invalid_authentication_token"}


def test_stale_token_does_not_block_public_routes(client: FlaskClient, users, hasher) -> None:
    users.add(User(id=0, username="alice", role="buyer", password_hash=hasher.hash("secret123")))
    stale = {"Authorization": "Bearer " + "A" * 26}

    login = client.post(
        "/v1/auth/tokens", json={"username": "alice", "password": "secret123"}, headers=stale
    )
    assert login.status_code == 200

    listing = client.get("/v1/products", headers=stale)
    assert listing.status_code == 200

    registered = client.post(
        "/v1/users",
        json={"username": "bob", "password": "secret123", "role": "seller"},
        headers=stale,
    )
    assert registered.status_code == 201

    gated = client.get("/v1/users/deposit/5", headers=stale)
    assert gated.status_code == 401
    assert gated.get_json()["error"] == "invalid_authentication_token"


def test_anonymous_cannot_create_product(client: FlaskClient) -> None:
    response = client.post("/v1/products", json={"name": "Coke", "cost": 100})

    assert response.status_code == 401
    assert response.get_json()["error"] == "authentication_required"


def test_buyer_cannot_create_product(
    client: FlaskClient, token_service, buyer: User, permissions
) -> None:
    response = client.post(
        "/v1/products",
        json={"name": "Coke", "cost": 100, "amount_available": 1},
        headers=_bearer(token_service, buyer, permissions),
    )

    assert response.status_code == 403
    assert response.get_json() == {
        "error": "not_permitted",
        "context": {"permission": "products:write"},
    }


def test_seller_creates_and_lists_products(
    client: FlaskClient, token_service, seller: User, permissions
) -> None:
    headers = _bearer(token_service, seller, permissions)

    created = client.post(
        "/v1/products",
        json={"name": "Coke", "cost": 100, "amount_available": 5},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.headers["Location"] == "/v1/products/1"
    assert created.get_json()["data"]["product"]["amount_available"] == 5

    listing = client.get("/v1/products?name=co&page_size=5")
    assert listing.status_code == 200
    data = listing.get_json()["data"]
    assert [p["name"] for p in data["products"]] == ["Coke"]
    assert data["metadata"]["total_records"] == 1


def test_list_rejects_non_integer_page(client: FlaskClient) -> None:
    response = client.get("/v1/products?page=abc")

    assert response.status_code == 422
    assert "page" in response.get_json()["context"]["errors"]


def test_show_missing_product(client: FlaskClient) -> None:
    response = client.get("/v1/products/99")

    assert response.status_code == 404
    assert response.get_json()["error"] == "record_not_found"


def test_update_other_sellers_product_is_forbidden(
    client: FlaskClient, token_service, products, seller: User, users, permissions
) -> None:
    rival = users.add(replace(seller, id=0, username="rival"))
    product = products.add(
        Product(id=0, name="Coke", cost=100, amount_available=5, seller_id=seller.id)
    )

    response = client.put(
        f"/v1/products/{product.id}",
        json={"name": "Pepsi", "cost": 100, "amount_available": 5},
        headers=_bearer(token_service, rival, permissions),
    )

    assert response.status_code == 403
    assert response.get_json()["error"] == "no_permission"


def test_deposit_and_buy(
    client: FlaskClient, token_service, products, seller: User, buyer: User, permissions
) -> None:
    product = products.add(
        Product(id=0, name="Coke", cost=100, amount_available=20, seller_id=seller.id)
    )
    headers = _bearer(token_service, buyer, permissions)

    for coin in (100, 100, 100, 100, 50, 20, 5):
        assert client.get(f"/v1/users/deposit/{coin}", headers=headers).status_code == 200

    rejected = client.get("/v1/users/deposit/3", headers=headers)
    assert rejected.status_code == 422
    assert rejected.get_json()["context"]["errors"] == {
        "deposit": "you can only deposit 5, 10, 20, 50 and 100 cent coins"
    }

    bought = client.get(f"/v1/products/{product.id}/buy/2", headers=headers)
    assert bought.status_code == 200
    body = bought.get_json()
    assert body["message"] == "Buy product successful"
    assert body["data"]["purchase"] == {
        "amount_spent": 200,
        "product_details": {"name": "Coke", "cost": 100, "quantity_purchased": 2},
        "change": [100, 100, 50, 20, 5],
    }

    reset = client.get("/v1/users/deposit/reset", headers=headers)
    assert reset.status_code == 200
    assert reset.get_json()["data"]["user"]["deposit"] == 0


def test_seller_cannot_deposit(client: FlaskClient, token_service, seller: User, permissions) -> None:
    response = client.get("/v1/users/deposit/50", headers=_bearer(token_service, seller, permissions))

    assert response.status_code == 403
    assert response.get_json()["error"] == "not_permitted"
