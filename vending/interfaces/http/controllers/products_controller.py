# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from time import perf_counter

from flask import Blueprint, Response, request
from pydantic import ValidationError

from vending.application.services.products import ProductService
from vending.application.services.transactions import TransactionService
from vending.domain.products.entities import Filters, Product
from vending.domain.users.permissions import PERMISSION_PRODUCTS_BUY, PERMISSION_PRODUCTS_WRITE
from vending.interfaces.http.authentication import Authenticator, current_user
from vending.interfaces.http.dto.products import (
    ListProductsQueryDTO,
    MetadataDTO,
    ProductDTO,
    ProductRequestDTO,
)
from vending.interfaces.http.dto.responses import success
from vending.shared.errors.validation import raise_validation_error
from vending.shared.logging import logger


def _product_payload(product: Product) -> dict[str, object]:
    return {"product": ProductDTO.from_entity(product).model_dump(mode="json")}


def _read_product_request() -> ProductRequestDTO:
    try:
        return ProductRequestDTO.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class ProductsController:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        products: ProductService,
        transactions: TransactionService,
    ) -> None:
        self._authenticator = authenticator
        self._products = products
        self._transactions = transactions

    def create(self) -> tuple[Response, int, dict[str, str]]:
        dto = _read_product_request()
        seller = current_user()
        product = self._products.create(
            Product(
                id=0,
                name=dto.name,
                cost=dto.cost,
                amount_available=dto.amount_available,
                seller_id=seller.id,
            )
        )
        headers = {"Location": f"/v1/products/{product.id}"}
        return success(data=_product_payload(product)), 201, headers

    def show(self, product_id: int) -> tuple[Response, int]:
        product = self._products.get_one(product_id)
        return success(data=_product_payload(product)), 200

    def list(self) -> tuple[Response, int]:
        try:
            query = ListProductsQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        filters = Filters(page=query.page, page_size=query.page_size, sort=query.sort)
        page = self._products.list(query.name, filters)
        data: dict[str, object] = {
            "products": [ProductDTO.from_entity(p).model_dump(mode="json") for p in page.products]
        }
        if page.metadata.total_records:
            data["metadata"] = MetadataDTO.from_entity(page.metadata).model_dump(mode="json")
        return success(data=data), 200

    def update(self, product_id: int) -> tuple[Response, int]:
        dto = _read_product_request()
        seller = current_user()
        product = self._products.update(
            Product(
                id=product_id,
                name=dto.name,
                cost=dto.cost,
                amount_available=dto.amount_available,
                seller_id=seller.id,
            )
        )
        return success(data=_product_payload(product)), 200

    def delete(self, product_id: int) -> tuple[Response, int]:
        self._products.remove(product_id, current_user().id)
        return success(message="product successfully deleted"), 200

    def buy(self, product_id: int, amount: int) -> tuple[Response, int]:
        t0 = perf_counter()
        buyer = current_user()
        product = self._products.get_one(product_id)
        receipt = self._transactions.buy_product(buyer, product, amount)

        dt_ms = (perf_counter() - t0) * 1000
        logger.info(f"products.buy: ok (user_id={buyer.id}, product_id={product_id}, dt_ms={dt_ms:.1f})")
        return success(message="Buy product successful", data={"purchase": receipt.to_dict()}), 200

    def as_blueprint(self) -> Blueprint:
        sellers_only = self._authenticator.require_permission(PERMISSION_PRODUCTS_WRITE)
        buyers_only = self._authenticator.require_permission(PERMISSION_PRODUCTS_BUY)

        bp = Blueprint("products", __name__, url_prefix="/v1/products")
        bp.add_url_rule("", endpoint="list", view_func=self.list, methods=["GET"])
        bp.add_url_rule("", endpoint="create", view_func=sellers_only(self.create), methods=["POST"])
        bp.add_url_rule("/<int:product_id>", endpoint="show", view_func=self.show, methods=["GET"])
        bp.add_url_rule(
            "/<int:product_id>",
            endpoint="update",
            view_func=sellers_only(self.update),
            methods=["PUT"],
        )
        bp.add_url_rule(
            "/<int:product_id>",
            endpoint="delete",
            view_func=sellers_only(self.delete),
            methods=["DELETE"],
        )
        bp.add_url_rule(
            "/<int:product_id>/buy/<int:amount>",
            endpoint="buy",
            view_func=buyers_only(self.buy),
            methods=["GET"],
        )
        return bp
