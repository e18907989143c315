# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response

from vending.infrastructure.health import check_database
from vending.interfaces.http.dto.responses import success
from vending.shared.config import load_config


class MiscController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/v1/healthcheck", view_func=self.health, methods=["GET"])
        return bp

    def index(self) -> Response:
        return success(message="MVP Vending machine")

    def health(self) -> Response:
        check_database()
        return success(message="available", data={"environment": load_config().app_env})
