# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from vending.shared.errors.base import DomainError


class DuplicateProductNameError(DomainError):
    code = "duplicate_product_name"
    status = HTTPStatus.CONFLICT
