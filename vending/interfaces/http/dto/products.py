from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from vending.domain.products.entities import Metadata, Product


class ProductRequestDTO(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: str = ""
    cost: int = 0
    amount_available: int = 0


class ListProductsQueryDTO(BaseModel):
    """Query string of ``GET /v1/products``; values arrive as text."""

    name: str = ""
    page: int = 1
    page_size: int = Field(default=10)
    sort: str = "id"


class ProductDTO(BaseModel):
    id: int
    name: str
    cost: int
    amount_available: int
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, product: Product) -> ProductDTO:
        return cls(
            id=product.id,
            name=product.name,
            cost=product.cost,
            amount_available=product.amount_available,
            created_at=product.created_at,
        )


class MetadataDTO(BaseModel):
    current_page: int
    page_size: int
    first_page: int
    last_page: int
    total_records: int

    @classmethod
    def from_entity(cls, metadata: Metadata) -> MetadataDTO:
        return cls(
            current_page=metadata.current_page,
            page_size=metadata.page_size,
            first_page=metadata.first_page,
            last_page=metadata.last_page,
            total_records=metadata.total_records,
        )
