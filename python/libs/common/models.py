"""Shared Pydantic models used across Python services."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator


class ProductBase(BaseModel):
    """Mutable product fields, as accepted on create and update."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr
    description: StrictStr
    price: Union[int, float]
    category: StrictStr
    in_stock: StrictBool = Field(alias="inStock")

    @field_validator("price", mode="before")
    @classmethod
    def price_is_number(cls, value):
        # bool is an int subclass; JSON true/false is not a price
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("price must be a number")
        return value


class Product(ProductBase):
    id: str


class ProductPage(BaseModel):
    total: int
    page: int
    limit: int
    products: list[Product]


class ProductStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count_by_category: dict[str, int] = Field(alias="countByCategory")
    total: int


class ErrorResponse(BaseModel):
    error: str
    message: str
