"""Pydantic request schemas for the cart API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "6f1c2b7e-0d4a-4e55-9a0e-3b1f2c4d5e6f", "quantity": 2}]}}

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"quantity": 3}]}}

    quantity: int = Field(..., ge=1)
