"""Pydantic request schemas for the back-office API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class UpdateUserRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"is_active": False}, {"role": "admin", "is_verified": True}]}}

    name: str | None = Field(None, min_length=2, max_length=50)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)
    role: str | None = Field(None, max_length=10)
    is_active: bool | None = None
    is_verified: bool | None = None


class ProductStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"is_active": False}, {"is_featured": True}]}}

    is_active: bool | None = None
    is_featured: bool | None = None


class BulkUpdateRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_ids": ["6f1c2b7e-0d4a-4e55-9a0e-3b1f2c4d5e6f", "0b8e5d3c-7a21-4c0f-8f6e-2d9a1b3c4e5f"],
                    "updates": {"is_featured": True, "price": 19.99},
                }
            ]
        }
    }

    product_ids: list[str] = Field(default_factory=list)
    updates: dict[str, Any] = Field(default_factory=dict)
