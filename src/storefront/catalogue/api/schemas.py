"""Pydantic request schemas for the catalog API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProductImageIn(BaseModel):
    url: str = Field(..., max_length=500)
    public_id: str | None = Field(None, max_length=255)


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wireless Earbuds Pro",
                    "description": "Noise cancelling earbuds with a 24 hour charging case.",
                    "price": 59.99,
                    "original_price": 79.99,
                    "category": "Electronics",
                    "brand": "Soundwave",
                    "stock": 40,
                    "is_featured": True,
                    "images": [{"url": "https://cdn.example.com/earbuds.jpg", "public_id": "earbuds-1"}],
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    original_price: float | None = Field(None, ge=0)
    category: str = Field(..., min_length=1, max_length=100)
    brand: str | None = Field(None, max_length=100)
    stock: int = Field(0, ge=0)
    is_featured: bool = False
    images: list[ProductImageIn] = Field(default_factory=list)


class UpdateProductRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"price": 49.99, "stock": 25}]}}

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    original_price: float | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    stock: int | None = Field(None, ge=0)


class AddProductImageRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"url": "https://cdn.example.com/earbuds-side.jpg", "public_id": "earbuds-2"}]
        }
    }

    url: str = Field(..., max_length=500)
    public_id: str | None = Field(None, max_length=255)


class AddReviewRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"rating": 5, "comment": "Great sound for the price."}]}}

    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=2000)
