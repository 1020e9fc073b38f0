"""Pydantic request schemas for the ordering API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class OrderLineIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class ShippingAddressIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=20)
    email: str = Field(..., min_length=3, max_length=254)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field("Uzbekistan", max_length=100)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "6f1c2b7e-0d4a-4e55-9a0e-3b1f2c4d5e6f", "quantity": 2}],
                    "shipping_address": {
                        "name": "Dilnoza Karimova",
                        "phone": "+998901234567",
                        "email": "dilnoza@example.com",
                        "street": "12 Amir Temur Avenue",
                        "city": "Tashkent",
                        "state": "Tashkent",
                        "postal_code": "100000",
                        "country": "Uzbekistan",
                    },
                    "payment_method": "Cash on Delivery",
                    "notes": "Call before delivery",
                }
            ]
        }
    }

    items: list[OrderLineIn] = Field(..., min_length=1)
    shipping_address: ShippingAddressIn
    payment_method: str = Field("Cash on Delivery", max_length=50)
    coupon_code: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=1000)


class PayOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "PAY-93A1C7",
                    "status": "COMPLETED",
                    "update_time": "2026-10-16T09:30:00Z",
                    "email_address": "dilnoza@example.com",
                }
            ]
        }
    }

    id: str | None = Field(None, max_length=255)
    status: str | None = Field(None, max_length=50)
    update_time: str | None = Field(None, max_length=50)
    email_address: str | None = Field(None, max_length=254)


class UpdateOrderStatusRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"status": "Shipped", "note": "Handed to courier", "tracking_number": "UZP123456789"}]
        }
    }

    status: str = Field(..., min_length=1, max_length=30)
    note: str | None = Field(None, max_length=500)
    tracking_number: str | None = Field(None, max_length=100)
    notes: str | None = Field(None, max_length=1000)
    refund_reason: str | None = Field(None, max_length=500)
    refund_amount: float | None = Field(None, ge=0)
