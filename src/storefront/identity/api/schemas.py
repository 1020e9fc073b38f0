"""Pydantic request schemas for the account API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Dilnoza Karimova",
                    "email": "dilnoza@example.com",
                    "password": "s3cret-pass",
                    "phone": "+998901234567",
                }
            ]
        }
    }

    name: str = Field(..., min_length=2, max_length=50)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = Field(None, max_length=20)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=50)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=6, max_length=128)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., max_length=254)


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6, max_length=128)
