"""FastAPI endpoints for registration, sign-in and account maintenance."""

import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from storefront.identity.api.dependencies import TOKEN_COOKIE, admin_user, current_user
from storefront.identity.api.schemas import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
)
from storefront.identity.authentication import authenticate, issue_token
from storefront.identity.password_reset import request_password_reset, reset_password
from storefront.identity.profile import UpdateProfile, change_password
from storefront.identity.queries import find_user, user_view
from storefront.identity.registration import RegisterUser
from storefront.identity.security import hash_password
from storefront.identity.user import Role, User
from storefront.shared.http import ok

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User, token: str | None = None, status_code: int = 200) -> JSONResponse:
    token = token or issue_token(user)
    response = ok(status_code=status_code, token=token, user=user_view(user))
    response.set_cookie(TOKEN_COOKIE, token, httponly=True, samesite="lax")
    return response


def _register(body: RegisterRequest, role: str) -> User:
    user_id = current_domain.process(
        RegisterUser(
            name=body.name,
            email=body.email,
            password_hash=hash_password(body.password),
            phone=body.phone,
            role=role,
        ),
        asynchronous=False,
    )
    return find_user(user_id)


@auth_router.post("/register", status_code=201)
async def register(body: RegisterRequest):
    """Create a shopper account and sign it in."""
    return _token_response(_register(body, Role.USER.value), status_code=201)


@auth_router.post("/login")
async def login(body: LoginRequest):
    user, token = authenticate(body.email, body.password)
    return _token_response(user, token)


@auth_router.post("/admin/login")
async def admin_login(body: LoginRequest):
    user, token = authenticate(body.email, body.password, admin_only=True)
    return _token_response(user, token)


@auth_router.post("/admin/register", status_code=201)
async def admin_register(body: RegisterRequest, _: User = Depends(admin_user)):
    """Create another administrator. Only administrators may do this."""
    user = _register(body, Role.ADMIN.value)
    return ok(data=user_view(user), status_code=201)


@auth_router.post("/logout")
async def logout():
    response = ok(message="Logged out successfully")
    response.delete_cookie(TOKEN_COOKIE)
    return response


@auth_router.get("/me")
async def me(user: User = Depends(current_user)):
    return ok(data=user_view(user))


@auth_router.put("/update-profile")
async def update_profile(body: UpdateProfileRequest, user: User = Depends(current_user)):
    current_domain.process(
        UpdateProfile(user_id=str(user.id), name=body.name, email=body.email, phone=body.phone),
        asynchronous=False,
    )
    return ok(data=user_view(find_user(user.id)))


@auth_router.put("/change-password")
async def update_password(body: ChangePasswordRequest, user: User = Depends(current_user)):
    change_password(str(user.id), body.current_password, body.new_password)
    return _token_response(find_user(user.id))


@auth_router.post("/forgot-password")
async def forgot_password(body: ForgotPasswordRequest):
    """Issue a reset token. Outside production the token is echoed back for testing."""
    token = request_password_reset(body.email)
    if os.getenv("PROTEAN_ENV") == "production":
        return ok(message="Password reset token generated")
    return ok(data={"reset_token": token}, message="Password reset token generated")


@auth_router.put("/reset-password/{token}")
async def reset_password_with_token(token: str, body: ResetPasswordRequest):
    user_id = reset_password(token, body.password)
    return _token_response(find_user(user_id))
