"""Request-scoped caller resolution for protected routes."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.identity.authentication import resolve_user
from storefront.identity.user import User
from storefront.shared.errors import Forbidden, NotAuthenticated

TOKEN_COOKIE = "token"

bearer = HTTPBearer(auto_error=False)


async def current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> User:
    """The caller, from the ``Authorization: Bearer`` header or the token cookie."""
    token = credentials.credentials if credentials else request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise NotAuthenticated("Not authorized to access this route")
    return resolve_user(token)


async def admin_user(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise Forbidden("Access denied. Admin only.")
    return user
