"""Credential checks, bearer-token issue and token resolution."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.security import create_access_token, decode_access_token, verify_password
from storefront.identity.user import User
from storefront.shared.errors import Forbidden, NotAuthenticated

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class RecordLogin:
    user_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class AuthenticationHandler:
    @handle(RecordLogin)
    def record_login(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.record_login()
        repo.add(user)


def authenticate(email: str, password: str, admin_only: bool = False) -> tuple[User, str]:
    """Check credentials and return the user with a freshly signed token.

    Unknown e-mail and wrong password are indistinguishable to the caller.
    """
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rejected", email=email)
        raise NotAuthenticated("Invalid credentials")
    if not user.is_active:
        raise NotAuthenticated("Account is deactivated")
    if admin_only and not user.is_admin:
        raise Forbidden("Access denied. Admin only.")

    current_domain.process(RecordLogin(user_id=str(user.id)), asynchronous=False)
    return user, create_access_token(user.id, user.role)


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.role)


def resolve_user(token: str) -> User:
    """Load the active user a bearer token was issued to."""
    payload = decode_access_token(token)
    try:
        user = current_domain.repository_for(User).get(payload["id"])
    except ObjectNotFoundError:
        raise NotAuthenticated("User not found") from None

    if not user.is_active:
        raise NotAuthenticated("Account is deactivated")
    return user
