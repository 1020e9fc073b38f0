"""Forgotten-password flow.

A raw token is handed to the caller once; only its SHA-256 digest is stored,
valid for ten minutes and cleared on use. Delivering the token (e-mail) is
outside this service.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.security import RESET_TOKEN_TTL, digest_reset_token, hash_password, new_reset_token
from storefront.identity.user import User
from storefront.shared.errors import NotFound

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class RequestPasswordReset:
    email: String(required=True, max_length=254)
    token_hash: String(required=True, max_length=128)
    expires_at: DateTime(required=True)


@storefront.command(part_of="User")
class ResetPassword:
    token_hash: String(required=True, max_length=128)
    password_hash: String(required=True, max_length=255)


@storefront.command_handler(part_of=User)
class PasswordResetHandler:
    @handle(RequestPasswordReset)
    def request_reset(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            raise NotFound("There is no user with that email")

        user.issue_reset_token(command.token_hash, command.expires_at)
        repo.add(user)
        logger.info("Password reset token issued", user_id=str(user.id))

    @handle(ResetPassword)
    def reset_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_reset_token(command.token_hash)
        if user is None or not user.reset_token_is_valid(command.token_hash):
            raise ValidationError({"token": ["Invalid or expired reset token"]})

        user.reset_password(command.password_hash)
        repo.add(user)
        return str(user.id)


def request_password_reset(email: str) -> str:
    """Issue a reset token for ``email`` and return the raw token."""
    token, token_hash = new_reset_token()
    current_domain.process(
        RequestPasswordReset(
            email=email,
            token_hash=token_hash,
            expires_at=datetime.now(UTC) + RESET_TOKEN_TTL,
        ),
        asynchronous=False,
    )
    return token


def reset_password(token: str, new_password: str) -> str:
    """Consume a reset token, returning the id of the user whose password changed."""
    return current_domain.process(
        ResetPassword(token_hash=digest_reset_token(token), password_hash=hash_password(new_password)),
        asynchronous=False,
    )
