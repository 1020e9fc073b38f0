"""User registration: command and handler.

The command carries the password hash, never the password itself, since
processed commands are recorded by the domain.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import Role, User
from storefront.shared.errors import Conflict

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)
    phone: String(max_length=20)
    role: String(choices=Role, default=Role.USER.value)


@storefront.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.email_taken(command.email):
            raise Conflict("User already exists with this email")

        user = User.register(
            name=command.name,
            email=command.email,
            password_hash=command.password_hash,
            phone=command.phone,
            role=command.role,
        )
        repo.add(user)

        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)
