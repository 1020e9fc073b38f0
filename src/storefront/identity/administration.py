"""Back-office user management: commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import Role, User
from storefront.shared.errors import Conflict, Forbidden

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class UpdateUserAccount:
    actor_id: Identifier(required=True)
    user_id: Identifier(required=True)
    name: String(max_length=50)
    email: String(max_length=254)
    phone: String(max_length=20)
    role: String(choices=Role)
    is_active: Boolean()
    is_verified: Boolean()


@storefront.command(part_of="User")
class DeleteUser:
    actor_id: Identifier(required=True)
    user_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(UpdateUserAccount)
    def update_account(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if user.is_admin and str(user.id) != str(command.actor_id):
            raise Forbidden("Cannot update other admin users")
        if command.email and repo.email_taken(command.email, exclude_id=user.id):
            raise Conflict("Email is already in use")

        user.update_profile(name=command.name, phone=command.phone, email=command.email)
        if command.role is not None:
            user.role = command.role
        if command.is_active is not None:
            user.is_active = command.is_active
        if command.is_verified is not None:
            user.is_verified = command.is_verified
        repo.add(user)

        logger.info("User account updated by admin", user_id=str(user.id), actor_id=str(command.actor_id))
        return str(user.id)

    @handle(DeleteUser)
    def delete_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if user.is_admin:
            raise Forbidden("Cannot delete admin users")
        if str(user.id) == str(command.actor_id):
            raise Forbidden("Cannot delete your own account")

        repo._dao.delete(user)
        logger.info("User deleted", user_id=str(user.id), actor_id=str(command.actor_id))
