"""Profile maintenance: commands, handler and the password-change service."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.security import hash_password, verify_password
from storefront.identity.user import User
from storefront.shared.errors import Conflict, NotAuthenticated


@storefront.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=50)
    email: String(max_length=254)
    phone: String(max_length=20)


@storefront.command(part_of="User")
class ChangePassword:
    user_id: Identifier(required=True)
    password_hash: String(required=True, max_length=255)


@storefront.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email and repo.email_taken(command.email, exclude_id=user.id):
            raise Conflict("Email is already in use")

        user.update_profile(name=command.name, phone=command.phone, email=command.email)
        repo.add(user)
        return str(user.id)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_password(command.password_hash)
        repo.add(user)


def change_password(user_id: str, current_password: str, new_password: str) -> None:
    user = current_domain.repository_for(User).get(user_id)
    if not verify_password(current_password, user.password_hash):
        raise NotAuthenticated("Current password is incorrect")

    current_domain.process(
        ChangePassword(user_id=user_id, password_hash=hash_password(new_password)),
        asynchronous=False,
    )
