"""Repository for the User aggregate."""

from storefront.domain import storefront
from storefront.identity.user import Role, User


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        users = self._dao.query.filter(email=email.strip().lower()).all().items
        return users[0] if users else None

    def find_by_reset_token(self, token_hash: str) -> User | None:
        users = self._dao.query.filter(reset_password_token=token_hash).all().items
        return users[0] if users else None

    def customers(self) -> list[User]:
        """Accounts with the shopper role, newest first."""
        users = self._dao.query.filter(role=Role.USER.value).limit(None).all().items
        return sorted(users, key=lambda user: user.created_at, reverse=True)

    def email_taken(self, email: str, exclude_id=None) -> bool:
        existing = self.find_by_email(email)
        return existing is not None and str(existing.id) != str(exclude_id)
