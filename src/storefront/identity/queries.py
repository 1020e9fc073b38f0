"""User reads for the account and back-office endpoints."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.shared.errors import NotFound


def find_user(user_id) -> User:
    try:
        return current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        raise NotFound("User not found") from None


def search_customers(search: str | None = None) -> list[User]:
    """Shopper accounts, newest first, optionally matched on name or e-mail."""
    needle = (search or "").strip().lower()
    customers = current_domain.repository_for(User).customers()
    if not needle:
        return customers
    return [user for user in customers if needle in user.name.lower() or needle in user.email.lower()]


def user_view(user: User) -> dict:
    """Public shape of an account. Hashes and reset tokens never leave the domain."""
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "is_verified": user.is_verified,
        "is_active": user.is_active,
        "cart": [{"product_id": str(line.product_id), "quantity": line.quantity} for line in user.cart_items],
        "last_login_at": user.last_login_at,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
