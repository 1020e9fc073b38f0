"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A shopper or administrator account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class ProfileUpdated:
    """A user's name, e-mail or phone changed."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    phone: String()


@storefront.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="User")
class PasswordResetRequested:
    """A single-use reset token was issued. The token itself is never published."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    expires_at: DateTime(required=True)

