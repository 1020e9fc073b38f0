"""User aggregate root with the CartItem entity.

A user's shopping cart lives inside the User aggregate: cart lines have no
identity beyond (user, product) and change together with the account, so one
repository write persists both.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String

from storefront.domain import storefront
from storefront.identity.events import (
    PasswordChanged,
    PasswordResetRequested,
    ProfileUpdated,
    UserRegistered,
)
from storefront.shared.errors import InsufficientStock, NotFound

_EMAIL_PATTERN = re.compile(r"^[^@\s;,()<>\[\]\\\"]+@[^@\s;,()<>\[\]\\\"]+\.[^@\s;,()<>\[\]\\\".]+$")


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


def _utcnow():
    return datetime.now(UTC)


@storefront.entity(part_of="User")
class CartItem:
    """A product the user intends to buy, and how many."""

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    added_at: DateTime(default=_utcnow)


@storefront.aggregate
class User:
    """A shopper or back-office administrator.

    Passwords are only ever held as hashes. Reset tokens are stored hashed too,
    alongside their expiry, and cleared once used.
    """

    name: String(required=True, min_length=2, max_length=50)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    phone: String(max_length=20)
    role: String(choices=Role, default=Role.USER.value)
    is_verified: Boolean(default=False)
    is_active: Boolean(default=True)
    cart_items: HasMany(CartItem)
    reset_password_token: String(max_length=128)
    reset_password_expires: DateTime()
    last_login_at: DateTime()
    created_at: DateTime(default=_utcnow)
    updated_at: DateTime(default=_utcnow)

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Please provide a valid email"]})

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @classmethod
    def register(cls, name, email, password_hash, phone=None, role=Role.USER.value):
        now = _utcnow()
        user = cls(
            name=name,
            email=email.strip().lower(),
            password_hash=password_hash,
            phone=phone,
            role=role,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def record_login(self):
        self.last_login_at = _utcnow()

    def update_profile(self, name=None, phone=None, email=None):
        if name is not None:
            self.name = name
        if phone is not None:
            self.phone = phone
        if email is not None:
            self.email = email.strip().lower()
        self.updated_at = _utcnow()

        self.raise_(
            ProfileUpdated(
                user_id=self.id,
                name=self.name,
                email=self.email,
                phone=self.phone,
            )
        )

    def change_password(self, password_hash):
        self.password_hash = password_hash
        self.updated_at = _utcnow()
        self.raise_(PasswordChanged(user_id=self.id, changed_at=self.updated_at))

    def issue_reset_token(self, token_hash, expires_at):
        self.reset_password_token = token_hash
        self.reset_password_expires = expires_at
        self.raise_(PasswordResetRequested(user_id=self.id, email=self.email, expires_at=expires_at))

    def reset_token_is_valid(self, token_hash, now=None) -> bool:
        now = now or _utcnow()
        return (
            self.reset_password_token is not None
            and self.reset_password_token == token_hash
            and self.reset_password_expires is not None
            and self.reset_password_expires > now
        )

    def reset_password(self, password_hash):
        self.reset_password_token = None
        self.reset_password_expires = None
        self.change_password(password_hash)

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def cart_line(self, product_id):
        return next((item for item in self.cart_items if str(item.product_id) == str(product_id)), None)

    def add_to_cart(self, product_id, quantity, in_stock):
        """Add ``quantity`` of a product, merging into an existing line.

        ``in_stock`` is the product's current stock; the resulting line may not
        exceed it. On rejection the cart is left untouched.
        """
        line = self.cart_line(product_id)
        new_quantity = quantity + (line.quantity if line else 0)
        if new_quantity > in_stock:
            raise InsufficientStock(
                f"Only {in_stock} items available in stock",
                product_id=product_id,
                available=in_stock,
            )

        if line:
            line.quantity = new_quantity
        else:
            self.add_cart_items(CartItem(product_id=str(product_id), quantity=quantity, added_at=_utcnow()))
        self.updated_at = _utcnow()

    def set_cart_quantity(self, product_id, quantity, in_stock):
        line = self.cart_line(product_id)
        if line is None:
            raise NotFound("Item not found in cart")
        if quantity > in_stock:
            raise InsufficientStock(
                f"Only {in_stock} items available in stock",
                product_id=product_id,
                available=in_stock,
            )

        line.quantity = quantity
        self.updated_at = _utcnow()

    def remove_from_cart(self, product_id):
        line = self.cart_line(product_id)
        if line is not None:
            self.remove_cart_items(line)
            self.updated_at = _utcnow()

    def clear_cart(self):
        for line in list(self.cart_items):
            self.remove_cart_items(line)
        self.updated_at = _utcnow()
