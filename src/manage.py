"""Storefront database management CLI.

Provides commands to create and drop the database schema and to load a small
demo catalog with an administrator account.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed --admin-email admin@example.com --admin-password secret123
"""

import argparse
import json
import sys

DEMO_PRODUCTS = [
    {
        "name": "Wireless Earbuds Pro",
        "description": "Noise cancelling earbuds with a 24 hour charging case.",
        "price": 59.99,
        "original_price": 79.99,
        "category": "Electronics",
        "brand": "Soundwave",
        "stock": 40,
        "is_featured": True,
    },
    {
        "name": "Cotton Crew T-Shirt",
        "description": "Soft combed cotton tee, regular fit.",
        "price": 14.5,
        "category": "Clothing",
        "brand": "Basics",
        "stock": 120,
    },
    {
        "name": "Ceramic Pour-Over Set",
        "description": "Dripper, carafe and two cups in glazed stoneware.",
        "price": 42.0,
        "category": "Home & Kitchen",
        "brand": "Kiln & Co",
        "stock": 8,
        "is_featured": True,
    },
    {
        "name": "Trail Running Shoes",
        "description": "Lightweight shoes with a grippy outsole for loose terrain.",
        "price": 89.0,
        "original_price": 110.0,
        "category": "Sports",
        "brand": "Ridgeline",
        "stock": 25,
    },
]


def _storefront():
    from storefront.domain import storefront

    print("Initializing storefront domain...")
    storefront.init()
    return storefront


def setup_database():
    """Create the database schema."""
    from storefront.utils.db import setup_db

    storefront = _storefront()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    """Drop the database schema."""
    from storefront.utils.db import drop_db

    storefront = _storefront()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def seed(admin_name, admin_email, admin_password):
    """Register an administrator and load the demo catalog."""
    from storefront.catalogue.creation import CreateProduct
    from storefront.identity.registration import RegisterUser
    from storefront.identity.security import hash_password
    from storefront.identity.user import Role

    storefront = _storefront()
    with storefront.domain_context():
        storefront.process(
            RegisterUser(
                name=admin_name,
                email=admin_email,
                password_hash=hash_password(admin_password),
                role=Role.ADMIN.value,
            ),
            asynchronous=False,
        )
        print(f"  admin {admin_email} registered.")

        for product in DEMO_PRODUCTS:
            storefront.process(CreateProduct(images=json.dumps([]), **product), asynchronous=False)
            print(f"  product {product['name']} created.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Load demo products and an administrator")
    seed_parser.add_argument("--admin-name", default="Store Admin")
    seed_parser.add_argument("--admin-email", required=True)
    seed_parser.add_argument("--admin-password", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(args.admin_name, args.admin_email, args.admin_password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
