"""HerTrade database management CLI.

Provides commands to create and drop the marketplace schema, and to seed a
small demo marketplace. Reuses the setup_db/drop_db utilities of the domain.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Register demo profiles and products
"""

import argparse
import sys

DEMO_PROFILES = [
    {"user_id": "demo-admin", "name": "HerTrade Admin", "role": "admin"},
    {"user_id": "demo-client", "name": "Selam Bekele", "role": "client", "phone": "+251900000001"},
    {
        "user_id": "demo-supplier-sms",
        "name": "Tigist Alemu",
        "role": "supplier",
        "phone": "+251911234567",
        "has_smartphone": False,
        "bio": "Hand-woven baskets from Bahir Dar",
    },
    {
        "user_id": "demo-supplier-app",
        "name": "Hana Girma",
        "role": "supplier",
        "phone": "+251922345678",
        "bio": "Spices and coffee",
    },
]

DEMO_PRODUCTS = {
    "demo-supplier-sms": [
        {"name": "Mesob basket", "price": 100.0, "stock": 5, "category": "crafts"},
        {"name": "Injera tray", "price": 50.0, "stock": 10, "category": "crafts"},
    ],
    "demo-supplier-app": [
        {"name": "Berbere (500g)", "price": 80.0, "stock": 20, "category": "food"},
    ],
}


def setup_database():
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Creating marketplace database schema...")
    setup_db(marketplace)
    print("Done.")


def drop_database():
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Dropping marketplace database schema...")
    drop_db(marketplace)
    print("Done.")


def seed():
    """Register demo profiles, verify the suppliers and list their products."""
    from marketplace.catalogue.listing import ListProduct
    from marketplace.domain import marketplace
    from marketplace.profile.registration import RegisterProfile
    from marketplace.profile.verification import VerifyProfile

    marketplace.init()
    with marketplace.domain_context():
        profile_ids = {}
        for data in DEMO_PROFILES:
            profile_ids[data["user_id"]] = marketplace.process(RegisterProfile(**data), asynchronous=False)
            print(f"  Registered {data['role']} {data['name']}")

        admin_id = profile_ids["demo-admin"]
        for user_id, products in DEMO_PRODUCTS.items():
            supplier_id = profile_ids[user_id]
            marketplace.process(VerifyProfile(profile_id=supplier_id, actor_id=admin_id), asynchronous=False)
            for product in products:
                marketplace.process(ListProduct(actor_id=supplier_id, **product), asynchronous=False)
                print(f"  Listed {product['name']}")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="HerTrade database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Register demo profiles and products")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
