"""Wishlist Logistics database management CLI.

Creates and drops the relational schema behind the logistics domain. Only
relational providers (the ``production`` overlay) are touched; the default
memory provider needs no schema.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    from logistics.domain import logistics
    from logistics.utils.db import setup_db

    print("Initializing logistics domain...")
    logistics.init()
    touched = setup_db(logistics)
    if not touched:
        print("  No relational provider configured; nothing to create.")
    for name in touched:
        print(f"  {name} schema ready.")
    print("Done.")


def drop_databases():
    from logistics.domain import logistics
    from logistics.utils.db import drop_db

    print("Initializing logistics domain...")
    logistics.init()
    for name in drop_db(logistics):
        print(f"  {name} schema dropped.")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Wishlist Logistics database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
