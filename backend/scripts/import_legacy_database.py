#!/usr/bin/env python3
"""
Legacy database import

Loads a single-document JSON database (users, products, transactions, bom,
attachments, shopify_orders) into an empty store. User ids, password
hashes and product ids are kept, so existing logins and SKU mappings keep
working.

Usage:
    cd backend
    python scripts/import_legacy_database.py path/to/database.json
    python scripts/import_legacy_database.py database.json --database-url postgresql://...
"""
import argparse
import json
import os
import sys

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def main():
    parser = argparse.ArgumentParser(description="Import a legacy JSON database into an empty store")
    parser.add_argument("source", help="Path to the legacy database.json")
    parser.add_argument("--database-url", help="Target database (defaults to DATABASE_URL)")
    args = parser.parse_args()

    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    # Imported late so --database-url reaches the settings
    from app.db.base import Base
    from app.db.session import SessionLocal, engine
    from app.exceptions import InventoryException
    import app.models  # noqa: F401
    from app.services import snapshot_service

    with open(args.source, encoding="utf-8") as f:
        document = json.load(f)

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        counts = snapshot_service.import_snapshot(db, document)
    except InventoryException as e:
        db.rollback()
        print(f"Import failed: {e.message}")
        sys.exit(1)
    finally:
        db.close()

    print("=" * 60)
    print("LEGACY IMPORT SUMMARY")
    print("=" * 60)
    for section, count in counts.items():
        print(f"  {section}: {count}")


if __name__ == "__main__":
    main()
