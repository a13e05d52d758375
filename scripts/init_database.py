#!/usr/bin/env python3
"""
Create the products table used as the Remote Store.

Uses DATABASE_URL environment variable. Does NOT drop existing tables.
Optionally seeds admin products from a `{"products": [...]}` JSON file.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

# Make sure amanice is on sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError

from amanice.database.models import Base
from amanice.database.sql_store import SqlProductStore, _normalize_connection_string
from amanice.errors import CatalogError


def seed(url: str, path: Path) -> int:
    with open(path, "r", encoding="utf-8") as f:
        products = json.load(f).get("products") or []
    store = SqlProductStore(connection_string=url)
    created = 0
    for payload in products:
        try:
            store.create_product(payload)
            created += 1
        except CatalogError as e:
            print(f"⚠️  Skipped {payload.get('type') or payload}: {e.message}", file=sys.stderr)
    return created


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the products table")
    parser.add_argument("--seed", type=Path, help="JSON file of products to insert")
    args = parser.parse_args()

    url = os.environ.get("DATABASE_URL")
    if not url:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 1

    url = _normalize_connection_string(url)

    try:
        engine = create_engine(url, pool_pre_ping=True)

        # Test connection using text()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")

        # Create all tables (only missing ones will be added)
        Base.metadata.create_all(bind=engine)
        tables = inspect(engine).get_table_names()
        print("✅ App tables now exist:", sorted(tables))

        if args.seed:
            created = seed(url, args.seed)
            print(f"✅ Seeded {created} products from {args.seed}")
        return 0

    except OperationalError as e:
        print(f"❌ Failed to connect to database: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
