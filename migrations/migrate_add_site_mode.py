#!/usr/bin/env python3
"""Migration script to create the site_mode table and import the current JSON flag file."""

import os
import sys

from dotenv import load_dotenv
from sqlalchemy import inspect

from src.shared.site_mode.store import FileSiteModeStore, SqlSiteModeStore

# Load environment variables
load_dotenv()

DATABASE_URL = os.environ.get("SITE_MODE_DATABASE_URL")
SITE_MODE_FILE = os.environ.get("SITE_MODE_FILE", os.path.join("data", "site-mode.json"))

if not DATABASE_URL:
    print("ERROR: SITE_MODE_DATABASE_URL environment variable is required.")
    sys.exit(1)


def run_migration():
    print("Running migration to add site_mode table...")
    store = SqlSiteModeStore(DATABASE_URL)
    print(f"Database: {store.engine.url.host}:{store.engine.url.port}/{store.engine.url.database}")

    with store.engine.connect() as connection:
        exists = inspect(connection).has_table("site_mode")

    if exists:
        print("✓ Table 'site_mode' already exists.")
    else:
        print("Creating site_mode table...")
        store.init_db()
        print("✓ Successfully created site_mode table.")

    if os.path.exists(SITE_MODE_FILE):
        current = FileSiteModeStore(SITE_MODE_FILE).read()
        record = store.set(current.mode, actor=current.updated_by or "admin")
        print(f"✓ Imported mode '{record.mode.value}' from {SITE_MODE_FILE}.")
    else:
        print(f"No flag file at {SITE_MODE_FILE}; the default mode applies until an admin sets one.")

    print("\n✓ Migration completed successfully!")


if __name__ == "__main__":
    run_migration()
