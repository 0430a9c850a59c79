#!/usr/bin/env python3
# =============================================================================
# scripts/seed_admin.py - Default Admin Bootstrap
# =============================================================================
# Creates (or confirms) the default admin account in Supabase Auth and
# upserts its profile row with role "admin".
#
# Usage:
#   python scripts/seed_admin.py
#   python scripts/seed_admin.py --email admin@example.com --name "Lab Admin"
#
# Prerequisites:
#   - Tables created from supabase/schema.sql
#   - SUPABASE_URL and SUPABASE_SERVICE_KEY set (.env file)
#   - DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD set, or passed as flags
# =============================================================================

import argparse
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from core.services.bootstrap_service import BootstrapError, ensure_admin
from core.store.supabase_store import SupabaseRowStore
from lib.supabase_client import SupabaseClient, SupabaseClientError

logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
logger = logging.getLogger("seed_admin")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ensure the default admin account exists")
    parser.add_argument("--email", default=settings.DEFAULT_ADMIN_EMAIL)
    parser.add_argument("--password", default=settings.DEFAULT_ADMIN_PASSWORD)
    parser.add_argument("--name", default=settings.DEFAULT_ADMIN_NAME)
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    if not args.email or not args.password:
        logger.error("Set DEFAULT_ADMIN_EMAIL and DEFAULT_ADMIN_PASSWORD (or pass --email/--password)")
        return 1

    try:
        client = SupabaseClient.get_client()
    except SupabaseClientError as e:
        logger.error(str(e))
        return 1

    try:
        result = ensure_admin(
            SupabaseRowStore(client),
            client.auth.admin,
            email=args.email,
            password=args.password,
            full_name=args.name,
        )
    except BootstrapError as e:
        logger.error(str(e))
        return 1

    action = "Created" if result.created_user else "Found"
    logger.info(f"{action} admin {args.email} ({result.user_id}). You can now log in.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
