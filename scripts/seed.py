#!/usr/bin/env python
"""
Seed the permission catalogue, default roles and bootstrap admin grant.
"""

import argparse
import asyncio
import sys


# Add src to path for imports
sys.path.insert(0, "src")

from rbac_api.config import get_settings
from rbac_api.core.database import Database
from rbac_api.seeding import seed_rbac


async def main(admin_email: str | None, create_tables: bool) -> None:
    """Run the seeding against the configured database."""
    settings = get_settings()
    database = Database.from_settings(settings)

    try:
        if create_tables:
            await database.create_all()
            print("Created missing tables")

        async with database.session() as session:
            summary = await seed_rbac(
                session,
                bootstrap_admin_email=admin_email or settings.bootstrap_admin_email,
            )
    finally:
        await database.dispose()

    for name in summary.permissions_created:
        print(f"Created permission: {name}")
    for name in summary.roles_created:
        print(f"Created role: {name}")
    if summary.admin_granted:
        print(f"Granted admin role to: {summary.admin_granted}")
    if not summary.changed:
        print("Seed data already present")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed RBAC bootstrap data")
    parser.add_argument(
        "--admin-email",
        "-a",
        default=None,
        help="Account to grant the admin role (defaults to BOOTSTRAP_ADMIN_EMAIL)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args()

    asyncio.run(main(args.admin_email, args.create_tables))
