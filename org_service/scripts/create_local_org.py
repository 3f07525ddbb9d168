"""
Script to create an organization with a founding admin for local testing.

Optionally prints a bearer token for that admin, signed with ORG_JWT_SECRET.
"""

import argparse
import asyncio

from org_service.core.auth import create_token
from org_service.core.config import get_settings
from org_service.core.database import get_session_context, init_db
from org_service.core.logging import configure_logging
from org_service.services.lifecycle import create_organization


async def create_local_org(name: str, admin_user_id: int, *, create_tables: bool = False) -> dict:
    if create_tables:
        await init_db()

    async with get_session_context() as session:
        org, membership = await create_organization(name, admin_user_id, session)

    return {"organization_id": org.id, "membership_id": membership.id}


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Create a local organization and its admin.")
    parser.add_argument("--name", required=True, help="Organization name")
    parser.add_argument("--admin-user-id", required=True, type=int, help="User id of the founding admin")
    parser.add_argument("--create-tables", action="store_true", help="Create tables first (dev only)")
    parser.add_argument("--token", action="store_true", help="Print a bearer token for the admin")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, service="org-service-create-org")

    created = asyncio.run(
        create_local_org(args.name, args.admin_user_id, create_tables=args.create_tables)
    )
    print(f"Created organization {created['organization_id']} (admin membership {created['membership_id']}).")

    if args.token:
        if not settings.jwt_secret:
            parser.error("--token needs ORG_JWT_SECRET to be set")
        print(create_token({settings.jwt_user_claim: args.admin_user_id}, settings))


if __name__ == "__main__":
    main()
