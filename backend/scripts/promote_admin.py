"""Grant or revoke the admin role for a user by email."""

import argparse
import asyncio
import logging

from storefront.database.mongodb import mongodb
from storefront.errors import NotFoundError
from storefront.models.user import UserRole
from storefront.services.user_service import user_service
from storefront.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set a storefront user's role")
    parser.add_argument("--email", required=True, help="Email of the user to update")
    parser.add_argument(
        "--demote",
        action="store_true",
        help="Set the role back to customer instead of admin",
    )
    return parser.parse_args(argv)


async def set_role(email: str, demote: bool = False) -> int:
    role = UserRole.CUSTOMER if demote else UserRole.ADMIN
    try:
        await mongodb.connect()
        user = await user_service.set_role_by_email(email, role)
        logger.info("User %s (%s) is now %s", user.email, user.id, user.role.value)
        return 0
    except NotFoundError:
        logger.error("No user with email %s", email)
        return 1
    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    args = parse_args()
    raise SystemExit(asyncio.run(set_role(args.email, args.demote)))
