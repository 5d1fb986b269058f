"""
Create Admin Script
Creates an administrator from ADMIN_EMAIL / ADMIN_PASSWORD if it does not already exist.
Usage: python -m app.scripts.create_admin
"""

import asyncio
import logging
import os

from app.database import AsyncSessionLocal
from app.config import settings
from app.services import accounts

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def create_admin() -> bool:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD are required to create the admin account.")
        return False

    async with AsyncSessionLocal() as db:
        if await accounts.find_admin_by_email(db, email):
            logger.info("Admin account already exists.")
            return True

        try:
            admin = await accounts.create_admin(
                db,
                email=email,
                password=password,
                first_name=os.getenv("ADMIN_FIRST_NAME", "Site"),
                last_name=os.getenv("ADMIN_LAST_NAME", "Admin"),
                role=os.getenv("ADMIN_ROLE", "superadmin"),
                permissions=settings.default_admin_permissions_list,
            )
        except accounts.AccountError as e:
            logger.error(f"Could not create admin: {e}")
            return False

    logger.info(f"Created admin account {admin.email} (id={admin.id})")
    return True


if __name__ == "__main__":
    raise SystemExit(0 if asyncio.run(create_admin()) else 1)
