import asyncio
import sys
from typing import Dict
from app.config import settings
from app.db import Database
from app.models.user import UserRole
from app.repositories.users import UserRepository
from app.services.user_service import validate_email, validate_name, validate_password
from app.utils.security import hash_password
from app.utils.timestamps import utc_now
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

class AdminSeeder:
    """
    Creates the initial ADMIN user from ADMIN_NAME, ADMIN_EMAIL and
    ADMIN_PASSWORD. Self-registration only accepts patients, so this is the
    way privileged accounts enter the system.
    """

    def __init__(self, repository: UserRepository, config=settings):
        self.repository = repository
        self.config = config

    def _admin_document(self) -> Dict:
        now = utc_now()
        return {
            "name": self.config.ADMIN_NAME,
            "email": self.config.ADMIN_EMAIL,
            "password_hash": hash_password(self.config.ADMIN_PASSWORD, self.config.BCRYPT_ROUNDS),
            "role": UserRole.ADMIN.value,
            "created_at": now,
            "updated_at": now
        }

    async def seed_admin(self) -> bool:
        """Returns True if the admin was created, False if it already existed"""
        if not (self.config.ADMIN_NAME and self.config.ADMIN_EMAIL and self.config.ADMIN_PASSWORD):
            raise ValueError("Missing ADMIN_NAME, ADMIN_EMAIL or ADMIN_PASSWORD")

        validate_name(self.config.ADMIN_NAME)
        validate_email(self.config.ADMIN_EMAIL)
        validate_password(self.config.ADMIN_PASSWORD)

        if await self.repository.find_by_email(self.config.ADMIN_EMAIL):
            logger.info(f"Admin {self.config.ADMIN_EMAIL} already exists, skipping")
            return False

        await self.repository.insert(self._admin_document())
        logger.info(f"Admin user created: {self.config.ADMIN_EMAIL}")
        return True

async def main():
    database = Database()
    try:
        repository = UserRepository((await database.connect()).users)
        await repository.ensure_indexes()
        await AdminSeeder(repository).seed_admin()
    except Exception as e:
        logger.error(f"Error seeding admin: {str(e)}")
        sys.exit(1)
    finally:
        await database.close()

if __name__ == "__main__":
    asyncio.run(main())
