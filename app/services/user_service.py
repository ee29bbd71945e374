"""
User management: validation, email uniqueness, password hashing and the
mapping from stored documents to the public user shape.
"""

from typing import List, Optional
import logging
import re

from app.errors import ConflictError, MethodNotAllowedError, ValidationError
from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserUpdate
from app.utils.security import hash_password
from app.utils.timestamps import utc_now
from app.utils.validators import parse_object_id

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 8

# Other roles are created through seed_admin.py
SELF_REGISTRATION_ROLES = {UserRole.PATIENT}


def validate_name(name: str):
    if not name or len(name) < MIN_NAME_LENGTH:
        raise ValidationError(f"Name must be at least {MIN_NAME_LENGTH} characters long")


def validate_email(email: str):
    if not EMAIL_PATTERN.fullmatch(email or ""):
        raise ValidationError("Invalid email format")


def validate_password(password: str):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def serialize_user(document: dict) -> User:
    """Project a stored user document to its public shape"""
    return User(
        id=str(document["_id"]),
        name=document["name"],
        email=document["email"],
        role=document["role"],
        created_at=document["created_at"],
        updated_at=document["updated_at"],
    )


class UserService:
    """Business logic for the user resource, over an injected repository."""

    def __init__(self, repository, bcrypt_rounds: int = 10):
        self.repository = repository
        self.bcrypt_rounds = bcrypt_rounds

    async def list_users(self) -> List[User]:
        documents = await self.repository.list()
        return [serialize_user(document) for document in documents]

    async def get_user(self, user_id: str) -> Optional[User]:
        document = await self.repository.get(user_id)
        if not document:
            return None
        return serialize_user(document)

    async def create_user(self, data: UserCreate) -> User:
        """
        Self-registration. Validates every field, rejects a taken email and
        any role other than PATIENT, then stores the user with a hashed
        password.

        Raises:
            ValidationError, ConflictError, MethodNotAllowedError
        """
        validate_name(data.name)
        validate_email(data.email)
        validate_password(data.password)

        if await self.repository.find_by_email(data.email):
            logger.warning(f"Registration rejected, email already exists: {data.email}")
            raise ConflictError("Email already exists")

        if data.role not in SELF_REGISTRATION_ROLES:
            logger.warning(f"Registration rejected for role {data.role.value}: {data.email}")
            raise MethodNotAllowedError(
                f"Self-registration is not allowed for role {data.role.value}"
            )

        now = utc_now()
        document = {
            "name": data.name,
            "email": data.email,
            "password_hash": hash_password(data.password, self.bcrypt_rounds),
            "role": data.role.value,
            "created_at": now,
            "updated_at": now
        }

        created = await self.repository.insert(document)
        logger.info(f"User created: {created['_id']} ({data.email})")
        return serialize_user(created)

    async def update_user(self, user_id: str, data: UserUpdate) -> Optional[User]:
        """
        Partial update. Only the fields present in `data` are validated and
        written. Returns None when no user has `user_id`.
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            validate_name(changes["name"])
        if "email" in changes:
            validate_email(changes["email"])
        if "password" in changes:
            validate_password(changes["password"])

        if "email" in changes:
            holder = await self.repository.find_by_email(changes["email"])
            if holder and holder["_id"] != parse_object_id(user_id):
                logger.warning(f"Update of {user_id} rejected, email already exists: {changes['email']}")
                raise ConflictError("Email already exists")

        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"), self.bcrypt_rounds)
        if "role" in changes:
            changes["role"] = changes["role"].value

        changes["updated_at"] = utc_now()

        updated = await self.repository.update(user_id, changes)
        if not updated:
            return None
        logger.info(f"User updated: {user_id} ({', '.join(sorted(changes))})")
        return serialize_user(updated)

    async def delete_user(self, user_id: str) -> bool:
        deleted = await self.repository.delete(user_id)
        if deleted:
            logger.info(f"User deleted: {user_id}")
        return deleted
