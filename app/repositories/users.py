from typing import List, Optional
import logging

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.errors import ConflictError
from app.utils.validators import parse_object_id

logger = logging.getLogger(__name__)

# Read paths never load the hash
PUBLIC_FIELDS = {"password_hash": 0}

class UserRepository:
    """
    Data access for the `users` collection.

    The unique index on `email` is the authoritative uniqueness guard; a
    DuplicateKeyError from any write surfaces as ConflictError.
    """

    def __init__(self, collection):
        self.collection = collection

    async def ensure_indexes(self):
        await self.collection.create_index("email", unique=True)

    async def list(self) -> List[dict]:
        return await self.collection.find({}, PUBLIC_FIELDS).to_list(length=None)

    async def get(self, user_id: str) -> Optional[dict]:
        object_id = parse_object_id(user_id)
        if object_id is None:
            return None
        return await self.collection.find_one({"_id": object_id}, PUBLIC_FIELDS)

    async def find_by_email(self, email: str) -> Optional[dict]:
        return await self.collection.find_one({"email": email}, PUBLIC_FIELDS)

    async def insert(self, document: dict) -> dict:
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning(f"Duplicate email rejected by index: {document.get('email')}")
            raise ConflictError("Email already exists")
        document["_id"] = result.inserted_id
        return document

    async def update(self, user_id: str, fields: dict) -> Optional[dict]:
        object_id = parse_object_id(user_id)
        if object_id is None:
            return None
        try:
            return await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": fields},
                projection=PUBLIC_FIELDS,
                return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            logger.warning(f"Duplicate email rejected by index: {fields.get('email')}")
            raise ConflictError("Email already exists")

    async def delete(self, user_id: str) -> bool:
        object_id = parse_object_id(user_id)
        if object_id is None:
            return False
        result = await self.collection.delete_one({"_id": object_id})
        return result.deleted_count > 0
