# app/utils/validators.py
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

def parse_object_id(object_id: str) -> Optional[ObjectId]:
    """Parse a MongoDB ObjectId, returning None for malformed ids"""
    try:
        return ObjectId(object_id)
    except (InvalidId, TypeError):
        return None
