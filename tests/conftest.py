"""Pytest configuration and fixtures."""

import copy
from datetime import datetime

import bcrypt
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.errors import ConflictError
from app.routes.users import get_user_service
from app.services.user_service import UserService
from app.utils.security import password_bytes
from main import app

# Lowest cost bcrypt accepts
TEST_BCRYPT_ROUNDS = 4


class InMemoryUserRepository:
    """UserRepository stand-in holding documents in a dict, with the unique email index."""

    def __init__(self):
        self.documents = {}

    def _public(self, document):
        if document is None:
            return None
        public = copy.deepcopy(document)
        public.pop("password_hash", None)
        return public

    def _find(self, user_id):
        if not ObjectId.is_valid(user_id):
            return None
        return self.documents.get(ObjectId(user_id))

    def _stored(self, fields):
        """Copy of fields with datetimes cut to milliseconds, as BSON keeps them"""
        stored = copy.deepcopy(fields)
        for key, value in stored.items():
            if isinstance(value, datetime):
                stored[key] = value.replace(microsecond=value.microsecond // 1000 * 1000)
        return stored

    def _email_taken(self, email, exclude=None):
        return any(
            doc["email"] == email and key != exclude
            for key, doc in self.documents.items()
        )

    async def ensure_indexes(self):
        pass

    async def list(self):
        return [self._public(doc) for doc in self.documents.values()]

    async def get(self, user_id):
        return self._public(self._find(user_id))

    async def find_by_email(self, email):
        for doc in self.documents.values():
            if doc["email"] == email:
                return self._public(doc)
        return None

    async def insert(self, document):
        if self._email_taken(document["email"]):
            raise ConflictError("Email already exists")
        document["_id"] = ObjectId()
        self.documents[document["_id"]] = self._stored(document)
        return document

    async def update(self, user_id, fields):
        stored = self._find(user_id)
        if stored is None:
            return None
        if "email" in fields and self._email_taken(fields["email"], exclude=stored["_id"]):
            raise ConflictError("Email already exists")
        stored.update(self._stored(fields))
        return self._public(stored)

    async def delete(self, user_id):
        stored = self._find(user_id)
        if stored is None:
            return False
        del self.documents[stored["_id"]]
        return True


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def service(repository):
    return UserService(repository, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def client(service):
    """Test client whose routes use the in-memory repository."""
    app.dependency_overrides[get_user_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def patient_payload():
    return {
        "name": "Test User",
        "email": "test@example.com",
        "password": "testpass123",
        "role": "PATIENT",
    }


@pytest.fixture
def password_matches():
    """Check a plain password against a stored bcrypt hash."""
    def check(password, hashed):
        return bcrypt.checkpw(password_bytes(password), hashed.encode())
    return check
