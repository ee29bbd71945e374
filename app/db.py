from motor.motor_asyncio import AsyncIOMotorClient
from app.config import settings

class Database:
    def __init__(self, uri: str = None, name: str = None):
        self.uri = uri or settings.MONGODB_URI
        self.name = name or settings.MONGODB_NAME
        self.client = None
        self.db = None

    async def connect(self):
        if not self.client:
            self.client = AsyncIOMotorClient(self.uri, tz_aware=True)
            self.db = self.client.get_database(self.name)
        return self.db

    async def close(self):
        if self.client:
            self.client.close()
            self.client = None
            self.db = None

db = Database()
