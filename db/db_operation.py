from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("DB_OPERATION")

async def create_indexes(db: AsyncIOMotorDatabase):
    # uniqueness here is what stops two concurrent registrations with one email
    await db["users"].create_index([("email", ASCENDING)], unique=True)
    await db["auth"].create_index([("token", ASCENDING)], unique=True)
    await db["franchises"].create_index([("name", ASCENDING)], unique=True)
    await db["stores"].create_index("franchise_id")
    await db["orders"].create_index("diner_id")
    await db["orders"].create_index("store_id")
    logger.info("Indexes created")

class MongoConnection:
    def __init__(self):
        logger.info("Initializing MongoDB Connection")
        self.client = AsyncIOMotorClient(settings.MONGO_URI)
        self.db = self.client[settings.DB_NAME]

    async def connect(self):
        try:
            # Force an actual connection & authentication check
            await self.db.command("ping")
            logger.info("Successfully connected to MongoDB and authenticated.")
            logger.info(f"Using Database: {settings.DB_NAME}")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise e

    def close(self):
        self.client.close()
        logger.info("MongoDB connection closed")

# Create the instance
mongo_conn = MongoConnection()

async def get_db() -> AsyncIOMotorDatabase:
    """Dependency for getting the database handle."""
    return mongo_conn.db
