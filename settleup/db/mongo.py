import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from settleup.core.config import settings

logger = logging.getLogger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create the indexes the balance queries rely on."""
    # Group membership lookups
    await mongodb.db["groups"].create_index("member_ids")

    # Expense indexes
    await mongodb.db["expenses"].create_index([("group_id", 1), ("expense_date", -1)])
    await mongodb.db["expenses"].create_index("splits._id")
    await mongodb.db["expenses"].create_index([("splits.owed_by", 1), ("splits.is_settled", 1)])

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
