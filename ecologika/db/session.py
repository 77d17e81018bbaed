import logging

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from ecologika.core.config import settings

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(settings.MONGO_URL, maxPoolSize=10, minPoolSize=0)
db = client[settings.DB_NAME]

def get_db():
    return db

async def ensure_indexes(database=None):
    database = database if database is not None else db
    try:
        await database.profiles.create_index("id", unique=True)
        await database.profiles.create_index("email", unique=True)
        await database.products.create_index("id", unique=True)
        await database.products.create_index(
            [("is_active", ASCENDING), ("approval_status", ASCENDING), ("created_at", DESCENDING)]
        )
        await database.products.create_index("seller_id")
        await database.product_images.create_index([("product_id", ASCENDING), ("image_order", ASCENDING)])
        await database.purchases.create_index([("buyer_id", ASCENDING), ("purchase_date", DESCENDING)])
        await database.purchases.create_index([("seller_id", ASCENDING), ("purchase_date", DESCENDING)])
        await database.notifications.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
        await database.activity_logs.create_index([("created_at", DESCENDING)])
        # Expired revocations and reset tokens are dropped by Mongo itself
        await database.revoked_tokens.create_index("expires_at", expireAfterSeconds=0)
        await database.revoked_tokens.create_index("jti")
        await database.password_resets.create_index("expires_at", expireAfterSeconds=0)
        await database.password_resets.create_index("token", unique=True)
    except PyMongoError as e:
        logger.warning(f"Unable to ensure indexes: {e}")

def close_mongo_connection():
    client.close()
