import os
import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Suppress verbose PyMongo driver logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'todo_api')
USERS_COLLECTION_NAME = 'users'
TODOS_COLLECTION_NAME = 'todos'


def create_mongodb_client(mongo_url: str | None = None) -> MongoClient | None:
    """Open a MongoDB client and verify it with a ping.

    Called once at application startup; the caller owns the returned
    client and closes it on shutdown.

    Returns:
        MongoDB client or None if not configured or unreachable
    """
    mongo_url = mongo_url or os.getenv('MONGO_URL')
    if not mongo_url:
        logger.error("[MONGODB] MONGO_URL not configured.")
        return None

    try:
        client = MongoClient(
            mongo_url,
            serverSelectionTimeoutMS=5000,  # 5s timeout for server selection
            connectTimeoutMS=5000,  # 5s timeout for initial connection
            socketTimeoutMS=30000,  # 30s timeout for operations
            maxPoolSize=10,
            minPoolSize=0,
            maxIdleTimeMS=30000,
            waitQueueTimeoutMS=10000,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')
        logger.info(f"[MONGODB] Connected successfully to {DATABASE_NAME}")
        return client
    except (ConnectionFailure, PyMongoError) as e:
        logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
        return None


def get_database(client: MongoClient, name: str = DATABASE_NAME) -> Database:
    return client[name]
