import logging

from pymongo import DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import DB_NAME, MONGO_TIMEOUT_MS, MONGO_URI

logger = logging.getLogger(__name__)

client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=MONGO_TIMEOUT_MS)
db = client[DB_NAME]


def get_db() -> Database:
    return db


def ensure_indexes(database: Database) -> None:
    try:
        database.users.create_index("email", unique=True)
        database.posts.create_index([("date", DESCENDING)])
    except PyMongoError:
        logger.exception("Could not create indexes on %s", database.name)
    else:
        logger.info("Indexes ensured on %s", database.name)
