import datetime
import logging
from typing import Optional

import certifi
from pymongo import MongoClient
from pymongo.errors import PyMongoError

import config

logger = logging.getLogger(__name__)

client = None
db = None


def init_db():
    global client, db
    options = {"serverSelectionTimeoutMS": 20000, "connectTimeoutMS": 20000}
    # Atlas (srv) connections use TLS; trust certifi's CA bundle there
    if config.MONGO_URI.startswith("mongodb+srv"):
        options["tlsCAFile"] = certifi.where()
    try:
        client = MongoClient(config.MONGO_URI, **options)
        db = client[config.DB_NAME]
        # Quick check
        client.admin.command('ping')
        logger.info("✅ Connected to MongoDB (%s)", config.DB_NAME)
    except Exception as e:
        logger.error("❌ MongoDB Connection Failed: %s", e)
        db = None


# --- PREGNANCY START DATE (the only persisted value) ---
def get_pregnancy_start(client_id: str) -> Optional[str]:
    """Stored LMP date as 'YYYY-MM-DD', or None when unset or the DB is down."""
    if db is None: init_db()
    if db is None:
        return None
    try:
        doc = db.preferences.find_one({"_id": client_id})
    except PyMongoError as e:
        logger.error("Read %s failed: %s", config.LMP_KEY, e)
        return None
    if doc and doc.get(config.LMP_KEY):
        return doc[config.LMP_KEY]
    return None


def save_pregnancy_start(client_id: str, lmp: str) -> bool:
    if db is None: init_db()
    if db is None:
        return False
    try:
        db.preferences.update_one(
            {"_id": client_id},
            {"$set": {config.LMP_KEY: lmp, "updated_at": str(datetime.date.today())}},
            upsert=True,
        )
        return True
    except PyMongoError as e:
        logger.error("Write %s failed: %s", config.LMP_KEY, e)
        return False
