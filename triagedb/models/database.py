from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from pymongo import MongoClient
from pymongo.database import Database

from triagedb.config import Settings, settings as default_settings
from triagedb.errors import storage_errors

logger = logging.getLogger(__name__)


def create_client(url: str, server_selection_timeout_ms: int) -> MongoClient:
    return MongoClient(
        url,
        maxPoolSize=10,
        minPoolSize=0,
        serverSelectionTimeoutMS=server_selection_timeout_ms,
    )


@contextmanager
def get_db(settings: Settings | None = None) -> Iterator[Database]:
    """
    Yield a connected database for one unit of work.

    Configuration is checked before the client is built, and the client is
    closed on every exit path.
    """
    settings = settings or default_settings
    url, db_name = settings.require_database()

    with storage_errors("connect to MongoDB"):
        client = create_client(url, settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS)
    try:
        with storage_errors("ping MongoDB"):
            client.admin.command("ping")
        logger.info("Connected to MongoDB database '%s'", db_name)
        yield client[db_name]
    finally:
        client.close()
