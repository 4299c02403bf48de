"""System metadata writer – settings and audit entries keyed by a unique string."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pymongo.database import Database

from triagedb.errors import storage_errors
from triagedb.models.collections import SYSTEM_METADATA
from triagedb.models.documents import SOURCE

logger = logging.getLogger(__name__)


def record_metadata(
    db: Database,
    *,
    key: str,
    value: Any,
    category: str | None = None,
    description: str | None = None,
    actor: str = "system",
) -> None:
    """
    Upsert a system_metadata entry by key.

    Creation fields are written only on insert; ``meta.version`` is bumped on
    every write so a new entry starts at 1.
    """
    now = datetime.now(timezone.utc)
    update = {
        "$set": {
            "key": key,
            "value": value,
            "category": category,
            "description": description,
            "meta.updatedAt": now,
            "meta.updatedBy": actor,
        },
        "$setOnInsert": {
            "meta.createdAt": now,
            "meta.createdBy": actor,
            "meta.source": SOURCE,
        },
        "$inc": {"meta.version": 1},
    }
    with storage_errors(f"record metadata '{key}'"):
        db[SYSTEM_METADATA].update_one({"key": key}, update, upsert=True)
    logger.info("AUDIT: %s recorded %s/%s", actor, category or "-", key)
