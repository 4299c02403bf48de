"""
Schema applier – converge live collections onto the declared validators and
index catalog.

Each run applies the full desired state; there is no version tracking or
migration diffing. The run is not transactional across collections, so a
crash part-way through is repaired by simply running it again.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pymongo.collection import Collection
from pymongo.database import Database

from triagedb.errors import ValidationConflictError, storage_errors
from triagedb.models.collections import COLLECTIONS, CollectionDefinition
from triagedb.schemas.indexes import IndexSpec
from triagedb.schemas.results import CollectionReport, ReconcileResult

logger = logging.getLogger(__name__)

# Reject writes that break declared fields, never documents that were
# already invalid or that only carry unknown fields.
VALIDATION_LEVEL = "moderate"
VALIDATION_ACTION = "error"


def ensure_collection(db: Database, definition: CollectionDefinition, existing: set[str]) -> str:
    """Create the collection with its validator, or replace the validator in place."""
    if definition.name not in existing:
        with storage_errors(f"create collection '{definition.name}'"):
            db.create_collection(
                definition.name,
                validator=definition.validator,
                validationLevel=VALIDATION_LEVEL,
                validationAction=VALIDATION_ACTION,
            )
        logger.info("Created collection: %s", definition.name)
        return "created"

    with storage_errors(f"update validator for '{definition.name}'"):
        db.command(
            "collMod",
            definition.name,
            validator=definition.validator,
            validationLevel=VALIDATION_LEVEL,
            validationAction=VALIDATION_ACTION,
        )
    logger.info("Updated validator for: %s", definition.name)
    return "updated"


def ensure_indexes(collection: Collection, specs: Iterable[IndexSpec]) -> tuple[list[str], list[str]]:
    """
    Create any missing indexes from ``specs``.

    Returns (created, already present) index names. An existing index with a
    declared name but a different key spec is a conflict that needs manual
    intervention, so it is reported rather than dropped.
    """
    with storage_errors(f"list indexes on '{collection.name}'"):
        current = collection.index_information()

    missing: list[IndexSpec] = []
    present: list[str] = []
    for spec in specs:
        info = current.get(spec.name)
        if info is None:
            missing.append(spec)
        elif spec.matches(info):
            present.append(spec.name)
        else:
            raise ValidationConflictError(
                f"Index '{spec.name}' on '{collection.name}' exists with a different "
                f"definition ({info.get('key')}, unique={bool(info.get('unique', False))})"
            )

    if missing:
        with storage_errors(f"create indexes on '{collection.name}'"):
            collection.create_indexes([spec.to_model() for spec in missing])
    created = [spec.name for spec in missing]
    logger.info(
        "Indexes ensured for %s: %d created, %d already present",
        collection.name,
        len(created),
        len(present),
    )
    return created, present


def reconcile(
    db: Database,
    collections: Iterable[CollectionDefinition] = COLLECTIONS,
) -> ReconcileResult:
    """Apply every validator, then every index, for the given collections."""
    definitions = list(collections)
    logger.info("Initializing database '%s'", db.name)

    with storage_errors("list collections"):
        existing = set(db.list_collection_names())

    actions = {d.name: ensure_collection(db, d, existing) for d in definitions}

    result = ReconcileResult(database=db.name)
    for definition in definitions:
        created, present = ensure_indexes(db[definition.name], definition.indexes)
        result.collections.append(
            CollectionReport(
                name=definition.name,
                action=actions[definition.name],
                indexes_created=created,
                indexes_existing=present,
            )
        )

    logger.info("Database initialization complete")
    return result
