"""Persisted collection layout: name, validator and index catalog per entity."""

from __future__ import annotations

from dataclasses import dataclass

from triagedb.schemas.indexes import (
    PATIENT_INDEXES,
    SYSTEM_METADATA_INDEXES,
    TRIAGE_ENTRY_INDEXES,
    IndexSpec,
)
from triagedb.schemas.triage import (
    PATIENT_SCHEMA,
    SYSTEM_METADATA_SCHEMA,
    TRIAGE_ENTRY_SCHEMA,
)

PATIENTS = "patients"
TRIAGE_ENTRIES = "triage_entries"
SYSTEM_METADATA = "system_metadata"


@dataclass(frozen=True)
class CollectionDefinition:
    name: str
    validator: dict
    indexes: tuple[IndexSpec, ...]


COLLECTIONS: tuple[CollectionDefinition, ...] = (
    CollectionDefinition(PATIENTS, PATIENT_SCHEMA, tuple(PATIENT_INDEXES)),
    CollectionDefinition(TRIAGE_ENTRIES, TRIAGE_ENTRY_SCHEMA, tuple(TRIAGE_ENTRY_INDEXES)),
    CollectionDefinition(SYSTEM_METADATA, SYSTEM_METADATA_SCHEMA, tuple(SYSTEM_METADATA_INDEXES)),
)

INDEX_CATALOG: dict[str, tuple[IndexSpec, ...]] = {c.name: c.indexes for c in COLLECTIONS}

VALIDATORS: dict[str, dict] = {c.name: c.validator for c in COLLECTIONS}
