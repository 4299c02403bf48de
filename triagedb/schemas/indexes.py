"""
Index catalog – one entry per query path the triage datastore is optimized for.

Adding a query path means adding its index here. Names are stable: they are how
re-runs recognise an index that already exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel

Direction = Union[int, str]


@dataclass(frozen=True)
class IndexSpec:
    """Declared shape of a single MongoDB index."""

    name: str
    keys: tuple[tuple[str, Direction], ...]
    unique: bool = False

    @property
    def is_text(self) -> bool:
        return any(direction == TEXT for _, direction in self.keys)

    def to_model(self) -> IndexModel:
        options: dict[str, Any] = {"name": self.name}
        if self.unique:
            options["unique"] = True
        return IndexModel(list(self.keys), **options)

    def matches(self, info: dict[str, Any]) -> bool:
        """
        Compare against one entry of ``Collection.index_information()``.

        Text indexes are stored as ``_fts``/``_ftsx`` keys plus a weights map,
        so those are compared by their weighted field names instead.
        """
        if bool(info.get("unique", False)) != self.unique:
            return False
        if self.is_text:
            text_fields = {field for field, direction in self.keys if direction == TEXT}
            return set(info.get("weights", {})) == text_fields
        existing = [(field, _normalize(direction)) for field, direction in info.get("key", [])]
        return existing == [(field, _normalize(direction)) for field, direction in self.keys]


def _normalize(direction: Direction) -> Direction:
    # servers may report numeric directions as floats
    if isinstance(direction, (int, float)):
        return int(direction)
    return direction


PATIENT_INDEXES = [
    IndexSpec("name_compound", (("lastName", ASCENDING), ("firstName", ASCENDING))),
    IndexSpec("contact_phone", (("contact.phone", ASCENDING),)),
    IndexSpec(
        "identifier_system_value",
        (("identifiers.system", ASCENDING), ("identifiers.value", ASCENDING)),
    ),
    # Free-text search across names and medical history lists
    IndexSpec(
        "patient_text_search",
        (
            ("firstName", TEXT),
            ("lastName", TEXT),
            ("medicalHistory.allergies", TEXT),
            ("medicalHistory.conditions", TEXT),
            ("medicalHistory.medications", TEXT),
        ),
    ),
]

TRIAGE_ENTRY_INDEXES = [
    IndexSpec("by_patient_time", (("patientId", ASCENDING), ("triageTime", DESCENDING))),
    IndexSpec("by_priority_time", (("priority", ASCENDING), ("triageTime", DESCENDING))),
    IndexSpec("by_status_time", (("status", ASCENDING), ("triageTime", DESCENDING))),
]

SYSTEM_METADATA_INDEXES = [
    IndexSpec("key_unique", (("key", ASCENDING),), unique=True),
    IndexSpec("by_category", (("category", ASCENDING),)),
]
