"""Helpers for building and reading triage documents."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

SOURCE = "triagedb"


def build_default_meta(user: str = "system") -> dict[str, Any]:
    """Metadata fragment for a freshly created document."""
    now = datetime.now(timezone.utc)
    return {
        "createdAt": now,
        "updatedAt": now,
        "createdBy": user,
        "updatedBy": user,
        "version": 1,
        "source": SOURCE,
    }


def to_object_id(value: Any) -> ObjectId | None:
    """Convert a string id into an ObjectId; None if it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) would mint a fresh id
    if value is None:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def years_between(born: date, today: date) -> int:
    had_birthday = (today.month, today.day) >= (born.month, born.day)
    return today.year - born.year - (0 if had_birthday else 1)


def patient_age(patient: dict[str, Any], today: date | None = None) -> int | None:
    """
    Age of a patient document in whole years.

    dateOfBirth wins when present; the stored ``age`` is only a fallback for
    documents written without a birth date.
    """
    dob = patient.get("dateOfBirth")
    if dob is not None:
        if isinstance(dob, datetime):
            dob = dob.date()
        return years_between(dob, today or datetime.now(timezone.utc).date())
    return patient.get("age")
