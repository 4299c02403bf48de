"""
Sample data for local development and demos.

Patients are inserted first so triage entries can reference their generated
``_id``. Every document is checked against its collection validator before it
is sent to the server.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any

from bson import ObjectId
from pymongo.database import Database

from triagedb.errors import storage_errors
from triagedb.models.collections import PATIENTS, SYSTEM_METADATA, TRIAGE_ENTRIES, VALIDATORS
from triagedb.models.documents import build_default_meta
from triagedb.schemas.results import SeedResult
from triagedb.schemas.triage import PRIORITIES, STATUSES
from triagedb.services.audit import record_metadata
from triagedb.services.validation import assert_valid

logger = logging.getLogger(__name__)

SEED_USER = "seed"
SEED_INFO_KEY = "seed-info"

NURSES = ["nurse.alex", "nurse.beth", "nurse.cole"]
DOCTORS = ["dr.lee", "dr.patel", "dr.nguyen", None]

SAMPLE_PATIENTS: list[dict[str, Any]] = [
    {
        "firstName": "John",
        "lastName": "Doe",
        "age": 45,
        "sex": "M",
        "email": "john.doe@example.com",
        "mrn": "MRN-10001",
        "medicalHistory": {
            "allergies": ["Penicillin"],
            "conditions": ["Hypertension"],
            "medications": ["Lisinopril"],
            "notes": "Smoker, advised cessation.",
        },
    },
    {
        "firstName": "Jane",
        "lastName": "Smith",
        "age": 33,
        "sex": "F",
        "email": "jane.smith@example.com",
        "mrn": "MRN-10002",
        "medicalHistory": {
            "allergies": [],
            "conditions": ["Asthma"],
            "medications": ["Albuterol"],
            "notes": None,
        },
    },
    {
        "firstName": "Alex",
        "lastName": "Kim",
        "age": 27,
        "sex": "O",
        "email": "alex.kim@example.com",
        "mrn": "MRN-10003",
        "medicalHistory": {
            "allergies": ["Peanuts"],
            "conditions": [],
            "medications": [],
            "notes": "Carries EpiPen.",
        },
    },
]


def random_phone(rng: random.Random) -> str:
    return f"+1-{rng.randint(100, 999)}-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}"


def approximate_dob(age_years: int, now: datetime) -> datetime:
    try:
        return now.replace(year=now.year - age_years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return now.replace(year=now.year - age_years, day=28)


def sample_patients(rng: random.Random, now: datetime) -> list[dict[str, Any]]:
    """Build the sample patient documents (without ``_id``)."""
    patients = []
    for sample in SAMPLE_PATIENTS:
        # age is derived from dateOfBirth on read, only the birth date is stored
        patients.append(
            {
                "firstName": sample["firstName"],
                "lastName": sample["lastName"],
                "dateOfBirth": approximate_dob(sample["age"], now),
                "sex": sample["sex"],
                "contact": {"phone": random_phone(rng), "email": sample["email"]},
                "identifiers": [{"system": "MRN", "value": sample["mrn"]}],
                "medicalHistory": dict(sample["medicalHistory"]),
                "meta": build_default_meta(SEED_USER),
            }
        )
    return patients


def sample_triages(
    patient_ids: list[ObjectId], rng: random.Random, now: datetime
) -> list[dict[str, Any]]:
    """2-4 triage entries per patient, spread over the last 30 days."""
    triages = []
    for patient_id in patient_ids:
        for _ in range(rng.randint(2, 4)):
            triages.append(
                {
                    "patientId": patient_id,
                    "triageTime": now - timedelta(days=rng.randint(0, 29)),
                    "priority": rng.choice(PRIORITIES),
                    "status": rng.choice(STATUSES),
                    "nurse": rng.choice(NURSES),
                    "doctor": rng.choice(DOCTORS),
                    "vitals": {
                        "heartRate": rng.randint(60, 99),
                        "bloodPressure": f"{rng.randint(100, 139)}/{rng.randint(60, 89)}",
                        "respiratoryRate": rng.randint(12, 19),
                        "temperatureC": round(rng.uniform(36.0, 38.0), 1),
                        "oxygenSaturation": rng.randint(94, 99),
                    },
                    "notes": "Patient assessed and stabilized.",
                    "meta": build_default_meta(SEED_USER),
                }
            )
    return triages


def clear_collections(db: Database) -> None:
    # Documents only: validators and indexes stay in place.
    for name in (TRIAGE_ENTRIES, PATIENTS, SYSTEM_METADATA):
        with storage_errors(f"clear '{name}'"):
            deleted = db[name].delete_many({}).deleted_count
        logger.info("Cleared %d documents from %s", deleted, name)


def insert_documents(db: Database, name: str, documents: list[dict[str, Any]]) -> list[ObjectId]:
    for document in documents:
        assert_valid(name, document, VALIDATORS[name])
    with storage_errors(f"insert into '{name}'"):
        result = db[name].insert_many(documents)
    logger.info("Inserted %d documents into %s", len(result.inserted_ids), name)
    return list(result.inserted_ids)


def seed(
    db: Database,
    drop: bool = False,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> SeedResult:
    """Insert sample patients and triage entries, then record the counts."""
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)

    if drop:
        logger.info("Dropping existing data...")
        clear_collections(db)

    patient_ids = insert_documents(db, PATIENTS, sample_patients(rng, now))
    triage_ids = insert_documents(db, TRIAGE_ENTRIES, sample_triages(patient_ids, rng, now))

    record_metadata(
        db,
        key=SEED_INFO_KEY,
        value={"patients": len(patient_ids), "triages": len(triage_ids)},
        category="system",
        description="Seed data statistics",
        actor=SEED_USER,
    )

    return SeedResult(
        database=db.name,
        dropped=drop,
        patients=len(patient_ids),
        triage_entries=len(triage_ids),
    )
