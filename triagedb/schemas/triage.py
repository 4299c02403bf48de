"""
MongoDB ``$jsonSchema`` validators for the triage datastore.

- Nullability is a ``bsonType`` list containing ``"null"``, never field absence
- ``additionalProperties`` stays open everywhere so older writers keep working
  while the schema evolves
- The audit fragment (``METADATA_SCHEMA``) is embedded verbatim under ``meta``
  in every top-level collection
"""

SEX_VALUES = ["M", "F", "O", "U"]

PRIORITIES = ["Immediate", "Very Urgent", "Urgent", "Standard", "Non-Urgent"]

STATUSES = ["Open", "In Progress", "Completed", "Cancelled"]

# The validator does not order priorities; sort by this when severity matters.
PRIORITY_RANK: dict[str, int] = {name: rank for rank, name in enumerate(PRIORITIES, start=1)}

NULLABLE_STRING = {"bsonType": ["string", "null"]}
NULLABLE_NUMBER = {"bsonType": ["double", "int", "long", "null"]}
NULLABLE_STRING_LIST = {"bsonType": ["array", "null"], "items": {"bsonType": "string"}}


METADATA_SCHEMA: dict = {
    "bsonType": "object",
    "additionalProperties": True,
    "properties": {
        "createdAt": {"bsonType": "date", "description": "Creation timestamp"},
        "updatedAt": {"bsonType": "date", "description": "Last update timestamp"},
        "createdBy": {
            "bsonType": ["string", "null"],
            "description": "User ID/email of creator",
        },
        "updatedBy": {
            "bsonType": ["string", "null"],
            "description": "User ID/email of last updater",
        },
        "source": {
            "bsonType": ["string", "null"],
            "description": "Origin of record (system/app)",
        },
        "version": {
            "bsonType": ["int", "long", "null"],
            "description": "Application-level version for optimistic concurrency",
        },
        "tags": {
            "bsonType": ["array", "null"],
            "items": {"bsonType": "string"},
            "description": "Arbitrary tags",
        },
    },
}


PATIENT_SCHEMA: dict = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["firstName", "lastName", "sex", "contact", "meta"],
        "additionalProperties": True,
        "properties": {
            "_id": {},
            "firstName": {"bsonType": "string", "description": "Given name"},
            "lastName": {"bsonType": "string", "description": "Family name"},
            "dateOfBirth": {
                "bsonType": ["date", "null"],
                "description": "Date of birth (preferred over age)",
            },
            "age": {
                "bsonType": ["int", "long", "null"],
                "description": "Age in years; derived from dateOfBirth when present",
            },
            "sex": {
                "bsonType": "string",
                "enum": SEX_VALUES,
                "description": "Sex: M=Male, F=Female, O=Other, U=Unknown",
            },
            "contact": {
                "bsonType": "object",
                "required": ["phone"],
                "properties": {
                    "phone": {"bsonType": "string"},
                    "email": NULLABLE_STRING,
                    "address": {
                        "bsonType": ["object", "null"],
                        "properties": {
                            "line1": NULLABLE_STRING,
                            "line2": NULLABLE_STRING,
                            "city": NULLABLE_STRING,
                            "state": NULLABLE_STRING,
                            "postalCode": NULLABLE_STRING,
                            "country": NULLABLE_STRING,
                        },
                    },
                },
            },
            "identifiers": {
                "bsonType": ["array", "null"],
                "items": {
                    "bsonType": "object",
                    "required": ["system", "value"],
                    "properties": {
                        "system": {
                            "bsonType": "string",
                            "description": "Identifier namespace (e.g., MRN)",
                        },
                        "value": {"bsonType": "string", "description": "Identifier value"},
                        "assigner": NULLABLE_STRING,
                    },
                },
            },
            "medicalHistory": {
                "bsonType": ["object", "null"],
                "properties": {
                    "allergies": NULLABLE_STRING_LIST,
                    "conditions": NULLABLE_STRING_LIST,
                    "medications": NULLABLE_STRING_LIST,
                    "notes": NULLABLE_STRING,
                },
            },
            "emergencyContact": {
                "bsonType": ["object", "null"],
                "properties": {
                    "name": NULLABLE_STRING,
                    "relationship": NULLABLE_STRING,
                    "phone": NULLABLE_STRING,
                },
            },
            "meta": METADATA_SCHEMA,
        },
    }
}


TRIAGE_ENTRY_SCHEMA: dict = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["patientId", "triageTime", "priority", "status", "meta"],
        "additionalProperties": True,
        "properties": {
            "_id": {},
            # Back-reference only: the patient document is never embedded here.
            "patientId": {"bsonType": "objectId", "description": "Reference to patients._id"},
            "triageTime": {"bsonType": "date", "description": "When triage occurred"},
            "priority": {
                "bsonType": "string",
                "enum": PRIORITIES,
                "description": "Triage priority/category",
            },
            "status": {
                "bsonType": "string",
                "enum": STATUSES,
                "description": "Workflow status",
            },
            "nurse": {"bsonType": ["string", "null"], "description": "Nurse user ID/name"},
            "doctor": {"bsonType": ["string", "null"], "description": "Doctor user ID/name"},
            "vitals": {
                "bsonType": ["object", "null"],
                "properties": {
                    "heartRate": NULLABLE_NUMBER,
                    "bloodPressure": {
                        "bsonType": ["string", "null"],
                        "description": "Systolic/diastolic as text, e.g. 120/80",
                    },
                    "respiratoryRate": NULLABLE_NUMBER,
                    "temperatureC": NULLABLE_NUMBER,
                    "oxygenSaturation": NULLABLE_NUMBER,
                },
            },
            "notes": {"bsonType": ["string", "null"], "description": "Free-form notes"},
            "attachments": {
                "bsonType": ["array", "null"],
                "items": {
                    "bsonType": "object",
                    "properties": {
                        "type": NULLABLE_STRING,
                        "url": NULLABLE_STRING,
                        "description": NULLABLE_STRING,
                    },
                },
            },
            "meta": METADATA_SCHEMA,
        },
    }
}


SYSTEM_METADATA_SCHEMA: dict = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["key", "meta"],
        "additionalProperties": True,
        "properties": {
            "_id": {},
            "key": {"bsonType": "string", "description": "Unique key for metadata item"},
            "value": {},
            "category": {"bsonType": ["string", "null"], "description": "Grouping category"},
            "description": NULLABLE_STRING,
            "meta": METADATA_SCHEMA,
        },
    }
}
