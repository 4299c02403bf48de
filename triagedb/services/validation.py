"""
Client-side evaluation of MongoDB ``$jsonSchema`` validators.

- Draft 7 handles required/properties/enum/items; ``bsonType`` is added as an
  extra keyword that understands BSON type aliases
- All errors are collected rather than failing on the first one
- Mirrors the server's moderate level for new documents: unknown fields pass
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import jsonschema
from bson import Int64, ObjectId
from jsonschema.exceptions import ValidationError

from triagedb.errors import SchemaValidationError

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def _is_int(value: Any, low: int, high: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high


BSON_TYPE_CHECKS = {
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, (list, tuple)),
    "string": lambda v: isinstance(v, str),
    "date": lambda v: isinstance(v, datetime),
    "double": lambda v: isinstance(v, float),
    "int": lambda v: _is_int(v, INT32_MIN, INT32_MAX) and not isinstance(v, Int64),
    "long": lambda v: isinstance(v, Int64) or _is_int(v, INT64_MIN, INT64_MAX),
    "bool": lambda v: isinstance(v, bool),
    "null": lambda v: v is None,
    "objectId": lambda v: isinstance(v, ObjectId),
}


def bson_type(validator, bson_types, instance, schema):
    allowed = [bson_types] if isinstance(bson_types, str) else list(bson_types)
    for name in allowed:
        check = BSON_TYPE_CHECKS.get(name)
        if check is None:
            yield ValidationError(f"Unsupported bsonType {name!r}")
            return
        if check(instance):
            return
    yield ValidationError(f"{instance!r} is not of bsonType {allowed}")


BsonSchemaValidator = jsonschema.validators.extend(
    jsonschema.Draft7Validator,
    validators={"bsonType": bson_type},
)


def validate_against_schema(data: dict[str, Any], schema: dict[str, Any]) -> list[str]:
    """
    Validate a document against a collection validator.
    Returns a list of error messages (empty list = valid).
    """
    json_schema = schema.get("$jsonSchema", schema)
    validator = BsonSchemaValidator(json_schema)
    messages = []
    for error in validator.iter_errors(data):
        path = ".".join(str(part) for part in error.absolute_path)
        messages.append(f"{path}: {error.message}" if path else error.message)
    return messages


def assert_valid(collection: str, data: dict[str, Any], schema: dict[str, Any]) -> None:
    errors = validate_against_schema(data, schema)
    if errors:
        raise SchemaValidationError(collection, errors)
