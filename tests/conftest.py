"""
In-memory stand-in for the slice of the pymongo API the bootstrap code uses.

Only what reconcile/seed touch is modelled: collection creation and collMod,
index bookkeeping (including name/key conflicts and unique enforcement), and
simple equality-filter reads and writes.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest
from bson import ObjectId
from pymongo.errors import CollectionInvalid, DuplicateKeyError, OperationFailure
from pymongo.results import DeleteResult, InsertManyResult, InsertOneResult

MISSING = object()


def get_path(document: dict, path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return MISSING
        current = current[part]
    return current


def set_path(document: dict, path: str, value: Any) -> None:
    parts = path.split(".")
    current = document
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    current[parts[-1]] = value


def matches(document: dict, query: dict) -> bool:
    return all(get_path(document, field) == value for field, value in query.items())


class FakeCollection:
    def __init__(self, database: "FakeDatabase", name: str):
        self.database = database
        self.name = name
        self.documents: list[dict] = []
        self.indexes: dict[str, dict] = {"_id_": {"key": [("_id", 1)], "v": 2}}

    # -- indexes -----------------------------------------------------------
    def index_information(self) -> dict[str, dict]:
        if self.name not in self.database.materialized:
            return {}
        return copy.deepcopy(self.indexes)

    def create_indexes(self, models) -> list[str]:
        self.database.materialize(self.name)
        names = []
        for model in models:
            document = model.document
            keys = list(document["key"].items())
            info: dict[str, Any] = {"v": 2}
            if any(direction == "text" for _, direction in keys):
                info["key"] = [("_fts", "text"), ("_ftsx", 1)]
                info["weights"] = {field: 1 for field, direction in keys if direction == "text"}
            else:
                info["key"] = keys
            if document.get("unique"):
                info["unique"] = True
            name = document["name"]
            existing = self.indexes.get(name)
            if existing is not None and existing != info:
                raise OperationFailure(f"Index with name: {name} already exists", code=86)
            for other_name, other in self.indexes.items():
                if other_name != name and other["key"] == info["key"]:
                    raise OperationFailure(
                        f"Index already exists with a different name: {other_name}", code=85
                    )
            self.indexes[name] = info
            names.append(name)
        return names

    def _check_unique(self, document: dict) -> None:
        for name, info in self.indexes.items():
            if not info.get("unique") or len(info["key"]) != 1:
                continue
            field = info["key"][0][0]
            value = get_path(document, field)
            if any(get_path(other, field) == value for other in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key error index: {name}", code=11000)

    # -- writes ------------------------------------------------------------
    def insert_one(self, document: dict) -> InsertOneResult:
        self.database.materialize(self.name)
        document.setdefault("_id", ObjectId())
        self._check_unique(document)
        self.documents.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], True)

    def insert_many(self, documents: list[dict]) -> InsertManyResult:
        ids = [self.insert_one(document).inserted_id for document in documents]
        return InsertManyResult(ids, True)

    def delete_many(self, query: dict) -> DeleteResult:
        keep = [d for d in self.documents if not matches(d, query)]
        deleted = len(self.documents) - len(keep)
        self.documents = keep
        return DeleteResult({"n": deleted}, True)

    def update_one(self, query: dict, update: dict, upsert: bool = False) -> None:
        self.database.materialize(self.name)
        target = next((d for d in self.documents if matches(d, query)), None)
        inserting = target is None
        if inserting:
            if not upsert:
                return
            target = {"_id": ObjectId(), **copy.deepcopy(query)}
            for path, value in update.get("$setOnInsert", {}).items():
                set_path(target, path, value)
        for path, value in update.get("$set", {}).items():
            set_path(target, path, value)
        for path, amount in update.get("$inc", {}).items():
            current = get_path(target, path)
            set_path(target, path, amount if current is MISSING else current + amount)
        if inserting:
            self._check_unique(target)
            self.documents.append(target)

    # -- reads -------------------------------------------------------------
    def find(self, query: dict | None = None) -> list[dict]:
        return [copy.deepcopy(d) for d in self.documents if matches(d, query or {})]

    def find_one(self, query: dict | None = None) -> dict | None:
        found = self.find(query)
        return found[0] if found else None

    def count_documents(self, query: dict) -> int:
        return len(self.find(query))


class FakeDatabase:
    def __init__(self, name: str = "triage_test"):
        self.name = name
        self.collections: dict[str, FakeCollection] = {}
        self.materialized: set[str] = set()
        self.options: dict[str, dict] = {}
        self.commands: list[tuple] = []

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    def materialize(self, name: str) -> None:
        self.materialized.add(name)
        self.options.setdefault(name, {})

    def list_collection_names(self) -> list[str]:
        return sorted(self.materialized)

    def create_collection(self, name: str, **options) -> FakeCollection:
        if name in self.materialized:
            raise CollectionInvalid(f"collection {name} already exists")
        self.materialize(name)
        self.options[name] = dict(options)
        self.commands.append(("create", name))
        return self[name]

    def command(self, command: str, value: str, **kwargs) -> dict:
        self.commands.append((command, value))
        if command == "collMod":
            if value not in self.materialized:
                raise OperationFailure("ns does not exist", code=26)
            self.options[value].update(kwargs)
            return {"ok": 1.0}
        raise NotImplementedError(command)


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()
