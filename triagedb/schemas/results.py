"""Pydantic models summarising bootstrap runs for the CLI."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Schema reconciliation
# ---------------------------------------------------------------------------

class CollectionReport(BaseModel):
    name: str
    action: Literal["created", "updated"]
    indexes_created: list[str] = Field(default_factory=list)
    indexes_existing: list[str] = Field(default_factory=list)


class ReconcileResult(BaseModel):
    database: str
    collections: list[CollectionReport] = Field(default_factory=list)

    def lines(self) -> list[str]:
        out = []
        for report in self.collections:
            verb = "Created collection" if report.action == "created" else "Updated validator for"
            out.append(f"{verb}: {report.name}")
            out.append(
                f"  indexes ensured: {len(report.indexes_created) + len(report.indexes_existing)} "
                f"({len(report.indexes_created)} new)"
            )
        return out


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

class SeedResult(BaseModel):
    database: str
    dropped: bool = False
    patients: int
    triage_entries: int

    def lines(self) -> list[str]:
        out = ["Dropped existing data"] if self.dropped else []
        out.append(f"Seed complete: {self.patients} patients, {self.triage_entries} triage entries.")
        return out
