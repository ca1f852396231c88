"""Sync result contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SyncResult(BaseModel):
    project_id: str
    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    restored: list[str] = Field(default_factory=list)
    archived: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    tags_added: int = 0
    tags_removed: int = 0
    systems_added: int = 0
    test_suites_revised: list[str] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(
            self.created
            or self.updated
            or self.restored
            or self.archived
            or self.tags_added
            or self.tags_removed
            or self.systems_added
            or self.test_suites_revised
        )
