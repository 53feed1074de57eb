# ABOUTME: Request and outcome models for profile imports
# ABOUTME: One ImportOutcome per requested name, aggregated into a BatchResult

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from women_galaxy.extraction.analysis import ExtractedProfile

FailureKind = Literal["not_found", "upstream", "store", "unexpected"]


class ImportStatus(StrEnum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class ImportRequest(BaseModel):
    """A name to import, optionally with the exact Wikipedia page title."""

    name: str = Field(min_length=1)
    wiki_title: str | None = None
    # Curated seed-list extras
    category: str | None = None
    base_tags: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_title(self) -> str:
        return self.wiki_title or self.name.replace(" ", "_")

    @classmethod
    def parse(cls, entry: str) -> ImportRequest:
        """Parse a ``Name`` or ``Name:Exact_Wiki_Title`` command-line entry."""
        name, _, title = entry.partition(":")
        return cls(name=name.strip(), wiki_title=title.strip() or None)


class ImportOutcome(BaseModel):
    """Result of importing one name."""

    name: str
    status: ImportStatus
    reason: str | None = None
    failure_kind: FailureKind | None = None
    extracted: ExtractedProfile | None = None
    image_url: str | None = None
    profile_id: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == ImportStatus.SUCCESS


class BatchResult(BaseModel):
    """Per-name outcomes of a batch import with tallies."""

    outcomes: list[ImportOutcome] = Field(default_factory=list)

    def _count(self, status: ImportStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def succeeded(self) -> int:
        return self._count(ImportStatus.SUCCESS)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def skipped(self) -> int:
        return self._count(ImportStatus.SKIPPED)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return self._count(ImportStatus.FAILED)

    @property
    def total(self) -> int:
        return len(self.outcomes)
