# ABOUTME: SQLModel table for imported women profiles
# ABOUTME: Name is unique; the importer only ever inserts rows

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlmodel import JSON, Column, Field, SQLModel


def utcnow() -> datetime:
    """Returns the current UTC timestamp."""

    return datetime.now(UTC)


class WomanProfile(SQLModel, table=True):
    """A notable woman's profile as shown in the galaxy view."""

    __tablename__ = "women_profiles"  # type: ignore[assignment]

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, description="Display name, unique and case-sensitive")
    intro: str | None = Field(default=None, description="First two sentences of the lead extract")
    accomplishments: str | None = Field(default=None, description="Sentences three to five of the lead extract")
    image_url: str | None = Field(default=None, description="Public URL of the stored profile photo")
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    birth_year: int | None = Field(default=None, index=True)
    created_by: str | None = Field(default=None, description="Import channel, e.g. manual-import or web-import")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last modification timestamp")
