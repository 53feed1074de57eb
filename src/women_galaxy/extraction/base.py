# ABOUTME: Protocol and result models for fetching raw encyclopedia articles
# ABOUTME: Absence is a value (ArticleNotFound), never an exception

from typing import Protocol

from pydantic import BaseModel, Field


class RawArticle(BaseModel):
    """Raw lead extract and metadata for one encyclopedia page."""

    title: str
    extract_text: str = ""
    thumbnail_url: str | None = None
    category_labels: list[str] = Field(default_factory=list)
    linked_data_id: str | None = None

    @property
    def has_extract(self) -> bool:
        return bool(self.extract_text)


class ArticleNotFound(BaseModel):
    """Signals that no usable article could be fetched for a title.

    ``missing`` is True when the encyclopedia answered with its "no such page"
    sentinel; False when the lookup itself failed (transport, status, or a
    malformed body).
    """

    title: str
    missing: bool = True
    detail: str | None = None


class ArticleSource(Protocol):
    """Protocol for looking up articles and linked-data birth years."""

    async def fetch_article(self, title: str) -> RawArticle | ArticleNotFound:
        """Fetch the lead extract, thumbnail, categories and entity id for a page title."""
        ...

    async def fetch_birth_year_from_linked_data(self, entity_id: str) -> int | None:
        """Return the date-of-birth year for a linked-data entity, if known and valid."""
        ...

    async def aclose(self) -> None: ...
