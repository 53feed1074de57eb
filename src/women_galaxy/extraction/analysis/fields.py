# ABOUTME: Derives structured profile fields from a raw lead extract and category labels
# ABOUTME: Combines segmentation, birth-year precedence, nationality and tag extraction

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, Field

from women_galaxy.extraction.analysis.tags import MAX_TAGS, extract_nationality, extract_tags
from women_galaxy.extraction.analysis.text import current_year, match_birth_year, split_intro_and_accomplishments

BirthYearSource = Literal["linked_data", "text", "text_low_confidence"]


class ExtractedProfile(BaseModel):
    """Structured fields derived from one article."""

    intro: str | None = None
    accomplishments: str | None = None
    birth_year: int | None = Field(default=None, ge=1)
    birth_year_source: BirthYearSource | None = None
    nationality: str | None = None
    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS)


def derive_fields(
    extract_text: str | None,
    category_labels: Iterable[str],
    *,
    linked_data_birth_year: int | None = None,
    allow_lenient_birth_year: bool = False,
) -> ExtractedProfile:
    """Turn an article's lead extract and categories into profile fields.

    Args:
        extract_text: Plain-text lead section
        category_labels: Category names without the ``Category:`` prefix
        linked_data_birth_year: Year from Wikidata; wins over text patterns when valid
        allow_lenient_birth_year: Also try the loose parenthesised-year fallback

    Returns:
        ExtractedProfile with every undeterminable field left as None
    """
    intro, accomplishments = split_intro_and_accomplishments(extract_text)

    birth_year: int | None = None
    source: BirthYearSource | None = None
    if linked_data_birth_year is not None and 1 <= linked_data_birth_year <= current_year():
        birth_year, source = linked_data_birth_year, "linked_data"
    else:
        matched = match_birth_year(extract_text, allow_lenient=allow_lenient_birth_year)
        if matched:
            birth_year = matched[0]
            source = "text_low_confidence" if matched[1].low_confidence else "text"

    nationality = extract_nationality(intro)

    return ExtractedProfile(
        intro=intro,
        accomplishments=accomplishments,
        birth_year=birth_year,
        birth_year_source=source,
        nationality=nationality,
        tags=extract_tags(intro, category_labels, nationality),
    )
