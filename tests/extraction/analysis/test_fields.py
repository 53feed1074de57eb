# ABOUTME: Tests for deriving profile fields from an article extract
# ABOUTME: Focuses on birth-year source precedence and empty-input handling

import pytest
from pydantic import ValidationError

from women_galaxy.extraction.analysis.fields import ExtractedProfile, derive_fields
from women_galaxy.extraction.analysis.text import current_year

EXTRACT = (
    "Ada Lovelace (December 10, 1815 – November 27, 1852) was an English mathematician and writer. "
    "She is chiefly known for her work on the Analytical Engine. "
    "She was the first to recognise that the machine had applications beyond calculation."
)


class TestDeriveFields:
    def test_text_birth_year(self):
        profile = derive_fields(EXTRACT, ["Women mathematicians"])

        assert profile.intro.startswith("Ada Lovelace")
        assert profile.accomplishments.startswith("She was the first to recognise")
        assert profile.birth_year == 1815
        assert profile.birth_year_source == "text"
        assert profile.tags == ["writer", "mathematician"]

    def test_marie_curie(self):
        text = (
            "Marie Curie (7 November 1867 – 4 July 1934) was a Polish and naturalized-French physicist "
            "and chemist who conducted pioneering research on radioactivity."
        )
        profile = derive_fields(text, [])

        assert profile.birth_year == 1867
        assert profile.nationality == "polish"
        assert "physicist" in profile.tags

    def test_no_date_information_still_yields_profile(self):
        profile = derive_fields("Jane Roe is a celebrated painter. Her work hangs in Paris.", [])

        assert profile.birth_year is None
        assert profile.birth_year_source is None
        assert profile.intro == "Jane Roe is a celebrated painter. Her work hangs in Paris."
        assert profile.tags == ["painter"]

    def test_linked_data_year_wins(self):
        profile = derive_fields(EXTRACT, [], linked_data_birth_year=1816)

        assert profile.birth_year == 1816
        assert profile.birth_year_source == "linked_data"

    @pytest.mark.parametrize("bad_year", [0, -50, current_year() + 1])
    def test_invalid_linked_data_year_falls_back_to_text(self, bad_year):
        profile = derive_fields(EXTRACT, [], linked_data_birth_year=bad_year)

        assert profile.birth_year == 1815
        assert profile.birth_year_source == "text"

    def test_low_confidence_source(self):
        text = "Jane Roe, a composer (works dated 1890). She wrote operas."
        assert derive_fields(text, []).birth_year is None

        profile = derive_fields(text, [], allow_lenient_birth_year=True)
        assert profile.birth_year == 1890
        assert profile.birth_year_source == "text_low_confidence"

    def test_nationality_comes_from_intro(self):
        profile = derive_fields("Chimamanda Ngozi Adichie is a Nigerian writer.", [])

        assert profile.nationality == "nigerian"
        assert profile.tags == ["writer", "nigerian"]

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_extract(self, text):
        profile = derive_fields(text, ["Nobel laureates"])

        assert profile.intro is None
        assert profile.accomplishments is None
        assert profile.birth_year is None
        assert profile.birth_year_source is None
        assert profile.nationality is None
        assert profile.tags == ["nobel"]


class TestExtractedProfile:
    def test_tag_limit_is_enforced(self):
        with pytest.raises(ValidationError):
            ExtractedProfile(tags=[str(i) for i in range(9)])

    def test_birth_year_must_be_positive(self):
        with pytest.raises(ValidationError):
            ExtractedProfile(birth_year=0)
