# ABOUTME: Sentence segmentation and birth-year extraction from plain-text lead extracts
# ABOUTME: Birth years come from an ordered chain of (regex, validity window) patterns

import re
from dataclasses import dataclass
from datetime import date

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")

INTRO_SENTENCES = 2
ACCOMPLISHMENT_SENTENCES = 3

DASHES = "–—-"


def current_year() -> int:
    return date.today().year


@dataclass(frozen=True)
class BirthYearPattern:
    """A birth-year regex and the inclusive window its first capture must fall in.

    ``max_year=None`` means "the current year", evaluated at match time.
    """

    name: str
    regex: re.Pattern[str]
    min_year: int = 1000
    max_year: int | None = None
    low_confidence: bool = False

    def upper_bound(self) -> int:
        return self.max_year if self.max_year is not None else current_year()

    def match(self, text: str) -> int | None:
        """Return the captured year if the pattern matches and the year is in the window."""
        found = self.regex.search(text)
        if not found:
            return None
        year = int(found.group(1))
        if self.min_year <= year <= self.upper_bound():
            return year
        return None


# Tried in order; the first pattern that matches with an in-window year wins.
BIRTH_YEAR_PATTERNS: tuple[BirthYearPattern, ...] = (
    # (January 15, 1867 – ...) or (7 November 1867 – ...)
    BirthYearPattern(
        "date_range",
        re.compile(rf"\((?:[A-Z][a-z]+ \d{{1,2}},? |\d{{1,2}} [A-Z][a-z]+ )?(\d{{4}})\s*[{DASHES}]"),
    ),
    # (born March 3, 1985) or (born 3 March 1985) or (born 1985)
    BirthYearPattern(
        "born_parenthetical",
        re.compile(
            r"\(born\s+(?:[A-Z][a-z]+\s+\d{1,2},?\s+|\d{1,2}\s+[A-Z][a-z]+\s+)?(\d{4})\)",
            re.IGNORECASE,
        ),
    ),
    # (b. 1990)
    BirthYearPattern("b_dot", re.compile(r"\(b\.\s*(\d{4})\)", re.IGNORECASE)),
    # born in 1950 / born 1950
    BirthYearPattern("born_in", re.compile(r"born\s+(?:in\s+)?(\d{4})", re.IGNORECASE)),
    # (1920–2001) or (1985–present)
    BirthYearPattern("year_range", re.compile(rf"\((\d{{4}})[{DASHES}](?:\d{{4}}|present)?\)")),
)

# First 4-digit number inside any parentheses. Loose: may pick a non-birth year
# when the extract has several bracketed numbers, so it is opt-in only.
LENIENT_BIRTH_YEAR_PATTERN = BirthYearPattern(
    "any_parenthesized_year",
    re.compile(r"\(.*?(\d{4}).*?\)"),
    min_year=1800,
    max_year=2010,
    low_confidence=True,
)


def split_sentences(text: str | None) -> list[str]:
    """Split text after ``.``, ``!`` or ``?`` followed by whitespace, keeping the punctuation."""
    if not text:
        return []
    return [sentence for sentence in SENTENCE_BOUNDARY.split(text.strip()) if sentence]


def split_intro_and_accomplishments(text: str | None) -> tuple[str | None, str | None]:
    """Return (first two sentences, sentences three to five), each None when absent."""
    sentences = split_sentences(text)
    intro = " ".join(sentences[:INTRO_SENTENCES]).strip() or None
    accomplishments = None
    if len(sentences) > INTRO_SENTENCES:
        end = INTRO_SENTENCES + ACCOMPLISHMENT_SENTENCES
        accomplishments = " ".join(sentences[INTRO_SENTENCES:end]).strip() or None
    return intro, accomplishments


def birth_year_patterns(allow_lenient: bool = False) -> tuple[BirthYearPattern, ...]:
    if allow_lenient:
        return BIRTH_YEAR_PATTERNS + (LENIENT_BIRTH_YEAR_PATTERN,)
    return BIRTH_YEAR_PATTERNS


def match_birth_year(text: str | None, allow_lenient: bool = False) -> tuple[int, BirthYearPattern] | None:
    """Run the pattern chain and return the winning year with the pattern that produced it."""
    if not text:
        return None
    for pattern in birth_year_patterns(allow_lenient):
        year = pattern.match(text)
        if year is not None:
            return year, pattern
    return None


def extract_birth_year(text: str | None, allow_lenient: bool = False) -> int | None:
    """Extract a birth year from free text.

    Handles patterns like:
    - "(January 15, 1867 – April 14, 1934)"
    - "(7 November 1867 – 4 July 1934)"
    - "(born March 3, 1985)"
    - "(b. 1990)"
    - "born in 1950"
    - "(1920–2001)"
    """
    matched = match_birth_year(text, allow_lenient)
    return matched[0] if matched else None
