# ABOUTME: Nationality gazetteer and tag generation from intro text and category labels
# ABOUTME: Static, ordered lookup tables; discovery order defines tag order

import re
from collections.abc import Iterable

MAX_TAGS = 8

# Scanned in order and the first entry found as a substring wins ("polish" before
# "french"). No word-boundary check, so "british" also matches inside
# "Great british Bake Off".
NATIONALITIES: tuple[str, ...] = (
    "american",
    "british",
    "canadian",
    "australian",
    "polish",
    "french",
    "german",
    "italian",
    "spanish",
    "mexican",
    "brazilian",
    "chinese",
    "japanese",
    "korean",
    "indian",
    "russian",
    "irish",
    "scottish",
    "dutch",
    "swedish",
    "norwegian",
    "danish",
    "finnish",
    "swiss",
    "austrian",
    "belgian",
    "portuguese",
    "greek",
    "turkish",
    "israeli",
    "egyptian",
    "south african",
    "nigerian",
    "kenyan",
    "ethiopian",
    "moroccan",
    "chilean",
    "argentinian",
    "colombian",
    "peruvian",
    "venezuelan",
    "cuban",
    "puerto rican",
    "dominican",
    "jamaican",
    "haitian",
    "filipino",
    "vietnamese",
    "thai",
    "indonesian",
    "malaysian",
    "singaporean",
    "taiwanese",
    "hong kong",
    "pakistani",
    "bangladeshi",
    "sri lankan",
    "iranian",
    "iraqi",
    "lebanese",
    "syrian",
    "jordanian",
    "saudi",
    "emirati",
    "qatari",
    "kuwaiti",
    "yemeni",
    "ukrainian",
    "czech",
    "hungarian",
    "romanian",
    "bulgarian",
    "serbian",
    "croatian",
    "slovenian",
    "slovakian",
    "belarusian",
    "latvian",
    "lithuanian",
    "estonian",
    "icelandic",
    "new zealand",
)


def _occupation(*words: str) -> re.Pattern[str]:
    return re.compile(rf"\b({'|'.join(words)})\b", re.IGNORECASE)


# Each pattern contributes at most one tag: its first capture, lower-cased.
OCCUPATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    _occupation("actress", "actor"),
    _occupation("singer", "vocalist"),
    _occupation("songwriter"),
    _occupation("musician"),
    _occupation("rapper"),
    _occupation("producer"),
    _occupation("director"),
    _occupation("writer", "author", "novelist", "poet"),
    _occupation("journalist"),
    _occupation("politician"),
    _occupation("entrepreneur"),
    _occupation("businesswoman", "businessman"),
    _occupation("ceo", "founder"),
    _occupation("scientist"),
    _occupation("physicist"),
    _occupation("chemist"),
    _occupation("biologist"),
    _occupation("mathematician"),
    _occupation("engineer"),
    _occupation("astronaut"),
    _occupation("athlete"),
    _occupation("olympian"),
    _occupation("tennis player"),
    _occupation("soccer player", "footballer"),
    _occupation("basketball player"),
    _occupation("gymnast"),
    _occupation("swimmer"),
    _occupation("skier"),
    _occupation("model"),
    _occupation("comedian"),
    _occupation("activist"),
    _occupation("philanthropist"),
    _occupation("designer"),
    _occupation("artist"),
    _occupation("painter"),
    _occupation("photographer"),
    _occupation("chef"),
    _occupation("lawyer", "attorney"),
    _occupation("doctor", "physician"),
    _occupation("nurse"),
    _occupation("professor"),
    _occupation("educator"),
    _occupation("influencer"),
    _occupation("youtuber"),
    _occupation("streamer"),
    _occupation("billionaire"),
    _occupation("investor"),
    _occupation("queen", "princess", "empress"),
    _occupation("first lady"),
    _occupation("prime minister"),
    _occupation("president"),
)

# Matched as substrings of lower-cased category labels.
CATEGORY_KEYWORDS: tuple[str, ...] = (
    "nobel",
    "pulitzer",
    "oscar",
    "emmy",
    "grammy",
    "tony",
    "olympic",
    "world champion",
    "billionaire",
    "activist",
    "feminist",
    "lgbtq",
    "entrepreneur",
    "philanthropist",
)


def extract_nationality(intro: str | None) -> str | None:
    """Return the first ``NATIONALITIES`` entry found in the intro, if any."""
    if not intro:
        return None
    lower_intro = intro.lower()
    for nationality in NATIONALITIES:
        if nationality in lower_intro:
            return nationality
    return None


def _unique_capped(tags: Iterable[str], limit: int = MAX_TAGS) -> list[str]:
    # dict preserves insertion order and drops repeats
    return list(dict.fromkeys(tag for tag in tags if tag))[:limit]


def extract_tags(intro: str | None, category_labels: Iterable[str], nationality: str | None = None) -> list[str]:
    """Build up to eight tags: occupations from the intro, then nationality, then category keywords."""
    found: list[str] = []

    if intro:
        for pattern in OCCUPATION_PATTERNS:
            match = pattern.search(intro)
            if match:
                found.append(match.group(1).lower())

        found.append(nationality or extract_nationality(intro) or "")

    lower_labels = [label.lower() for label in category_labels]
    for keyword in CATEGORY_KEYWORDS:
        if any(keyword in label for label in lower_labels):
            found.append(keyword)

    return _unique_capped(found)


def merge_tags(base_tags: Iterable[str], category: str | None, derived_tags: Iterable[str]) -> list[str]:
    """Combine curated tags and category ahead of derived tags, keeping the same cap."""
    curated = [tag.lower() for tag in base_tags]
    if category:
        curated.append(category.lower())
    return _unique_capped([*curated, *derived_tags])
