# ABOUTME: Rule-based field extraction from encyclopedia lead extracts
# ABOUTME: Segmentation, birth year, nationality and tags

from .fields import ExtractedProfile, derive_fields
from .tags import extract_nationality, extract_tags, merge_tags
from .text import extract_birth_year, split_intro_and_accomplishments, split_sentences

__all__ = [
    "ExtractedProfile",
    "derive_fields",
    "extract_birth_year",
    "extract_nationality",
    "extract_tags",
    "merge_tags",
    "split_intro_and_accomplishments",
    "split_sentences",
]
