# ABOUTME: Data extraction from Wikipedia and Wikidata
# ABOUTME: Pipeline Stage 1: Raw extract retrieval and structured field derivation

"""
Extraction Layer: Get raw data from external sources and derive fields

This layer handles:
- Wikipedia summary queries and Wikidata birth-date lookups
- Sentence segmentation, birth year, nationality and tag extraction

Data Flow: Wikipedia/Wikidata → RawArticle → ExtractedProfile → core/ orchestration
"""

from .base import ArticleNotFound, ArticleSource, RawArticle

__all__ = ["ArticleNotFound", "ArticleSource", "RawArticle"]
