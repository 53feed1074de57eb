# ABOUTME: Wikipedia and Wikidata API access
# ABOUTME: Exposes the WikipediaClient used by the import service

from .client import WikipediaClient, parse_linked_data_year

__all__ = ["WikipediaClient", "parse_linked_data_year"]
