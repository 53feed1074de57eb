# ABOUTME: httpx client for the Wikipedia Action API and Wikidata entity lookups
# ABOUTME: Fetches lead extracts, thumbnails, categories and P569 birth dates without raising

import re
from typing import Any

import httpx

from women_galaxy.extraction.analysis.text import current_year
from women_galaxy.extraction.base import ArticleNotFound, RawArticle
from women_galaxy.utils.logging import get_logger, log_api_call

WIKIPEDIA_API = "https://en.wikipedia.org/w/api.php"
WIKIDATA_API = "https://www.wikidata.org/w/api.php"

DEFAULT_USER_AGENT = "WomenGalaxyBot/1.0 (https://lucyearth.com)"

# Page id Wikipedia returns for titles that do not exist
MISSING_PAGE_ID = "-1"

# Wikidata property for "date of birth"
DATE_OF_BIRTH_PROPERTY = "P569"

SIGNED_DATE_PATTERN = re.compile(r"^([+-])(\d+)-")


def parse_linked_data_year(time_value: str | None) -> int | None:
    """Parse the year out of a Wikidata time string such as ``+1867-11-07T00:00:00Z``.

    Negative (BCE) years and years after the current one are rejected.
    """
    if not time_value:
        return None
    match = SIGNED_DATE_PATTERN.match(time_value)
    if not match:
        return None
    year = int(match.group(2))
    if match.group(1) == "-":
        year = -year
    if 1 <= year <= current_year():
        return year
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


class WikipediaClient:
    """Looks up Wikipedia lead extracts and Wikidata birth dates.

    Every failure is reported as absence (``ArticleNotFound`` or ``None``); callers
    never need to handle transport exceptions.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        api_url: str = WIKIPEDIA_API,
        linked_data_url: str = WIKIDATA_API,
        thumbnail_size: int = 500,
        category_limit: int = 20,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ):
        self.api_url = api_url
        self.linked_data_url = linked_data_url
        self.thumbnail_size = thumbnail_size
        self.category_limit = category_limit
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={"User-Agent": user_agent},
            timeout=timeout,
        )
        self.logger = get_logger(__name__)

    def _summary_params(self, title: str) -> dict[str, str]:
        return {
            "action": "query",
            "titles": title,
            "prop": "extracts|pageimages|categories|pageprops",
            "exintro": "true",
            "explaintext": "true",
            "pithumbsize": str(self.thumbnail_size),
            "cllimit": str(self.category_limit),
            "format": "json",
        }

    async def _get_json(self, url: str, params: dict[str, str]) -> dict[str, Any] | None:
        """GET a JSON document, returning None on any transport, status or decode failure."""
        try:
            response = await self.http_client.get(url, params=params)
        except httpx.HTTPError as e:
            self.logger.warning("Request failed", url=url, error=str(e), error_type=type(e).__name__)
            return None

        if not response.is_success:
            self.logger.warning("Unexpected status from API", url=url, status_code=response.status_code)
            return None

        try:
            data = response.json()
        except ValueError as e:
            self.logger.warning("Response was not valid JSON", url=url, error=str(e))
            return None

        return data if isinstance(data, dict) else None

    @log_api_call("wikipedia")
    async def fetch_article(self, title: str) -> RawArticle | ArticleNotFound:
        """Fetch the lead extract, thumbnail, categories and Wikidata id for a page.

        Args:
            title: Exact Wikipedia page title (underscores or spaces)

        Returns:
            The raw article, or ArticleNotFound with ``missing=True`` when the page
            does not exist and ``missing=False`` when the lookup failed
        """
        data = await self._get_json(self.api_url, self._summary_params(title))
        if data is None:
            return ArticleNotFound(title=title, missing=False, detail="Wikipedia API error")

        query = data.get("query")
        pages = query.get("pages") if isinstance(query, dict) else None
        if not isinstance(pages, dict) or not pages:
            self.logger.warning("Wikipedia response had no pages", title=title)
            return ArticleNotFound(title=title, missing=False, detail="No Wikipedia data found")

        page_id = next(iter(pages))
        if page_id == MISSING_PAGE_ID:
            self.logger.info("Wikipedia page not found", title=title)
            return ArticleNotFound(title=title, missing=True, detail="No Wikipedia page found")

        page = pages[page_id]
        if not isinstance(page, dict):
            self.logger.warning("Wikipedia page entry was not an object", title=title, page_id=page_id)
            return ArticleNotFound(title=title, missing=False, detail="No Wikipedia data found")
        if "missing" in page:
            self.logger.info("Wikipedia page not found", title=title)
            return ArticleNotFound(title=title, missing=True, detail="No Wikipedia page found")

        raw_categories = page.get("categories")
        categories = [
            category_title.replace("Category:", "", 1).lower()
            for category in (raw_categories if isinstance(raw_categories, list) else [])
            if (category_title := _as_str(_as_dict(category).get("title")))
        ]

        article = RawArticle(
            title=_as_str(page.get("title")) or title,
            extract_text=_as_str(page.get("extract")) or "",
            thumbnail_url=_as_str(_as_dict(page.get("thumbnail")).get("source")),
            category_labels=categories,
            linked_data_id=_as_str(_as_dict(page.get("pageprops")).get("wikibase_item")),
        )

        self.logger.info(
            "Fetched Wikipedia article",
            title=article.title,
            extract_length=len(article.extract_text),
            has_thumbnail=article.thumbnail_url is not None,
            category_count=len(categories),
            linked_data_id=article.linked_data_id,
        )
        return article

    @log_api_call("wikidata")
    async def fetch_birth_year_from_linked_data(self, entity_id: str) -> int | None:
        """Return the year from the entity's first date-of-birth claim, if valid."""
        params = {
            "action": "wbgetentities",
            "ids": entity_id,
            "props": "claims",
            "format": "json",
        }
        data = await self._get_json(self.linked_data_url, params)
        if data is None:
            return None

        entity = _as_dict(_as_dict(data.get("entities")).get(entity_id))
        claims = _as_dict(entity.get("claims")).get(DATE_OF_BIRTH_PROPERTY)
        if not isinstance(claims, list) or not claims:
            self.logger.debug("No date of birth claim", entity_id=entity_id)
            return None

        value = _as_dict(_as_dict(_as_dict(claims[0]).get("mainsnak")).get("datavalue")).get("value")
        time_value = _as_str(_as_dict(value).get("time"))
        year = parse_linked_data_year(time_value)

        self.logger.debug("Parsed linked-data birth date", entity_id=entity_id, time=time_value, birth_year=year)
        return year

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.http_client.aclose()
