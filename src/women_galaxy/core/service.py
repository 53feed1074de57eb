# ABOUTME: High-level import service orchestrating fetch, extraction, image upload and insert
# ABOUTME: Handles single and batch imports with dry runs, rate limiting and outcome tallies

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable

from women_galaxy.config import Config, get_config
from women_galaxy.core.models import BatchResult, ImportOutcome, ImportRequest, ImportStatus
from women_galaxy.errors import ProfileConflictError, ProfileStoreError
from women_galaxy.extraction.analysis import ExtractedProfile, derive_fields, merge_tags
from women_galaxy.extraction.base import ArticleNotFound, ArticleSource, RawArticle
from women_galaxy.extraction.wiki import WikipediaClient
from women_galaxy.persistence import DatabaseManager, ProfileStore, WomanProfile
from women_galaxy.services import ImagePipeline, LocalObjectStore, ObjectStore, SupabaseStorage
from women_galaxy.utils.logging import get_logger, with_import_context

ProgressCallback = Callable[[str, int, int], None]
OutcomeCallback = Callable[[ImportOutcome], None]


def not_found_reason(name: str) -> str:
    return f'No Wikipedia page found for "{name}". Try "{name}:Exact_Wikipedia_Title"'


def build_object_store(config: Config) -> ObjectStore:
    """Create the configured object store.

    Raises:
        ConfigurationError: If no storage backend is configured
    """
    config.require_storage()
    if config.local_storage_dir is not None:
        return LocalObjectStore(config.local_storage_dir, config.local_storage_base_url)
    return SupabaseStorage(config.supabase_url, config.supabase_service_role_key, timeout=config.request_timeout)


class ProfileImportService:
    """Imports women profiles from Wikipedia into the profile store.

    Requests are processed strictly one at a time; the only state shared across a
    batch is the list of outcomes.
    """

    def __init__(
        self,
        client: ArticleSource | None = None,
        images: ImagePipeline | None = None,
        store: ProfileStore | None = None,
        config: Config | None = None,
        *,
        created_by: str = "manual-import",
    ):
        self.config = config or get_config()
        self.client = client or WikipediaClient(
            api_url=self.config.wikipedia_api_url,
            linked_data_url=self.config.wikidata_api_url,
            thumbnail_size=self.config.thumbnail_size,
            category_limit=self.config.category_limit,
            user_agent=self.config.user_agent,
            timeout=self.config.request_timeout,
        )
        self.images = images or ImagePipeline(
            build_object_store(self.config),
            bucket=self.config.storage_bucket,
            prefix=self.config.storage_prefix,
            max_dimension=self.config.image_max_dimension,
            square=self.config.image_square_crop,
            quality=self.config.image_quality,
            max_size_mb=self.config.max_image_size_mb,
            timeout=self.config.request_timeout,
        )
        self.store = store or DatabaseManager(self.config.database_url)
        self.created_by = created_by
        self.delay_seconds = self.config.import_delay_seconds
        self.logger = get_logger(__name__)

    async def prepare(self) -> None:
        """Create tables when backed by the bundled database manager."""
        if isinstance(self.store, DatabaseManager):
            await self.store.create_tables()

    async def _derive(self, article: RawArticle) -> ExtractedProfile:
        linked_year = None
        if article.linked_data_id:
            linked_year = await self.client.fetch_birth_year_from_linked_data(article.linked_data_id)

        return derive_fields(
            article.extract_text,
            article.category_labels,
            linked_data_birth_year=linked_year,
            allow_lenient_birth_year=self.config.lenient_birth_year,
        )

    async def import_one(
        self,
        request: ImportRequest,
        *,
        dry_run: bool = False,
        skip_images: bool = False,
        unique_image_key: bool = False,
    ) -> ImportOutcome:
        """Import a single name.

        Args:
            request: Name and optional exact page title
            dry_run: Fetch and extract only; no image upload, no insert
            skip_images: Store the Wikipedia thumbnail URL instead of re-hosting it
            unique_image_key: Add a random suffix to the uploaded object key

        Returns:
            The outcome for this name; never raises for expected failures
        """
        name = request.name
        with with_import_context(name, title=request.effective_title, dry_run=dry_run) as logger:
            article = await self.client.fetch_article(request.effective_title)

            if isinstance(article, ArticleNotFound):
                if article.missing:
                    logger.info("No Wikipedia page found")
                    return ImportOutcome(
                        name=name, status=ImportStatus.FAILED, reason=not_found_reason(name), failure_kind="not_found"
                    )
                logger.warning("Wikipedia lookup failed", detail=article.detail)
                return ImportOutcome(
                    name=name,
                    status=ImportStatus.FAILED,
                    reason=article.detail or "Wikipedia API error",
                    failure_kind="upstream",
                )

            extracted = await self._derive(article)
            if request.base_tags or request.category:
                extracted.tags = merge_tags(request.base_tags, request.category, extracted.tags)
            if extracted.intro is None and request.category:
                extracted.intro = f"{request.category} - {', '.join(request.base_tags)}".rstrip(" -,")

            logger.info(
                "Derived profile fields",
                birth_year=extracted.birth_year,
                birth_year_source=extracted.birth_year_source,
                nationality=extracted.nationality,
                tags=extracted.tags,
            )

            image_url = None
            if article.thumbnail_url and not dry_run:
                if skip_images:
                    image_url = article.thumbnail_url
                else:
                    image_url = await self.images.import_image(article.thumbnail_url, name, unique=unique_image_key)
                    if image_url is None:
                        logger.warning("Continuing without profile image", source_url=article.thumbnail_url)

            if dry_run:
                return ImportOutcome(name=name, status=ImportStatus.SUCCESS, reason="dry run", extracted=extracted)

            profile = WomanProfile(
                name=name,
                intro=extracted.intro,
                accomplishments=extracted.accomplishments,
                image_url=image_url,
                tags=extracted.tags,
                birth_year=extracted.birth_year,
                created_by=self.created_by,
            )

            try:
                stored = await self.store.insert_profile(profile)
            except ProfileConflictError:
                logger.info("Profile already exists")
                return ImportOutcome(
                    name=name,
                    status=ImportStatus.SKIPPED,
                    reason=f'"{name}" already exists',
                    extracted=extracted,
                    image_url=image_url,
                )
            except ProfileStoreError as e:
                logger.error("Profile insert failed", error=str(e))
                return ImportOutcome(
                    name=name,
                    status=ImportStatus.FAILED,
                    reason=str(e),
                    failure_kind="store",
                    extracted=extracted,
                    image_url=image_url,
                )

            logger.info("Imported profile", profile_id=str(stored.id), has_image=image_url is not None)
            return ImportOutcome(
                name=name,
                status=ImportStatus.SUCCESS,
                extracted=extracted,
                image_url=image_url,
                profile_id=str(stored.id),
            )

    async def import_many(
        self,
        requests: Iterable[ImportRequest],
        *,
        dry_run: bool = False,
        skip_images: bool = False,
        progress_callback: ProgressCallback | None = None,
        on_outcome: OutcomeCallback | None = None,
    ) -> BatchResult:
        """Import names sequentially with a fixed pause between them.

        A failing name never stops the batch; unexpected errors are recorded as
        failed outcomes.
        """
        requests = list(requests)
        total = len(requests)
        result = BatchResult()

        self.logger.info("Starting batch import", total=total, dry_run=dry_run, skip_images=skip_images)

        for index, request in enumerate(requests, start=1):
            if progress_callback:
                progress_callback(request.name, index, total)

            try:
                outcome = await self.import_one(
                    request, dry_run=dry_run, skip_images=skip_images, unique_image_key=True
                )
            except Exception as exc:  # noqa: BLE001
                self.logger.error(
                    "Failed to import profile in batch",
                    name=request.name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    current_index=index,
                    total=total,
                )
                outcome = ImportOutcome(
                    name=request.name, status=ImportStatus.FAILED, reason=str(exc), failure_kind="unexpected"
                )

            result.outcomes.append(outcome)
            if on_outcome:
                on_outcome(outcome)

            if index < total and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)

        self.logger.info(
            "Batch import completed",
            total=total,
            succeeded=result.succeeded,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result

    async def close(self) -> None:
        """Release HTTP clients and database connections."""
        await self.client.aclose()
        await self.images.aclose()
        await self.store.close()
