# ABOUTME: Profile photo pipeline: download, re-encode to WebP, upload to the object store
# ABOUTME: Every failure is soft; callers get a public URL or None

import io
import re
import secrets
import time

import httpx
from PIL import Image, ImageOps, UnidentifiedImageError

from women_galaxy.errors import StorageError
from women_galaxy.services.storage import ObjectStore
from women_galaxy.utils.logging import get_logger

WEBP_CONTENT_TYPE = "image/webp"

# Portraits keep the face: crop from the top edge, centred horizontally
TOP_ANCHOR = (0.5, 0.0)


def slugify_name(name: str, max_length: int = 30) -> str:
    """Lower-case the name and replace every character outside ``[a-z0-9]`` with ``_``."""
    return re.sub(r"[^a-z0-9]", "_", name.lower())[:max_length]


def build_object_key(prefix: str, name: str, unique: bool = False, now_ms: int | None = None) -> str:
    """Key of the form ``<prefix>/<epoch ms>_<slug>[_<random>].webp``."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    stem = f"{timestamp}_{slugify_name(name)}"
    if unique:
        stem = f"{stem}_{secrets.token_hex(3)}"
    key = f"{stem}.webp"
    return f"{prefix.strip('/')}/{key}" if prefix else key


def reencode_image(image_bytes: bytes, max_dimension: int = 500, square: bool = True, quality: int = 82) -> bytes:
    """Re-encode arbitrary image bytes as WebP no larger than ``max_dimension`` on either side.

    Args:
        image_bytes: Source image in any format Pillow can decode
        max_dimension: Bound for width and height
        square: Cover-crop to a top-anchored square instead of fitting inside the bound
        quality: WebP quality (1-100)

    Raises:
        UnidentifiedImageError: If the bytes are not a decodable image
        Image.DecompressionBombError: If the pixel count is far beyond ``Image.MAX_IMAGE_PIXELS``
    """
    with Image.open(io.BytesIO(image_bytes)) as source:
        image = ImageOps.exif_transpose(source)
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA" if "A" in image.getbands() else "RGB")

        if square:
            side = min(max_dimension, image.width, image.height)
            image = ImageOps.fit(image, (side, side), Image.Resampling.LANCZOS, centering=TOP_ANCHOR)
        else:
            image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        image.save(buffer, format="WEBP", quality=quality)
        return buffer.getvalue()


class ImagePipeline:
    """Downloads a remote image, re-encodes it, and uploads it to the object store."""

    def __init__(
        self,
        store: ObjectStore,
        bucket: str = "women-profiles",
        prefix: str = "women",
        client: httpx.AsyncClient | None = None,
        *,
        max_dimension: int = 500,
        square: bool = True,
        quality: int = 82,
        max_size_mb: float = 10.0,
        user_agent: str = "Mozilla/5.0 (compatible; WomenGalaxyBot/1.0; +https://lucyearth.com)",
        timeout: float = 30.0,
    ):
        self.store = store
        self.bucket = bucket
        self.prefix = prefix
        self.max_dimension = max_dimension
        self.square = square
        self.quality = quality
        self.max_size_mb = max_size_mb
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(
            headers={"User-Agent": user_agent}, timeout=timeout, follow_redirects=True
        )
        self.logger = get_logger(__name__)

    async def download(self, url: str) -> bytes | None:
        """Fetch image bytes, returning None for any non-success response, error, or oversize body."""
        limit = int(self.max_size_mb * 1024 * 1024)
        try:
            async with self.http_client.stream("GET", url) as response:
                if not response.is_success:
                    self.logger.warning("Failed to download image", url=url, status_code=response.status_code)
                    return None

                content_length = response.headers.get("content-length")
                if content_length and content_length.isdigit() and int(content_length) > limit:
                    self.logger.warning("Image too large, skipping", url=url, size_bytes=int(content_length))
                    return None

                chunks: list[bytes] = []
                received = 0
                async for chunk in response.aiter_bytes():
                    chunks.append(chunk)
                    received += len(chunk)
                    if received > limit:
                        self.logger.warning("Image too large during download", url=url)
                        return None
        except httpx.HTTPError as e:
            self.logger.warning("Error downloading image", url=url, error=str(e), error_type=type(e).__name__)
            return None

        return b"".join(chunks)

    async def import_image(self, source_url: str, subject_name: str, *, unique: bool = False) -> str | None:
        """Download, convert and upload an image in one go.

        Args:
            source_url: Remote image URL (e.g. a Wikipedia thumbnail)
            subject_name: Person the photo depicts, used in the object key
            unique: Append a random suffix to the key (batch imports)

        Returns:
            Public URL of the stored WebP, or None if any stage failed
        """
        raw = await self.download(source_url)
        if raw is None:
            return None

        try:
            webp = reencode_image(raw, self.max_dimension, self.square, self.quality)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            self.logger.warning("Error converting image", name=subject_name, error=str(e))
            return None

        key = build_object_key(self.prefix, subject_name, unique=unique)
        try:
            await self.store.upload(self.bucket, key, webp, WEBP_CONTENT_TYPE)
        except StorageError as e:
            self.logger.warning("Upload error", name=subject_name, key=key, error=str(e))
            return None

        public_url = self.store.public_url(self.bucket, key)
        self.logger.info(
            "Stored profile image",
            name=subject_name,
            key=key,
            source_kb=round(len(raw) / 1024, 1),
            webp_kb=round(len(webp) / 1024, 1),
        )
        return public_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
        await self.store.aclose()
