# ABOUTME: Tests for the profile photo pipeline (download, WebP re-encode, upload)
# ABOUTME: Generates source images with Pillow and stores results in a temporary local store

import io
import re

import httpx
import pytest
from PIL import Image
from pytest_httpx import IteratorStream

from women_galaxy.errors import StorageError
from women_galaxy.services.images import (
    ImagePipeline,
    build_object_key,
    reencode_image,
    slugify_name,
)
from women_galaxy.services.storage import LocalObjectStore

IMAGE_URL = "https://upload.wikimedia.org/wikipedia/commons/thumb/portrait.jpg"


def make_image_bytes(size: tuple[int, int] = (800, 1200), fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """Create an in-memory image; top half red, bottom half blue."""
    image = Image.new("RGB", size, (0, 0, 255))
    image.paste((255, 0, 0), (0, 0, size[0], size[1] // 2))
    if mode != "RGB":
        image = image.convert(mode)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def open_webp(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


class TestObjectKeys:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Marie Curie", "marie_curie"),
            ("Beyoncé", "beyonc_"),
            ("Sandra Day O'Connor", "sandra_day_o_connor"),
            ("A" * 40, "a" * 30),
        ],
    )
    def test_slugify(self, name, expected):
        assert slugify_name(name) == expected

    def test_key_format(self):
        assert build_object_key("women", "Marie Curie", now_ms=1700000000000) == "women/1700000000000_marie_curie.webp"

    def test_unique_key_has_random_suffix(self):
        key = build_object_key("women", "Marie Curie", unique=True, now_ms=1700000000000)
        assert re.fullmatch(r"women/1700000000000_marie_curie_[0-9a-f]{6}\.webp", key)

    def test_unique_keys_differ(self):
        first = build_object_key("women", "Ada Lovelace", unique=True, now_ms=1)
        second = build_object_key("women", "Ada Lovelace", unique=True, now_ms=1)
        assert first != second

    def test_empty_prefix(self):
        assert build_object_key("", "Ada", now_ms=5) == "5_ada.webp"


class TestReencode:
    def test_square_crop_is_bounded(self):
        output = open_webp(reencode_image(make_image_bytes((800, 1200))))

        assert output.format == "WEBP"
        assert output.size == (500, 500)

    def test_square_crop_keeps_the_top_of_a_portrait(self):
        output = open_webp(reencode_image(make_image_bytes((400, 1200)), max_dimension=400))
        red, green, blue = output.convert("RGB").getpixel((200, 390))

        # the 400px crop starts at the top, so even its bottom rows are still red
        assert red > 200 and blue < 60

    def test_small_image_is_not_upscaled(self):
        output = open_webp(reencode_image(make_image_bytes((120, 200))))
        assert output.size == (120, 120)

    def test_fit_mode_preserves_aspect_ratio(self):
        output = open_webp(reencode_image(make_image_bytes((800, 1200)), square=False))

        assert output.height == 500
        assert output.width < 500

    def test_palette_image_is_converted(self):
        output = open_webp(reencode_image(make_image_bytes((300, 300), fmt="GIF", mode="P")))
        assert output.size == (300, 300)

    def test_decompression_bomb_raises(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        with pytest.raises(Image.DecompressionBombError):
            reencode_image(make_image_bytes((200, 200), mode="1"))

    def test_garbage_bytes_raise(self):
        with pytest.raises(OSError):
            reencode_image(b"definitely not an image")


class TestImagePipeline:
    @pytest.mark.asyncio
    async def test_import_image(self, httpx_mock, tmp_path):
        httpx_mock.add_response(url=IMAGE_URL, content=make_image_bytes(), headers={"content-type": "image/png"})
        store = LocalObjectStore(tmp_path, base_url="https://cdn.example.org")
        pipeline = ImagePipeline(store, bucket="women-profiles", prefix="women")

        try:
            url = await pipeline.import_image(IMAGE_URL, "Marie Curie")
        finally:
            await pipeline.aclose()

        match = re.fullmatch(r"https://cdn\.example\.org/women-profiles/women/(\d+_marie_curie\.webp)", url)
        assert match
        stored = tmp_path / "women-profiles" / "women" / match.group(1)
        assert open_webp(stored.read_bytes()).size == (500, 500)

    @pytest.mark.asyncio
    async def test_unique_key_in_batch_mode(self, httpx_mock, tmp_path):
        httpx_mock.add_response(url=IMAGE_URL, content=make_image_bytes())
        pipeline = ImagePipeline(LocalObjectStore(tmp_path))

        try:
            url = await pipeline.import_image(IMAGE_URL, "Marie Curie", unique=True)
        finally:
            await pipeline.aclose()

        assert url.startswith("file://")
        assert re.search(r"/women/\d+_marie_curie_[0-9a-f]{6}\.webp$", url)

    @pytest.mark.asyncio
    async def test_download_failure_returns_none(self, httpx_mock, tmp_path):
        httpx_mock.add_response(url=IMAGE_URL, status_code=404)
        pipeline = ImagePipeline(LocalObjectStore(tmp_path))

        try:
            assert await pipeline.import_image(IMAGE_URL, "Marie Curie") is None
        finally:
            await pipeline.aclose()

        assert not any(tmp_path.iterdir())

    @pytest.mark.asyncio
    async def test_transport_error_returns_none(self, httpx_mock, tmp_path):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=IMAGE_URL)
        pipeline = ImagePipeline(LocalObjectStore(tmp_path))

        try:
            assert await pipeline.import_image(IMAGE_URL, "Marie Curie") is None
        finally:
            await pipeline.aclose()

    @pytest.mark.asyncio
    async def test_oversize_image_is_skipped(self, httpx_mock, tmp_path):
        httpx_mock.add_response(url=IMAGE_URL, content=b"x" * 4096)
        pipeline = ImagePipeline(LocalObjectStore(tmp_path), max_size_mb=0.001)

        try:
            assert await pipeline.download(IMAGE_URL) is None
        finally:
            await pipeline.aclose()

    @pytest.mark.asyncio
    async def test_download_joins_streamed_chunks(self, httpx_mock, tmp_path):
        chunks = [b"\x89PNG", b"a" * 700, b"b" * 700]
        httpx_mock.add_response(url=IMAGE_URL, stream=IteratorStream(chunks))
        pipeline = ImagePipeline(LocalObjectStore(tmp_path))

        try:
            assert await pipeline.download(IMAGE_URL) == b"".join(chunks)
        finally:
            await pipeline.aclose()

    @pytest.mark.asyncio
    async def test_streamed_body_over_limit_is_skipped(self, httpx_mock, tmp_path):
        # no content-length header, so only the running total can catch it
        httpx_mock.add_response(url=IMAGE_URL, stream=IteratorStream([b"x" * 600, b"y" * 600]))
        pipeline = ImagePipeline(LocalObjectStore(tmp_path), max_size_mb=0.001)

        try:
            assert await pipeline.download(IMAGE_URL) is None
        finally:
            await pipeline.aclose()

    @pytest.mark.asyncio
    async def test_decompression_bomb_returns_none(self, httpx_mock, tmp_path, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        httpx_mock.add_response(url=IMAGE_URL, content=make_image_bytes((200, 200), mode="1"))
        pipeline = ImagePipeline(LocalObjectStore(tmp_path))

        try:
            assert await pipeline.import_image(IMAGE_URL, "Marie Curie") is None
        finally:
            await pipeline.aclose()

        assert not any(tmp_path.iterdir())

    @pytest.mark.asyncio
    async def test_undecodable_image_returns_none(self, httpx_mock, tmp_path):
        httpx_mock.add_response(url=IMAGE_URL, content=b"<html>not an image</html>")
        pipeline = ImagePipeline(LocalObjectStore(tmp_path))

        try:
            assert await pipeline.import_image(IMAGE_URL, "Marie Curie") is None
        finally:
            await pipeline.aclose()

    @pytest.mark.asyncio
    async def test_upload_failure_returns_none(self, httpx_mock):
        class RejectingStore:
            def __init__(self):
                self.closed = False

            async def upload(self, bucket, key, data, content_type):
                raise StorageError("bucket is full")

            def public_url(self, bucket, key):
                raise AssertionError("public_url should not be called after a failed upload")

            async def aclose(self):
                self.closed = True

        httpx_mock.add_response(url=IMAGE_URL, content=make_image_bytes())
        store = RejectingStore()
        pipeline = ImagePipeline(store)

        assert await pipeline.import_image(IMAGE_URL, "Marie Curie") is None
        await pipeline.aclose()
        assert store.closed


class TestLocalObjectStore:
    @pytest.mark.asyncio
    async def test_existing_key_is_not_overwritten(self, tmp_path):
        store = LocalObjectStore(tmp_path)
        await store.upload("bucket", "women/a.webp", b"first", "image/webp")

        with pytest.raises(StorageError):
            await store.upload("bucket", "women/a.webp", b"second", "image/webp")
        assert (tmp_path / "bucket" / "women" / "a.webp").read_bytes() == b"first"

    @pytest.mark.asyncio
    async def test_key_cannot_escape_root(self, tmp_path):
        store = LocalObjectStore(tmp_path / "store")

        with pytest.raises(StorageError):
            await store.upload("bucket", "../../evil.webp", b"data", "image/webp")

    def test_public_url_with_base(self, tmp_path):
        store = LocalObjectStore(tmp_path, base_url="http://localhost:8000/media/")
        assert store.public_url("bucket", "women/a.webp") == "http://localhost:8000/media/bucket/women/a.webp"
