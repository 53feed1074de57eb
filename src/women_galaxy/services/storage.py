# ABOUTME: Object store adapters for profile photos
# ABOUTME: Supabase Storage over its REST API, plus a filesystem store for local runs

from pathlib import Path
from typing import Protocol
from urllib.parse import quote

import httpx

from women_galaxy.errors import StorageError
from women_galaxy.utils.logging import get_logger, log_api_call


class ObjectStore(Protocol):
    """Content store addressed by bucket and key, with public URLs."""

    async def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under bucket/key.

        Raises:
            StorageError: If the store rejects the upload or cannot be reached
        """
        ...

    def public_url(self, bucket: str, key: str) -> str: ...

    async def aclose(self) -> None: ...


class SupabaseStorage:
    """Supabase Storage client using the service role key."""

    def __init__(
        self,
        project_url: str,
        service_role_key: str,
        client: httpx.AsyncClient | None = None,
        cache_control: str = "3600",
        timeout: float = 30.0,
    ):
        self.project_url = project_url.rstrip("/")
        self.cache_control = cache_control
        self._owns_client = client is None
        self.http_client = client or httpx.AsyncClient(timeout=timeout)
        self._auth_headers = {
            "Authorization": f"Bearer {service_role_key}",
            "apikey": service_role_key,
        }
        self.logger = get_logger(__name__)

    def _object_path(self, bucket: str, key: str) -> str:
        return f"{quote(bucket)}/{quote(key)}"

    @log_api_call("supabase_storage")
    async def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        url = f"{self.project_url}/storage/v1/object/{self._object_path(bucket, key)}"
        headers = {
            **self._auth_headers,
            "Content-Type": content_type,
            "cache-control": f"max-age={self.cache_control}",
            "x-upsert": "false",
        }
        try:
            response = await self.http_client.post(url, content=data, headers=headers)
        except httpx.HTTPError as e:
            raise StorageError(f"Upload of {key} failed: {e}") from e

        if not response.is_success:
            raise StorageError(f"Upload of {key} rejected ({response.status_code}): {response.text[:200]}")

        self.logger.debug("Uploaded object", bucket=bucket, key=key, size_bytes=len(data))

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self.project_url}/storage/v1/object/public/{self._object_path(bucket, key)}"

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()


class LocalObjectStore:
    """Writes objects under ``root/bucket/key`` and serves them from ``base_url``.

    Without a base URL the public URL is a ``file://`` URI.
    """

    def __init__(self, root: Path | str, base_url: str = ""):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.logger = get_logger(__name__)

    def _path(self, bucket: str, key: str) -> Path:
        path = (self.root / bucket / key).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise StorageError(f"Key escapes storage root: {key}")
        return path

    async def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        path = self._path(bucket, key)
        if path.exists():
            raise StorageError(f"Object already exists: {bucket}/{key}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

        self.logger.debug("Stored object locally", path=str(path), content_type=content_type, size_bytes=len(data))

    def public_url(self, bucket: str, key: str) -> str:
        if self.base_url:
            return f"{self.base_url}/{bucket}/{key}"
        return (self.root / bucket / key).resolve().as_uri()

    async def aclose(self) -> None:
        return None
