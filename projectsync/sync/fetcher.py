"""
Archive Fetching
================

Resolves archive bytes from a primary location, falling back to a bundled
local copy when the primary cannot be reached.

Locations may be ``http(s)://`` URLs, ``file://`` URLs or plain paths.
"""

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx
from loguru import logger

from projectsync.errors import FetchFailure
from projectsync.models import FetchResult, SourceLabel

PROJECTS_ZIP_URL = "https://renanbazinin.github.io/projects/projects.zip"
ARCHIVE_NAME = "projects.zip"
DEFAULT_FALLBACK = f"./{ARCHIVE_NAME}"

# Known app base paths in production and development
KNOWN_BASE_PATHS = ("/web-ide/", "/web-ide")

# In-app route segments the archive is served above
ROUTE_SEGMENTS = ("/chip", "/cpu", "/asm", "/vm", "/bitmap", "/about", "/guide")

DEFAULT_TIMEOUT = 30.0


def fallback_location(app_url: str | None = None, default: str = DEFAULT_FALLBACK) -> str:
    """
    Compute the fallback archive location served alongside the application.

    Args:
        app_url: Address the application is currently served from
        default: Location used when no application address is known

    Returns:
        str: URL (or local path) of the bundled archive
    """
    if not app_url:
        return default

    parts = urlsplit(app_url)
    origin = f"{parts.scheme}://{parts.netloc}"
    pathname = parts.path or "/"

    for base_path in KNOWN_BASE_PATHS:
        if pathname.startswith(base_path):
            normalized = base_path if base_path.endswith("/") else base_path + "/"
            return f"{origin}{normalized}{ARCHIVE_NAME}"

    base_path = pathname
    for route in ROUTE_SEGMENTS:
        index = pathname.find(route)
        if index != -1:
            base_path = pathname[:index]
            break

    if base_path == pathname and not pathname.endswith("/"):
        last_slash = pathname.rfind("/")
        base_path = pathname[: last_slash + 1] if last_slash > 0 else "/"

    if not base_path.endswith("/"):
        base_path += "/"

    return f"{origin}{base_path}{ARCHIVE_NAME}"


def _is_remote(location: str) -> bool:
    return urlsplit(location).scheme in ("http", "https")


def _local_path(location: str) -> Path:
    parts = urlsplit(location)
    if parts.scheme == "file":
        return Path(unquote(parts.path))
    return Path(location)


class ArchiveFetcher:
    """Fetches archive bytes with primary/fallback resolution."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        app_url: str | None = None,
        fallback: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the fetcher.

        Args:
            client: HTTP client to reuse; a short-lived client is created per request otherwise
            app_url: Deployment address used to derive the fallback location
            fallback: Explicit fallback location, overriding derivation from ``app_url``
            timeout: Request timeout for clients created by the fetcher
        """
        self.client = client
        self.app_url = app_url
        self.fallback = fallback
        self.timeout = timeout

    @property
    def fallback_location(self) -> str:
        if self.fallback:
            return self.fallback
        return fallback_location(self.app_url)

    async def _get(self, client: httpx.AsyncClient, url: str) -> bytes:
        response = await client.get(url)
        response.raise_for_status()
        return response.content

    async def _read_remote(self, url: str) -> bytes:
        if self.client is not None:
            return await self._get(self.client, url)
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            return await self._get(client, url)

    async def read(self, location: str) -> bytes:
        """Read raw bytes from one location, raising on any failure."""
        if _is_remote(location):
            return await self._read_remote(location)
        return await asyncio.to_thread(_local_path(location).read_bytes)

    async def fetch(self, primary: str, allow_fallback: bool = True) -> FetchResult:
        """
        Fetch archive bytes, trying the primary location first.

        Args:
            primary: Primary archive location
            allow_fallback: Whether to try the fallback location on failure

        Returns:
            FetchResult: Bytes tagged with the location that supplied them

        Raises:
            FetchFailure: If the primary fails and fallback is disabled, or both fail
        """
        try:
            data = await self.read(primary)
            return FetchResult(data=data, source=SourceLabel.primary, location=primary)
        except (httpx.HTTPError, OSError) as primary_error:
            if not allow_fallback:
                raise FetchFailure(primary, primary_error) from primary_error

            fallback = self.fallback_location
            logger.warning(f"Failed to fetch from primary location ({primary}): {primary_error}")
            logger.info(f"Falling back to local location: {fallback}")

            try:
                data = await self.read(fallback)
            except (httpx.HTTPError, OSError) as fallback_error:
                raise FetchFailure(primary, primary_error, fallback, fallback_error) from fallback_error

            return FetchResult(data=data, source=SourceLabel.fallback, location=fallback)
