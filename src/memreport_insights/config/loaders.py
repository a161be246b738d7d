"""Async loaders for configuration resources.

Resources are addressed by a slash-separated path relative to a resource root,
e.g. ``parse_patterns/ue5/stat_memory.json``.  Two loaders are provided: one
reading a local directory tree (the packaged resources by default) and one
fetching from an HTTP server that mirrors the same tree.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

import httpx

from memreport_insights.errors import ResourceFormatError, ResourceNotFoundError

logger = logging.getLogger(__name__)


class ResourceLoader(Protocol):
    """Anything that can fetch a text resource by relative path."""

    async def load_text(self, path: str) -> str:
        """Return the resource's text or raise ResourceNotFoundError."""


# ─── File System ─────────────────────────────────────────────────────────────


class FileResourceLoader:
    """Read resources from a directory tree."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"FileResourceLoader({str(self.root)!r})"

    async def load_text(self, path: str) -> str:
        target = self.root / path
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise ResourceNotFoundError(f"Resource not found: {target}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ResourceNotFoundError(f"Resource could not be read: {target} ({exc})") from exc


# ─── HTTP ────────────────────────────────────────────────────────────────────


class HttpResourceLoader:
    """Fetch resources from a static HTTP mirror of the resource tree.

    ``.json`` resources served with a non-JSON content type are rejected; this
    catches servers that answer unknown paths with an HTML index page.

    Used as ``async with HttpResourceLoader(url) as loader:`` every request
    shares one ``httpx.AsyncClient`` (and its connection pool) until the block
    exits.  Outside such a block each request opens its own short-lived client.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def __repr__(self) -> str:
        return f"HttpResourceLoader({self.base_url!r})"

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def __aenter__(self) -> "HttpResourceLoader":
        if self._client is None:
            self._client = self._new_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared client, if one is open."""
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            response = await self._client.get(url)
            response.raise_for_status()
            return response
        async with self._new_client() as client:
            response = await client.get(url)
            response.raise_for_status()
            return response

    async def load_text(self, path: str) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = await self._get(url)
        except httpx.HTTPStatusError as exc:
            raise ResourceNotFoundError(f"Resource not found: {url} (HTTP {exc.response.status_code})") from exc
        except httpx.HTTPError as exc:
            raise ResourceNotFoundError(f"Resource could not be fetched: {url} ({exc})") from exc

        content_type = response.headers.get("content-type", "")
        if path.endswith(".json") and content_type and "json" not in content_type:
            raise ResourceFormatError(f"Expected JSON from {url}, got content type {content_type!r}")

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return response.text
