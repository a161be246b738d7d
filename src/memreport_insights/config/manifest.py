"""Index of the table-pattern resources available for each version family.

Each family folder under ``parse_patterns/`` is accompanied by a
``<family>_manifest.txt`` listing its files, one per line.  Consulting the
manifest first avoids fetching pattern resources that do not exist, which
would otherwise mean one failed request per unconfigured command.
"""

import asyncio
import logging

from memreport_insights import settings
from memreport_insights.config.loaders import ResourceLoader
from memreport_insights.errors import ResourceNotFoundError

logger = logging.getLogger(__name__)

PATTERN_SUFFIX = ".json"


class PatternManifest:
    """Per-family manifest of pattern resource names, loaded once and cached.

    Concurrent lookups for a family whose manifest is still being fetched share
    the one in-flight load instead of each issuing their own request.
    """

    def __init__(self, loader: ResourceLoader):
        self.loader = loader
        self._cache: dict[str, list[str]] = {}
        self._pending: dict[str, asyncio.Task] = {}

    async def _load(self, family: str) -> list[str]:
        if family in self._cache:
            return self._cache[family]

        pending = self._pending.get(family)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(family))
            self._pending[family] = pending
        return await pending

    async def _fetch(self, family: str) -> list[str]:
        path = settings.manifest_path(family)
        try:
            text = await self.loader.load_text(path)
        except ResourceNotFoundError as exc:
            # Without a manifest every pattern counts as absent (plain-text sections)
            logger.warning("Pattern manifest not found for %s, treating all patterns as absent: %s", family, exc)
            self._cache[family] = []
            return []
        finally:
            self._pending.pop(family, None)

        files = list(dict.fromkeys(line.strip() for line in text.splitlines() if line.strip()))
        self._cache[family] = files
        logger.info("Loaded pattern manifest for %s: %d entries", family, len(files))
        return files

    async def exists(self, family: str, pattern_id: str) -> bool:
        """Return True if the family's manifest lists ``<pattern_id>.json``."""
        return f"{pattern_id}{PATTERN_SUFFIX}" in await self._load(family)

    async def list_available(self, family: str) -> list[str]:
        """Return every pattern id in the family's manifest, in manifest order."""
        return [name.removesuffix(PATTERN_SUFFIX) for name in await self._load(family)]

    def clear(self) -> None:
        self._cache.clear()
        self._pending.clear()
