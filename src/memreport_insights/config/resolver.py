"""Resolve an engine version into a ready-to-parse rule set.

Every supported version is mapped to one of two resolution pipelines:

  LegacyPipeline  -- the oldest version ships a single JSON document already
                     shaped as sections + tables; fields are renamed into the
                     unified model and nothing else is fetched.
  ModernPipeline  -- newer versions read section definitions from a
                     BaseEngine.ini, then fetch one table-pattern resource per
                     section (concurrently) named after the section's pattern id.

Failure to load the base document for a version is fatal (ConfigLoadError).
Failure to load an individual pattern resource is not: that section simply
resolves with no tables and is parsed as plain text.
"""

import asyncio
import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from memreport_insights import settings
from memreport_insights.config.engine_reader import parse_engine_config, validate_engine_config
from memreport_insights.config.loaders import ResourceLoader
from memreport_insights.config.manifest import PatternManifest
from memreport_insights.config.schema import (
    EngineConfig,
    EngineVersion,
    LegacyEngineConfig,
    LegacyTableSettings,
    ParsePattern,
    ResolvedEngineConfig,
    ResolvedSectionConfig,
    SectionDefinition,
    TableParsePattern,
)
from memreport_insights.errors import ConfigLoadError, ResourceNotFoundError

logger = logging.getLogger(__name__)


# ─── Pattern Cache ───────────────────────────────────────────────────────────

# Cached marker for a pattern confirmed not to exist (or not to be usable)
ABSENT = object()


class PatternCache:
    """Resolved table patterns keyed by (version, pattern id).

    Values are a ParsePattern or ABSENT.  Concurrent resolution of the same
    key can only ever store the same value, so no locking is needed.
    """

    def __init__(self):
        self._entries: dict[tuple[str, str], object] = {}

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: tuple[str, str]) -> object:
        return self._entries[key]

    def set(self, key: tuple[str, str], value: object) -> None:
        self._entries[key] = value

    def clear(self) -> None:
        self._entries.clear()


# ─── Resolution Pipelines ────────────────────────────────────────────────────


@dataclass(frozen=True)
class LegacyPipeline:
    """Oldest version: one pre-shaped document at ``config_path``."""

    config_path: str

    async def resolve(self, resolver: "ConfigResolver", version: EngineVersion) -> ResolvedEngineConfig:
        try:
            text = await resolver.loader.load_text(self.config_path)
            legacy = LegacyEngineConfig.model_validate_json(text)
            sections = [
                ResolvedSectionConfig(
                    name=section.title,
                    start_pattern=section.start_mark,
                    end_pattern=section.end_mark,
                    tables=[_convert_legacy_table(table) for table in section.tables],
                )
                for section in legacy.sections
            ]
        except (ResourceNotFoundError, ValidationError) as exc:
            raise ConfigLoadError(version.value, str(exc)) from exc

        return ResolvedEngineConfig(version=legacy.version, description=legacy.description, sections=sections)

    async def definitions(self, resolver: "ConfigResolver", version: EngineVersion) -> EngineConfig:
        resolved = await self.resolve(resolver, version)
        sections = [
            SectionDefinition(name=section.name, start_pattern=section.start_pattern, end_pattern=section.end_pattern)
            for section in resolved.sections
        ]
        return EngineConfig(version=resolved.version, description=resolved.description, sections=sections)


@dataclass(frozen=True)
class ModernPipeline:
    """Newer versions: BaseEngine.ini at ``base_settings_path`` plus per-section pattern resources."""

    base_settings_path: str

    async def definitions(self, resolver: "ConfigResolver", version: EngineVersion) -> EngineConfig:
        try:
            content = await resolver.loader.load_text(self.base_settings_path)
        except ResourceNotFoundError as exc:
            raise ConfigLoadError(version.value, f"BaseEngine file could not be loaded: {exc}") from exc
        return parse_engine_config(content, version.value)

    async def resolve(self, resolver: "ConfigResolver", version: EngineVersion) -> ResolvedEngineConfig:
        engine_config = await self.definitions(resolver, version)

        # Sections are independent; gather preserves their order
        patterns = await asyncio.gather(
            *(resolver.load_parse_pattern(section.parse_pattern_id, version) for section in engine_config.sections)
        )
        sections = [
            ResolvedSectionConfig(
                name=section.name,
                start_pattern=section.start_pattern,
                end_pattern=section.end_pattern,
                tables=pattern.tables if pattern is not None else [],
            )
            for section, pattern in zip(engine_config.sections, patterns)
        ]
        return ResolvedEngineConfig(version=engine_config.version, description=engine_config.description, sections=sections)


def _convert_legacy_table(table: LegacyTableSettings) -> TableParsePattern:
    return TableParsePattern(
        name=table.start_mark,
        start_pattern=table.start_mark,
        end_pattern=table.end_mark,
        headers=table.headers,
        separator=table.separator or "",
        split_format=table.split_format or None,
        numeric_columns=table.numeric,
    )


def _build_pipelines() -> dict[EngineVersion, LegacyPipeline | ModernPipeline]:
    pipelines: dict[EngineVersion, LegacyPipeline | ModernPipeline] = {}
    for version in EngineVersion:
        legacy_path = settings.legacy_config_path(version.value)
        base_path = settings.base_engine_path(version.value)
        if legacy_path:
            pipelines[version] = LegacyPipeline(legacy_path)
        elif base_path:
            pipelines[version] = ModernPipeline(base_path)
        else:
            raise RuntimeError(f"No resolution pipeline configured for engine version {version.value}")
    return pipelines


PIPELINES = _build_pipelines()


# ─── Resolver ────────────────────────────────────────────────────────────────


class ConfigResolver:
    """Resolve engine versions to ResolvedEngineConfig, caching pattern lookups."""

    def __init__(self, loader: ResourceLoader | None = None, cache: PatternCache | None = None):
        self.loader = loader if loader is not None else settings.default_loader()
        self.cache = cache if cache is not None else PatternCache()
        self.manifest = PatternManifest(self.loader)

    async def resolve(self, version: EngineVersion | str) -> ResolvedEngineConfig:
        """Load the complete rule set for ``version``; raises ConfigLoadError on the fatal path."""
        version = _coerce_version(version)
        resolved = await PIPELINES[version].resolve(self, version)
        n_tables = sum(1 for section in resolved.sections if section.tables)
        logger.info(
            "Resolved config for %s: %d sections (%d with table patterns)", version.value, len(resolved.sections), n_tables
        )
        return resolved

    async def validate_config(self, version: EngineVersion | str) -> list[str]:
        """Re-run resolution and report structural problems instead of raising."""
        try:
            version = _coerce_version(version)
            pipeline = PIPELINES[version]
            await self.resolve(version)
            engine_config = await pipeline.definitions(self, version)
        except ConfigLoadError as exc:
            return [f"Failed to load or validate config: {exc}"]
        return validate_engine_config(engine_config)

    async def load_parse_pattern(self, pattern_id: str | None, version: EngineVersion) -> ParsePattern | None:
        """Return the table patterns for one section, or None if there are none to use."""
        if not pattern_id:
            return None

        key = (version.value, pattern_id)
        if key in self.cache:
            logger.debug("Pattern cache hit for %s:%s", *key)
            cached = self.cache.get(key)
            return None if cached is ABSENT else cached

        family = version.family.value
        if not await self.manifest.exists(family, pattern_id):
            self.cache.set(key, ABSENT)
            return None

        pattern = await self._fetch_parse_pattern(family, pattern_id)
        self.cache.set(key, pattern if pattern is not None else ABSENT)
        return pattern

    async def _fetch_parse_pattern(self, family: str, pattern_id: str) -> ParsePattern | None:
        path = settings.pattern_path(family, pattern_id)
        try:
            text = await self.loader.load_text(path)
        except ResourceNotFoundError as exc:
            logger.warning("Pattern %s listed in manifest but not loadable: %s", pattern_id, exc)
            return None

        stripped = text.lstrip().lower()
        if stripped.startswith("<!doctype") or stripped.startswith("<html"):
            logger.warning("Pattern %s returned HTML instead of JSON, ignoring", path)
            return None

        try:
            return ParsePattern.model_validate(json.loads(text))
        except json.JSONDecodeError as exc:
            logger.warning("Pattern %s is not valid JSON: %s", path, exc)
        except ValidationError as exc:
            logger.warning("Pattern %s is not a valid parse pattern: %s", path, exc)
        return None

    def clear_cache(self) -> None:
        """Forget every cached pattern and manifest."""
        self.cache.clear()
        self.manifest.clear()


def _coerce_version(version: EngineVersion | str) -> EngineVersion:
    try:
        return EngineVersion(version)
    except ValueError as exc:
        raise ConfigLoadError(str(version), "Unsupported engine version") from exc
