"""Shared configuration for memreport resource loading and parsing."""

import os
from pathlib import Path

from dotenv import load_dotenv

from memreport_insights.config.loaders import FileResourceLoader, HttpResourceLoader, ResourceLoader

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

PACKAGE_RESOURCES = Path(__file__).parent / "resources"

# Local resource tree (engine_settings/ and parse_patterns/ live beneath it)
RESOURCE_DIR = Path(os.getenv("MEMREPORT_RESOURCE_DIR", str(PACKAGE_RESOURCES)))

# When set, resources are fetched over HTTP from this base URL instead
RESOURCE_URL = os.getenv("MEMREPORT_RESOURCE_URL", "").rstrip("/")

HTTP_TIMEOUT = float(os.getenv("MEMREPORT_HTTP_TIMEOUT", "30"))

# Sections appended between cooperative yields while parsing
PARSE_YIELD_EVERY = 5

ENGINE_SETTINGS_DIR = "engine_settings"
PARSE_PATTERNS_DIR = "parse_patterns"

# Modern versions share one base-settings document
BASE_ENGINE_FILES = {
    "5.3": "BaseEngine_5.6.1.ini",
    "5.6": "BaseEngine_5.6.1.ini",
}

# Legacy versions ship a pre-shaped sections+tables document
LEGACY_CONFIG_FILES = {
    "4.27": "ue4/ue427.json",
}


def base_engine_path(version: str) -> str | None:
    """Return the resource path of the base-settings ini for a version, if one is mapped."""
    filename = BASE_ENGINE_FILES.get(version)
    return f"{ENGINE_SETTINGS_DIR}/{filename}" if filename else None


def legacy_config_path(version: str) -> str | None:
    """Return the resource path of the legacy config document for a version, if one is mapped."""
    filename = LEGACY_CONFIG_FILES.get(version)
    return f"{PARSE_PATTERNS_DIR}/{filename}" if filename else None


def manifest_path(family: str) -> str:
    return f"{PARSE_PATTERNS_DIR}/{family}_manifest.txt"


def pattern_path(family: str, pattern_id: str) -> str:
    return f"{PARSE_PATTERNS_DIR}/{family}/{pattern_id}.json"


def default_loader() -> ResourceLoader:
    """Build the resource loader selected by the environment."""
    if RESOURCE_URL:
        return HttpResourceLoader(RESOURCE_URL, timeout=HTTP_TIMEOUT)
    return FileResourceLoader(RESOURCE_DIR)
