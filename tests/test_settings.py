"""Unit tests for the settings module."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from pathlib import Path

from memreport_insights import settings
from memreport_insights.config.loaders import FileResourceLoader, HttpResourceLoader


class TestResourcePaths:

    def test_base_engine_path(self):
        assert settings.base_engine_path("5.3") == "engine_settings/BaseEngine_5.6.1.ini"
        assert settings.base_engine_path("5.6") == "engine_settings/BaseEngine_5.6.1.ini"
        assert settings.base_engine_path("4.27") is None

    def test_legacy_config_path(self):
        assert settings.legacy_config_path("4.27") == "parse_patterns/ue4/ue427.json"
        assert settings.legacy_config_path("5.6") is None

    def test_manifest_and_pattern_paths(self):
        assert settings.manifest_path("ue5") == "parse_patterns/ue5_manifest.txt"
        assert settings.pattern_path("ue5", "stat_memory") == "parse_patterns/ue5/stat_memory.json"

    def test_packaged_resources_exist(self):
        assert (settings.PACKAGE_RESOURCES / "engine_settings" / "BaseEngine_5.6.1.ini").exists()
        assert (settings.PACKAGE_RESOURCES / "parse_patterns" / "ue4" / "ue427.json").exists()
        assert (settings.PACKAGE_RESOURCES / "parse_patterns" / "ue5_manifest.txt").exists()

    def test_root_is_project_root(self):
        """ROOT should point to the project root (contains pyproject.toml)."""
        assert isinstance(settings.ROOT, Path)
        assert (settings.ROOT / "pyproject.toml").exists()


class TestDefaultLoader:

    def test_file_loader_without_url(self, monkeypatch):
        monkeypatch.setattr(settings, "RESOURCE_URL", "")
        loader = settings.default_loader()
        assert isinstance(loader, FileResourceLoader)
        assert loader.root == settings.RESOURCE_DIR

    def test_http_loader_with_url(self, monkeypatch):
        monkeypatch.setattr(settings, "RESOURCE_URL", "https://example.test/config")
        loader = settings.default_loader()
        assert isinstance(loader, HttpResourceLoader)
        assert loader.base_url == "https://example.test/config"
        assert loader.timeout == settings.HTTP_TIMEOUT
