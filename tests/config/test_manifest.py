"""Unit tests for the pattern manifest."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import asyncio

from memreport_insights.config.manifest import PatternManifest

MANIFEST = "stat_memory.json\n  obj_list_-alphasort.json  \n\nlisttextures_-alphasort.json\n"


class TestPatternManifest:

    def test_exists(self, make_loader):
        manifest = PatternManifest(make_loader({"parse_patterns/ue5_manifest.txt": MANIFEST}))
        assert asyncio.run(manifest.exists("ue5", "stat_memory")) is True
        assert asyncio.run(manifest.exists("ue5", "obj_list_-alphasort")) is True
        assert asyncio.run(manifest.exists("ue5", "configmem")) is False

    def test_list_available_in_manifest_order(self, make_loader):
        manifest = PatternManifest(make_loader({"parse_patterns/ue5_manifest.txt": MANIFEST}))
        assert asyncio.run(manifest.list_available("ue5")) == [
            "stat_memory",
            "obj_list_-alphasort",
            "listtextures_-alphasort",
        ]

    def test_loaded_once_per_family(self, make_loader):
        loader = make_loader({"parse_patterns/ue5_manifest.txt": MANIFEST})
        manifest = PatternManifest(loader)

        async def check_many():
            for pattern_id in ("stat_memory", "a", "b"):
                await manifest.exists("ue5", pattern_id)
            await manifest.list_available("ue5")

        asyncio.run(check_many())
        assert loader.requests == ["parse_patterns/ue5_manifest.txt"]

    def test_missing_manifest_reports_everything_absent(self, make_loader):
        loader = make_loader({})
        manifest = PatternManifest(loader)
        assert asyncio.run(manifest.exists("ue5", "stat_memory")) is False
        assert asyncio.run(manifest.list_available("ue5")) == []
        # The failure is cached too
        assert loader.requests == ["parse_patterns/ue5_manifest.txt"]

    def test_clear_forces_reload(self, make_loader):
        loader = make_loader({"parse_patterns/ue5_manifest.txt": MANIFEST})
        manifest = PatternManifest(loader)
        asyncio.run(manifest.exists("ue5", "stat_memory"))
        manifest.clear()
        asyncio.run(manifest.exists("ue5", "stat_memory"))
        assert len(loader.requests) == 2


class YieldingLoader:
    """Wraps a loader so every read suspends once before answering."""

    def __init__(self, inner):
        self.inner = inner

    async def load_text(self, path):
        await asyncio.sleep(0)
        return await self.inner.load_text(path)


class TestConcurrentLookups:

    def test_one_request_for_concurrent_lookups(self, make_loader):
        loader = make_loader({"parse_patterns/ue5_manifest.txt": MANIFEST})
        manifest = PatternManifest(YieldingLoader(loader))

        async def check_concurrently():
            return await asyncio.gather(*(manifest.exists("ue5", pattern_id) for pattern_id in ("stat_memory", "a", "b", "c")))

        assert asyncio.run(check_concurrently()) == [True, False, False, False]
        assert loader.requests == ["parse_patterns/ue5_manifest.txt"]

    def test_missing_manifest_warns_once(self, make_loader, caplog):
        loader = make_loader({})
        manifest = PatternManifest(YieldingLoader(loader))

        async def check_concurrently():
            return await asyncio.gather(*(manifest.exists("ue5", pattern_id) for pattern_id in ("a", "b", "c")))

        with caplog.at_level("WARNING", logger="memreport_insights.config.manifest"):
            assert asyncio.run(check_concurrently()) == [False, False, False]
        assert loader.requests == ["parse_patterns/ue5_manifest.txt"]
        assert len([r for r in caplog.records if "manifest not found" in r.getMessage()]) == 1

    def test_clear_after_concurrent_load(self, make_loader):
        loader = make_loader({"parse_patterns/ue5_manifest.txt": MANIFEST})
        manifest = PatternManifest(YieldingLoader(loader))

        async def check_concurrently():
            await asyncio.gather(manifest.exists("ue5", "a"), manifest.exists("ue5", "b"))

        asyncio.run(check_concurrently())
        manifest.clear()
        asyncio.run(check_concurrently())
        assert len(loader.requests) == 2
