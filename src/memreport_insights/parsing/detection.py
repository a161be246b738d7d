"""Infer the engine version that produced a memreport from its content."""

from memreport_insights.config.schema import EngineVersion

# UE5 renderer features; either family marks a UE5 report
LUMEN_MARKERS = ("Lumen", "STAT_Lumen")
NANITE_MARKERS = ("Nanite", "STAT_Nanite")

# Only emitted by the newest supported version
NEWEST_VERSION_MARKERS = (
    'MemReport: Begin command "rhi.dumpresourcememory summary',
    "STATGROUP_NaniteCoarseMeshStreaming",
    "wp.DumpStreamingSources",
)

# Launch environment string tagging a UE5 build
UE5_ENVIRONMENT_MARKER = "epicapp=UE_5"


def _contains_any(content: str, markers: tuple[str, ...]) -> bool:
    return any(marker in content for marker in markers)


def detect_version(content: str) -> EngineVersion:
    """Return the supported engine version whose rule set best fits ``content``.

    Never fails: reports without any recognised marker are treated as the
    oldest supported version.
    """
    has_ue5_features = _contains_any(content, LUMEN_MARKERS) or _contains_any(content, NANITE_MARKERS)

    if has_ue5_features:
        if _contains_any(content, NEWEST_VERSION_MARKERS):
            return EngineVersion.UE_5_6
        return EngineVersion.UE_5_3

    # UE5 build without renderer stats in the dump; default to the earlier UE5 rules
    if UE5_ENVIRONMENT_MARKER in content:
        return EngineVersion.UE_5_3

    return EngineVersion.UE_4_27
