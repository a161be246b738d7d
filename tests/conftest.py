"""Shared test configuration and fixtures."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from memreport_insights.errors import ResourceNotFoundError

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")


class DictLoader:
    """In-memory resource loader that records every path requested."""

    def __init__(self, resources: dict[str, str]):
        self.resources = dict(resources)
        self.requests: list[str] = []

    async def load_text(self, path: str) -> str:
        self.requests.append(path)
        if path not in self.resources:
            raise ResourceNotFoundError(f"Resource not found: {path}")
        return self.resources[path]


@pytest.fixture
def make_loader():
    """Return a factory building a DictLoader from a {path: text} mapping."""
    return DictLoader


# A UE5 memreport excerpt covering a labelled-values table, a headed
# whitespace table, a plain-text section and a comma separated table.
UE5_REPORT = """\
Log file open, 10/19/26 09:12:44
CommandLine: -epicapp=UE_5.3
MemReport: Begin command "Mem FromReport"
Platform Memory Stats for Windows
Process Physical Memory: 1234.56 MB used, 2345.67 MB peak
Process Virtual Memory: 3456.78 MB used, 4567.89 MB peak
Physical Memory: 12345.67 MB used,  3456.78 MB free, 16000.00 MB total

MemReport: End command "Mem FromReport"
MemReport: Begin command "obj list -alphasort"
Obj List: -alphasort
Objects:

                  Class    Count      NumKB      MaxKB
           AnimSequence       12     345.67     400.00
             StaticMesh      120    1024.00    2048.00
     132 Objects (Total: 1.2M / Max: 2.4M)
MemReport: End command "obj list -alphasort"
MemReport: Begin command "rhi.DumpMemory"
RHI resource memory (Texture2D + RenderTarget)
  Total: 512.00 MB
MemReport: End command "rhi.DumpMemory"
MemReport: Begin command "ListSpawnedActors"
Listing spawned actors
TimeUnseen,TimeAlive,Class,Name
0.00,12.34,BP_Door_C,BP_Door_C_0
1.50,3.25,BP_Lamp_C,BP_Lamp_C_2
MemReport: End command "ListSpawnedActors"
LumenSceneData 12.00 MB
"""


@pytest.fixture
def ue5_report() -> str:
    return UE5_REPORT


@pytest.fixture
def ue4_report() -> str:
    """The same dump without any UE5 renderer or environment markers."""
    return UE5_REPORT.replace("CommandLine: -epicapp=UE_5.3\n", "").replace("LumenSceneData 12.00 MB\n", "")
