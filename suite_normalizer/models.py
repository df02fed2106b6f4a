from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, FrozenSet, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class SchemaRevision(str, Enum):
    CURRENT = "current"
    LEGACY = "legacy"


class TestMode(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    BOTH_DIRECTIONS = "bothDirections"
    DISPLAY = "display"
    HYPHENATE = "hyphenate"
    HYPHENATE_BRAILLE = "hyphenateBraille"


class ModeFlag(str, Enum):
    NO_CONTRACTIONS = "noContractions"
    COMPBRL_AT_CURSOR = "compbrlAtCursor"
    DOTS_IO = "dotsIo"
    COMPBRL_LEFT_CURSOR = "compbrlLeftCursor"
    UC_BRL = "ucBrl"
    NO_UNDEFINED = "noUndefined"
    PARTIAL_TRANS = "partialTrans"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- table reference variants ---

class SingleFile(_Frozen):
    path: str


class FileList(_Frozen):
    paths: Tuple[str, ...]


class InlineDefinition(_Frozen):
    text: str


class MetadataMap(_Frozen):
    entries: Dict[str, str] = Field(default_factory=dict)


TableReference = Union[SingleFile, FileList, InlineDefinition, MetadataMap]


# --- expected failure variants ---

class Flag(_Frozen):
    value: bool = False

    @property
    def failing(self) -> bool:
        return self.value


class Reason(_Frozen):
    text: str

    @property
    def failing(self) -> bool:
        return True


class Directional(_Frozen):
    forward: bool = False
    backward: bool = False

    @property
    def failing(self) -> bool:
        return self.forward or self.backward


Xfail = Union[Flag, Reason, Directional]

Position = Annotated[int, Field(ge=0, le=0xFFFF)]


class TestCase(_Frozen):
    input: str
    expected: str
    xfail: Xfail = Field(default_factory=Flag)
    # Not populated from source documents yet
    input_pos: Tuple[Position, ...] = ()
    output_pos: Tuple[Position, ...] = ()
    cursor_pos: Optional[int] = Field(default=None, ge=0, le=0xFFFF)
    mode: FrozenSet[ModeFlag] = frozenset()
    max_output_length: Optional[int] = Field(default=None, ge=0, le=0xFFFF)


class TestSuite(_Frozen):
    display_table: Optional[str] = None
    table: TableReference
    mode: TestMode = TestMode.FORWARD
    tests: Tuple[TestCase, ...] = ()


# --- HTTP envelope ---

class NormalizeSummary(BaseModel):
    suites: int = 0
    tests: int = 0
    schema_revision: SchemaRevision = SchemaRevision.CURRENT


class NormalizeResponse(BaseModel):
    canonical: str
    sha256: str
    summary: NormalizeSummary


class HealthResponse(BaseModel):
    ok: bool = True
