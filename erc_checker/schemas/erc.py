from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, Field


class FindingSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ErcCheck(str, Enum):
    """Stable category tag for each rule in the catalog."""

    FLOATING_WIRES = "floatingWires"
    FLOATING_BUNDLED_WIRES = "floatingBundledWires"
    ORPHAN_COMPONENTS = "orphanComponents"
    DUPLICATES = "duplicates"
    MULTIPLE_WIRES = "multipleWires"
    POWER_CONNECTIONS = "powerConnections"
    SERIAL_CONNECTIONS = "serialConnections"
    MISSING_PART_NAMES = "missingPartNames"
    MISSING_LENGTHS = "missingLengths"


class Finding(BaseModel):
    id: str | None = None
    type: FindingSeverity
    message: str
    check: ErcCheck


class InstructionCategory(str, Enum):
    CONTINUITY = "continuity"
    POWER = "power"
    SIGNAL = "signal"
    MECHANICAL = "mechanical"


class TestInstruction(BaseModel):
    __test__ = False

    id: str | None = None
    category: InstructionCategory
    instruction: str


class CheckInfo(BaseModel):
    id: ErcCheck
    label: str
    description: str


class ErcStatus(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"


class ErcReport(BaseModel):
    status: ErcStatus
    results: list[Finding] = Field(default_factory=list)
    tests: list[TestInstruction] = Field(default_factory=list)
    checks_run: list[ErcCheck] = Field(default_factory=list)
    errors: int = 0
    warnings: int = 0
