from erc_checker.schemas.diagram import Diagram, load_diagram
from erc_checker.schemas.erc import (
    ErcCheck,
    ErcReport,
    Finding,
    FindingSeverity,
    TestInstruction,
)

__all__ = [
    "Diagram",
    "load_diagram",
    "ErcCheck",
    "ErcReport",
    "Finding",
    "FindingSeverity",
    "TestInstruction",
]
