"""Suggested hardware tests per wire.

Power and signal steps use loose substring matching over the wire's
display values rather than pin roles. This is deliberate and differs
from the role-aware rule catalog.
"""

from __future__ import annotations

from erc_checker.schemas.diagram import Diagram, DiagramEdge
from erc_checker.schemas.erc import InstructionCategory, TestInstruction
from erc_checker.validation.lookup import (
    INSULATION,
    LENGTH,
    REFERENCE_NAME,
    UNKNOWN_COLOR,
    UNNAMED,
)


def _mentions(values: list[str], token: str) -> bool:
    return any(token in v.upper() for v in values)


def _edge_instructions(edge: DiagramEdge) -> list[TestInstruction]:
    name = edge.prop(REFERENCE_NAME) or edge.id or UNNAMED
    insulation = edge.prop(INSULATION)
    length = edge.prop(LENGTH)
    color = insulation.upper() if insulation else UNKNOWN_COLOR
    values = edge.property_values

    steps = [
        TestInstruction(
            id=edge.id,
            category=InstructionCategory.CONTINUITY,
            instruction=(
                f"Perform a continuity check along wire {name} ({color}). "
                "Ensure resistance < 1 Ω."
            ),
        )
    ]

    if length:
        steps.append(
            TestInstruction(
                id=edge.id,
                category=InstructionCategory.MECHANICAL,
                instruction=f"Measure and confirm wire {name} length = {length} in.",
            )
        )

    if _mentions(values, "PWR") and _mentions(values, "GND"):
        steps.append(
            TestInstruction(
                id=edge.id,
                category=InstructionCategory.POWER,
                instruction=(
                    f"Using a multimeter, verify {name} delivers correct "
                    "voltage between PWR and GND."
                ),
            )
        )

    has_tx = _mentions(values, "TX")
    if has_tx or _mentions(values, "RX"):
        line = "TX" if has_tx else "RX"
        steps.append(
            TestInstruction(
                id=edge.id,
                category=InstructionCategory.SIGNAL,
                instruction=(
                    f"Use an oscilloscope to validate {name} signal "
                    f"integrity ({line} line)."
                ),
            )
        )

    return steps


def generate_test_instructions(diagram: Diagram) -> list[TestInstruction]:
    """Continuity for every wire, plus mechanical/power/signal steps
    where the wire's properties call for them. Cable sub-wires are
    skipped."""
    tests: list[TestInstruction] = []
    for edge in diagram.wires():
        tests.extend(_edge_instructions(edge))
    return tests
