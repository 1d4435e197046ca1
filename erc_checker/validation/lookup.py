"""Shared lookups used by every rule: reference names and pin roles."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from erc_checker.schemas.diagram import Diagram

UNNAMED = "unnamed"
UNKNOWN_COLOR = "unknown color"

REFERENCE_NAME = "reference_name"
PART_NAME = "part_name"
LENGTH = "length"
INSULATION = "insulation"


def resolve_node_name(diagram: Diagram, node_id: str | None) -> str:
    """Reference name of a node, falling back to its id."""
    node = diagram.find_node(node_id)
    if node is None:
        return node_id or UNNAMED
    return node.prop(REFERENCE_NAME) or node_id or UNNAMED


def resolve_edge_name(diagram: Diagram, edge_id: str | None) -> str:
    """Reference name of a wire, falling back to its id."""
    edge = diagram.find_edge(edge_id)
    if edge is None:
        return edge_id or UNNAMED
    return edge.prop(REFERENCE_NAME) or edge_id or UNNAMED


def build_pin_function_index(diagram: Diagram) -> Mapping[str, str]:
    """Map pin id → upper-cased electrical role (PWR, GND, TX+, ...).

    Pins missing an id or a function are left out. On duplicate pin
    ids the last pin wins.
    """
    index = {
        pin.id: pin.function.upper()
        for node in diagram.nodes
        for port in node.data.ports
        for pin in port.pins
        if pin.id and pin.function
    }
    return MappingProxyType(index)
