"""Diagram model — lenient pydantic view over editor JSON.

The diagram arrives as user-supplied JSON. Every level is optional:
absent or malformed collections load as empty lists and malformed
scalars load as ``None``, so rules can assume totality.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

BUNDLE_NODE = "bundleNode"
GHOST_NODE = "ghostNode"
BUNDLED_EDGE = "bundledEdge"

STRUCTURAL_NODE_TYPES = frozenset({BUNDLE_NODE, GHOST_NODE})


# ─── Coercion Helpers ───


def _as_text(value: Any) -> str | None:
    """Scalars become text; objects, lists and null become ``None``."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _as_items(value: Any) -> list[dict]:
    """Keep only the object entries of a JSON array."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _as_object(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ─── Leaves ───


class DisplayProperty(_Lenient):
    key: str | None = None
    value: str | None = None

    @field_validator("key", "value", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)


class Pin(_Lenient):
    id: str | None = None
    function: str | None = None

    @field_validator("id", "function", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)


class Port(_Lenient):
    pins: list[Pin] = Field(default_factory=list)

    @field_validator("pins", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[dict]:
        return _as_items(v)


def _first_value(props: list[DisplayProperty], key: str) -> str | None:
    """First-match lookup. Later entries with the same key are ignored."""
    for prop in props:
        if prop.key == key:
            return prop.value
    return None


# ─── Nodes ───


class NodeData(_Lenient):
    display_properties: list[DisplayProperty] = Field(default_factory=list)
    ports: list[Port] = Field(default_factory=list)

    @field_validator("display_properties", "ports", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[dict]:
        return _as_items(v)


class DiagramNode(_Lenient):
    id: str | None = None
    type: str | None = None
    data: NodeData = Field(default_factory=NodeData)

    @field_validator("id", "type", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("data", mode="before")
    @classmethod
    def coerce_data(cls, v: Any) -> dict:
        return _as_object(v)

    def prop(self, key: str) -> str | None:
        return _first_value(self.data.display_properties, key)

    @property
    def is_structural(self) -> bool:
        """Bundle and ghost nodes are markers, not components."""
        return self.type in STRUCTURAL_NODE_TYPES

    @property
    def is_ghost(self) -> bool:
        return self.type == GHOST_NODE


# ─── Edges ───


class EdgeData(_Lenient):
    display_properties: list[DisplayProperty] = Field(default_factory=list)
    parent_id: str | None = None

    @field_validator("display_properties", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[dict]:
        return _as_items(v)

    @field_validator("parent_id", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)


class DiagramEdge(_Lenient):
    id: str | None = None
    type: str | None = None
    source: str | None = None
    target: str | None = None
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    target_handle: str | None = Field(default=None, alias="targetHandle")
    data: EdgeData = Field(default_factory=EdgeData)

    @field_validator(
        "id", "type", "source", "target", "source_handle", "target_handle",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("data", mode="before")
    @classmethod
    def coerce_data(cls, v: Any) -> dict:
        return _as_object(v)

    def prop(self, key: str) -> str | None:
        return _first_value(self.data.display_properties, key)

    @property
    def is_bundled(self) -> bool:
        """Sub-wire living inside a cable."""
        return self.type == BUNDLED_EDGE

    @property
    def property_values(self) -> list[str]:
        return [p.value for p in self.data.display_properties if p.value is not None]


# ─── Diagram ───


class Diagram(_Lenient):
    nodes: list[DiagramNode] = Field(default_factory=list)
    edges: list[DiagramEdge] = Field(default_factory=list)

    @field_validator("nodes", "edges", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[dict]:
        return _as_items(v)

    def find_node(self, node_id: str | None) -> DiagramNode | None:
        """First node with this id, or ``None``."""
        if node_id is None:
            return None
        return next((n for n in self.nodes if n.id == node_id), None)

    def find_edge(self, edge_id: str | None) -> DiagramEdge | None:
        """First edge with this id, or ``None``."""
        if edge_id is None:
            return None
        return next((e for e in self.edges if e.id == edge_id), None)

    def ghost_node_ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.nodes if n.is_ghost and n.id)

    def components(self) -> list[DiagramNode]:
        """Ordinary nodes that carry an id."""
        return [n for n in self.nodes if not n.is_structural and n.id]

    def wires(self) -> list[DiagramEdge]:
        """Edges that are not sub-wires of a cable."""
        return [e for e in self.edges if not e.is_bundled]


def load_diagram(raw: Any) -> Diagram:
    """Build a Diagram from any parsed JSON value. Never raises."""
    return Diagram.model_validate(_as_object(raw))
