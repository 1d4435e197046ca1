"""Electrical Rule Check Engine — Deterministic Schematic Checker.

Pure Python. No I/O. Fully unit-testable.

Inspects a wiring diagram against 9 structural/electrical rules:
  1. Floating wires (missing or ghost-terminated ends)
  2. Orphan components (no wire attached)
  3. Duplicate reference names
  4. Multiple wires landing on one pin
  5. Illegal power connections (PWR/GND against each other or serial pins)
  6. Illegal serial connections (TX/RX pairing)
  7. Missing part names
  8. Missing wire lengths
  9. Floating wires inside cables

Input:  Diagram (Pydantic model)
Output: list[Finding], in catalog order
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping

from erc_checker.schemas.diagram import Diagram, DiagramEdge
from erc_checker.schemas.erc import CheckInfo, ErcCheck, Finding, FindingSeverity
from erc_checker.validation.lookup import (
    INSULATION,
    LENGTH,
    PART_NAME,
    REFERENCE_NAME,
    UNKNOWN_COLOR,
    UNNAMED,
    build_pin_function_index,
    resolve_edge_name,
    resolve_node_name,
)

logger = logging.getLogger(__name__)

CheckFn = Callable[..., list[Finding]]

SERIAL_ROLES = frozenset({"TX+", "TX-", "RX+", "RX-"})

# Ordered (source, target) pairs; both directions are listed.
ILLEGAL_POWER_PAIRS = frozenset(
    {("PWR", "GND"), ("GND", "PWR")}
    | {(rail, sig) for rail in ("PWR", "GND") for sig in SERIAL_ROLES}
    | {(sig, rail) for rail in ("PWR", "GND") for sig in SERIAL_ROLES}
)

VALID_SERIAL_PAIRS = frozenset(
    {("TX+", "RX+"), ("TX-", "RX-"), ("RX+", "TX+"), ("RX-", "TX-")}
)

UNKNOWN_CABLE = "Unknown cable"


# ─── Internal Helpers ───


def _is_floating(edge: DiagramEdge, ghosts: frozenset[str]) -> bool:
    """An end is missing, or lands on a ghost placeholder."""
    if not edge.source or not edge.target:
        return True
    return edge.source in ghosts or edge.target in ghosts


def _pin_roles(
    edge: DiagramEdge, pin_functions: Mapping[str, str]
) -> tuple[str, str] | None:
    """Roles at both ends, or None when either is unknown."""
    source_fn = pin_functions.get(edge.source_handle) if edge.source_handle else None
    target_fn = pin_functions.get(edge.target_handle) if edge.target_handle else None
    if not source_fn or not target_fn:
        return None
    return source_fn, target_fn


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


# ═══════════════════════════════════════════════════════════
# Check 1: Floating Wires
# ═══════════════════════════════════════════════════════════


def check_floating_wires(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """Every ordinary wire must be attached at both ends to a real node."""
    findings: list[Finding] = []
    ghosts = diagram.ghost_node_ids()

    for edge in diagram.wires():
        if not _is_floating(edge, ghosts):
            continue
        wire_name = edge.prop(REFERENCE_NAME) or edge.id or UNNAMED
        findings.append(
            Finding(
                id=edge.id,
                type=FindingSeverity.ERROR,
                message=f'Wire "{wire_name}" is floating — one end is not connected.',
                check=ErcCheck.FLOATING_WIRES,
            )
        )

    return findings


# ═══════════════════════════════════════════════════════════
# Check 2: Orphan Components
# ═══════════════════════════════════════════════════════════


def check_orphan_components(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """Every component must be the source or target of some wire.
    Sub-wires inside cables do not count."""
    findings: list[Finding] = []

    connected: set[str] = set()
    for edge in diagram.wires():
        if edge.source:
            connected.add(edge.source)
        if edge.target:
            connected.add(edge.target)

    for node in diagram.components():
        if node.id in connected:
            continue
        ref_name = resolve_node_name(diagram, node.id)
        findings.append(
            Finding(
                id=node.id,
                type=FindingSeverity.ERROR,
                message=f"Component {ref_name} is an orphan component.",
                check=ErcCheck.ORPHAN_COMPONENTS,
            )
        )

    return findings


# ═══════════════════════════════════════════════════════════
# Check 3: Duplicate Reference Names
# ═══════════════════════════════════════════════════════════


def check_duplicate_names(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """No two components may share a reference name.
    One finding per shared name, listing every id that uses it."""
    findings: list[Finding] = []

    # name → node ids, in first-seen order
    name_map: dict[str, list[str]] = {}
    for node in diagram.components():
        ref_name = node.prop(REFERENCE_NAME)
        if ref_name:
            name_map.setdefault(ref_name, []).append(node.id)

    for ref_name, ids in name_map.items():
        if len(ids) > 1:
            findings.append(
                Finding(
                    id=", ".join(ids),
                    type=FindingSeverity.ERROR,
                    message=(
                        f'Duplicate reference name detected: "{ref_name}" '
                        f"appears {len(ids)} times."
                    ),
                    check=ErcCheck.DUPLICATES,
                )
            )

    return findings


# ═══════════════════════════════════════════════════════════
# Check 4: Multiple Wires per Pin
# ═══════════════════════════════════════════════════════════


def check_multiple_wires(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """A pin may carry at most one wire end. Wires touching a ghost
    node are already floating and are left out."""
    findings: list[Finding] = []
    ghosts = diagram.ghost_node_ids()

    # pin id → edge ids landing on it
    pin_map: dict[str, list[str | None]] = {}
    for edge in diagram.wires():
        if edge.source in ghosts or edge.target in ghosts:
            continue
        for pin in (edge.source_handle, edge.target_handle):
            if pin:
                pin_map.setdefault(pin, []).append(edge.id)

    for pin, edge_ids in pin_map.items():
        if len(edge_ids) > 1:
            wire_names = ", ".join(resolve_edge_name(diagram, e) for e in edge_ids)
            findings.append(
                Finding(
                    id=", ".join(e or "" for e in edge_ids),
                    type=FindingSeverity.ERROR,
                    message=f"Pin {pin} has multiple wires connected: {wire_names}",
                    check=ErcCheck.MULTIPLE_WIRES,
                )
            )

    return findings


# ═══════════════════════════════════════════════════════════
# Check 5: Power Connections
# ═══════════════════════════════════════════════════════════


def check_power_connections(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """PWR must never meet GND directly, and neither rail may be wired
    straight onto a serial pin. Wires with an unknown role are skipped."""
    findings: list[Finding] = []
    if pin_functions is None:
        pin_functions = build_pin_function_index(diagram)

    for edge in diagram.wires():
        roles = _pin_roles(edge, pin_functions)
        if roles is None or roles not in ILLEGAL_POWER_PAIRS:
            continue
        source_fn, target_fn = roles
        wire_name = resolve_edge_name(diagram, edge.id)
        findings.append(
            Finding(
                id=edge.id,
                type=FindingSeverity.ERROR,
                message=(
                    f'Invalid power connection on wire "{wire_name}": '
                    f"{source_fn} → {target_fn}"
                ),
                check=ErcCheck.POWER_CONNECTIONS,
            )
        )

    return findings


# ═══════════════════════════════════════════════════════════
# Check 6: Serial Connections
# ═══════════════════════════════════════════════════════════


def check_serial_connections(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """Serial pins must cross over: TX+ ↔ RX+ and TX- ↔ RX-.

    Only fires when both ends are serial roles. Applies to cable
    sub-wires too.
    """
    findings: list[Finding] = []
    if pin_functions is None:
        pin_functions = build_pin_function_index(diagram)

    for edge in diagram.edges:
        roles = _pin_roles(edge, pin_functions)
        if roles is None:
            continue
        source_fn, target_fn = roles
        if source_fn not in SERIAL_ROLES or target_fn not in SERIAL_ROLES:
            continue
        if roles in VALID_SERIAL_PAIRS:
            continue
        wire_name = resolve_edge_name(diagram, edge.id)
        findings.append(
            Finding(
                id=edge.id,
                type=FindingSeverity.ERROR,
                message=(
                    f'Invalid serial connection on wire "{wire_name}": '
                    f"{source_fn} → {target_fn}"
                ),
                check=ErcCheck.SERIAL_CONNECTIONS,
            )
        )

    return findings


# ═══════════════════════════════════════════════════════════
# Check 7: Missing Part Names
# ═══════════════════════════════════════════════════════════


def check_missing_part_names(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """Every component should have a part name assigned."""
    return [
        Finding(
            id=node.id,
            type=FindingSeverity.WARNING,
            message=f"Component {node.id} is missing a part name.",
            check=ErcCheck.MISSING_PART_NAMES,
        )
        for node in diagram.components()
        if _is_blank(node.prop(PART_NAME))
    ]


# ═══════════════════════════════════════════════════════════
# Check 8: Missing Wire Lengths
# ═══════════════════════════════════════════════════════════


def check_missing_lengths(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """Every wire and cable should have a length assigned."""
    findings: list[Finding] = []

    for edge in diagram.wires():
        if not _is_blank(edge.prop(LENGTH)):
            continue
        wire_name = resolve_edge_name(diagram, edge.id)
        findings.append(
            Finding(
                id=edge.id,
                type=FindingSeverity.WARNING,
                message=f'Wire "{wire_name}" has no length assigned.',
                check=ErcCheck.MISSING_LENGTHS,
            )
        )

    return findings


# ═══════════════════════════════════════════════════════════
# Check 9: Floating Bundled Wires
# ═══════════════════════════════════════════════════════════


def check_floating_bundled_wires(
    diagram: Diagram,
    pin_functions: Mapping[str, str] | None = None,
) -> list[Finding]:
    """Same floating test as check 1, scoped to sub-wires of a cable.
    The message names the owning cable and the wire's insulation."""
    findings: list[Finding] = []
    ghosts = diagram.ghost_node_ids()

    for edge in diagram.edges:
        if not edge.is_bundled or not _is_floating(edge, ghosts):
            continue
        insulation = edge.prop(INSULATION) or UNKNOWN_COLOR
        parent = diagram.find_edge(edge.data.parent_id)
        cable_name = (parent.prop(REFERENCE_NAME) if parent else None) or UNKNOWN_CABLE
        findings.append(
            Finding(
                id=edge.id,
                type=FindingSeverity.ERROR,
                message=(
                    f'Wire in cable "{cable_name}" ({insulation}) is floating '
                    f"— one end is not connected."
                ),
                check=ErcCheck.FLOATING_BUNDLED_WIRES,
            )
        )

    return findings


# ═══════════════════════════════════════════════════════════
# Aggregator
# ═══════════════════════════════════════════════════════════

# Catalog order is output order.
ALL_CHECKS: dict[ErcCheck, CheckFn] = {
    ErcCheck.FLOATING_WIRES: check_floating_wires,
    ErcCheck.ORPHAN_COMPONENTS: check_orphan_components,
    ErcCheck.DUPLICATES: check_duplicate_names,
    ErcCheck.MULTIPLE_WIRES: check_multiple_wires,
    ErcCheck.POWER_CONNECTIONS: check_power_connections,
    ErcCheck.SERIAL_CONNECTIONS: check_serial_connections,
    ErcCheck.MISSING_PART_NAMES: check_missing_part_names,
    ErcCheck.MISSING_LENGTHS: check_missing_lengths,
    ErcCheck.FLOATING_BUNDLED_WIRES: check_floating_bundled_wires,
}

CHECK_CATALOG: list[CheckInfo] = [
    CheckInfo(
        id=ErcCheck.FLOATING_WIRES,
        label="Floating Wires",
        description="Check for wires with unconnected ends",
    ),
    CheckInfo(
        id=ErcCheck.FLOATING_BUNDLED_WIRES,
        label="Floating Bundled Wires",
        description="Check for floating wires in cables",
    ),
    CheckInfo(
        id=ErcCheck.ORPHAN_COMPONENTS,
        label="Orphan Components",
        description="Check for components with no connections",
    ),
    CheckInfo(
        id=ErcCheck.DUPLICATES,
        label="Duplicate Names",
        description="Check for duplicate reference names",
    ),
    CheckInfo(
        id=ErcCheck.MULTIPLE_WIRES,
        label="Multiple Wires per Pin",
        description="Check for pins with multiple connections",
    ),
    CheckInfo(
        id=ErcCheck.POWER_CONNECTIONS,
        label="Power Connections",
        description="Check for invalid power connections",
    ),
    CheckInfo(
        id=ErcCheck.SERIAL_CONNECTIONS,
        label="Serial Connections",
        description="Check TX/RX connections",
    ),
    CheckInfo(
        id=ErcCheck.MISSING_PART_NAMES,
        label="Missing Part Names",
        description="Check for components without part names",
    ),
    CheckInfo(
        id=ErcCheck.MISSING_LENGTHS,
        label="Missing Wire Lengths",
        description="Check for wires without length specified",
    ),
]


def selected_checks(checks: Iterable[ErcCheck] | None = None) -> list[ErcCheck]:
    """Requested checks in catalog order. None means all of them."""
    if checks is None:
        return list(ALL_CHECKS)
    wanted = set(checks)
    return [check for check in ALL_CHECKS if check in wanted]


def run_checks(
    diagram: Diagram,
    checks: Iterable[ErcCheck] | None = None,
) -> list[Finding]:
    """Run all (or selected) rules on a diagram.

    Args:
        diagram: The diagram to check.
        checks: Optional subset of check ids. Defaults to the whole
                catalog. Requested order does not matter.

    Returns:
        Findings in catalog order, then in diagram order within a rule.
    """
    pin_functions = build_pin_function_index(diagram)
    findings: list[Finding] = []

    for check in selected_checks(checks):
        issues = ALL_CHECKS[check](diagram, pin_functions)
        logger.debug("%s: %d finding(s)", check.value, len(issues))
        findings.extend(issues)

    return findings


def filter_findings(
    findings: Iterable[Finding], enabled: Iterable[ErcCheck]
) -> list[Finding]:
    """Keep findings produced by enabled checks, preserving order."""
    allowed = set(enabled)
    return [f for f in findings if f.check in allowed]
