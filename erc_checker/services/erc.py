"""ERC Orchestrator

Runs one check over a user-supplied diagram:
  Load → Rules → Test instructions → Report
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from erc_checker.schemas.diagram import load_diagram
from erc_checker.schemas.erc import (
    ErcCheck,
    ErcReport,
    ErcStatus,
    FindingSeverity,
)
from erc_checker.validation.engine import run_checks, selected_checks
from erc_checker.validation.instructions import generate_test_instructions

logger = logging.getLogger(__name__)


def run_erc(raw: Any, checks: Iterable[ErcCheck] | None = None) -> ErcReport:
    """Check a parsed diagram and suggest hardware tests.

    ``raw`` is any parsed JSON value; missing or malformed parts are
    treated as empty. ``checks`` limits which rules run.
    """
    diagram = load_diagram(raw)
    ran = selected_checks(checks)
    logger.info(
        "ERC START: %d node(s), %d edge(s), %d check(s)",
        len(diagram.nodes),
        len(diagram.edges),
        len(ran),
    )

    results = run_checks(diagram, ran)
    tests = generate_test_instructions(diagram)

    errors = sum(1 for f in results if f.type == FindingSeverity.ERROR)
    warnings = sum(1 for f in results if f.type == FindingSeverity.WARNING)
    logger.info(
        "ERC complete — %d error(s), %d warning(s), %d test(s)",
        errors,
        warnings,
        len(tests),
    )

    return ErcReport(
        status=ErcStatus.VALID if errors == 0 else ErcStatus.INVALID,
        results=results,
        tests=tests,
        checks_run=ran,
        errors=errors,
        warnings=warnings,
    )


def render_text_report(report: ErcReport) -> str:
    """Plain-text summary: findings, then numbered suggested tests."""
    if report.results:
        result_text = "\n\n".join(
            f"{f.type.value.upper()}: {f.message}" for f in report.results
        )
    else:
        result_text = "No ERC errors found!"

    test_text = "\n\n".join(
        f"{idx}. [{t.category.value}] {t.instruction}"
        for idx, t in enumerate(report.tests, start=1)
    )
    return f"{result_text}\n\nSuggested Tests:\n\n{test_text}"
