"""Tests for the ERC orchestrator and text report."""

import logging

from erc_checker.schemas.erc import ErcCheck, ErcStatus, InstructionCategory
from erc_checker.services.erc import render_text_report, run_erc
from erc_checker.validation.engine import ALL_CHECKS

BATTERY_LED = {
    "nodes": [
        {
            "id": "N1",
            "data": {
                "display_properties": [
                    {"key": "reference_name", "value": "Battery1"},
                    {"key": "part_name", "value": "18650"},
                ],
                "ports": [{"pins": [{"id": "P1", "function": "PWR"}]}],
            },
        },
        {
            "id": "N2",
            "data": {
                "display_properties": [{"key": "reference_name", "value": "LED1"}],
                "ports": [{"pins": [{"id": "P2", "function": "GND"}]}],
            },
        },
    ],
    "edges": [
        {
            "id": "E1",
            "source": "N1",
            "target": "N2",
            "sourceHandle": "P1",
            "targetHandle": "P2",
            "data": {"display_properties": [{"key": "length", "value": "12"}]},
        }
    ],
}


class TestRunErc:
    def test_reference_scenario(self):
        report = run_erc(BATTERY_LED)
        assert report.status == ErcStatus.INVALID
        assert report.errors == 1
        assert report.warnings == 1
        assert [t.category for t in report.tests] == [
            InstructionCategory.CONTINUITY,
            InstructionCategory.MECHANICAL,
        ]
        assert report.checks_run == list(ALL_CHECKS)

    def test_empty_diagram_valid(self):
        report = run_erc({})
        assert report.status == ErcStatus.VALID
        assert report.results == []
        assert report.tests == []

    def test_warnings_only_is_valid(self):
        report = run_erc(BATTERY_LED, [ErcCheck.MISSING_PART_NAMES])
        assert report.status == ErcStatus.VALID
        assert report.checks_run == [ErcCheck.MISSING_PART_NAMES]
        assert len(report.results) == 1
        # Instructions do not depend on the selected checks
        assert len(report.tests) == 2

    def test_logs_summary(self, caplog):
        with caplog.at_level(logging.INFO, logger="erc_checker.services.erc"):
            run_erc(BATTERY_LED)
        assert "2 node(s), 1 edge(s)" in caplog.text
        assert "1 error(s), 1 warning(s), 2 test(s)" in caplog.text


class TestTextReport:
    def test_findings_and_tests(self):
        text = render_text_report(run_erc(BATTERY_LED))
        assert text == (
            'ERROR: Invalid power connection on wire "E1": PWR → GND\n\n'
            "WARNING: Component N2 is missing a part name.\n\n"
            "Suggested Tests:\n\n"
            "1. [continuity] Perform a continuity check along wire E1 "
            "(unknown color). Ensure resistance < 1 Ω.\n\n"
            "2. [mechanical] Measure and confirm wire E1 length = 12 in."
        )

    def test_clean_report(self):
        text = render_text_report(run_erc({}))
        assert text.startswith("No ERC errors found!")
