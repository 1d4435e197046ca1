"""HTTP tests for the ERC endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from erc_checker.main import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_list_checks(client):
    resp = client.get("/api/erc/checks")
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 9
    assert body[0] == {
        "id": "floatingWires",
        "label": "Floating Wires",
        "description": "Check for wires with unconnected ends",
    }


def test_run_all_checks(client):
    diagram = {
        "nodes": [{"id": "N1", "data": {"display_properties": []}}],
        "edges": [{"id": "E1", "source": "N1"}],
    }
    resp = client.post("/api/erc/run", json={"diagram": diagram})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "INVALID"
    assert [r["check"] for r in body["results"]] == [
        "floatingWires",
        "missingPartNames",
        "missingLengths",
    ]
    assert body["results"][0] == {
        "id": "E1",
        "type": "error",
        "message": 'Wire "E1" is floating — one end is not connected.',
        "check": "floatingWires",
    }
    assert body["tests"][0]["category"] == "continuity"


def test_run_selected_checks(client):
    diagram = {"nodes": [{"id": "N1"}]}
    resp = client.post(
        "/api/erc/run", json={"diagram": diagram, "checks": ["missingPartNames"]}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["checks_run"] == ["missingPartNames"]
    assert [r["type"] for r in body["results"]] == ["warning"]
    assert body["status"] == "VALID"


def test_missing_diagram_is_empty(client):
    resp = client.post("/api/erc/run", json={})
    assert resp.status_code == 200
    assert resp.json()["results"] == []


def test_unknown_check_rejected(client):
    resp = client.post("/api/erc/run", json={"diagram": {}, "checks": ["bogus"]})
    assert resp.status_code == 422


def test_text_report(client):
    resp = client.post("/api/erc/report", json={"diagram": {}})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text.startswith("No ERC errors found!")
