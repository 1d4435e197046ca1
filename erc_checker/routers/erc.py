"""ERC router — stateless diagram checking endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from erc_checker.schemas.erc import CheckInfo, ErcCheck, ErcReport
from erc_checker.services.erc import render_text_report, run_erc
from erc_checker.validation.engine import CHECK_CATALOG

router = APIRouter()


class ErcRunRequest(BaseModel):
    diagram: Any = Field(
        default=None, description="Parsed diagram JSON (nodes, edges)"
    )
    checks: list[ErcCheck] | None = Field(
        default=None, description="Checks to run. Omit to run all of them."
    )


@router.get("/checks", response_model=list[CheckInfo])
async def list_checks():
    """Available checks with display labels."""
    return CHECK_CATALOG


@router.post("/run", response_model=ErcReport)
async def run_check(request: ErcRunRequest):
    """Check a diagram. Returns findings and suggested hardware tests."""
    return run_erc(request.diagram, request.checks)


@router.post("/report", response_class=PlainTextResponse)
async def run_text_report(request: ErcRunRequest):
    """Same as /run, rendered as a plain-text summary."""
    return render_text_report(run_erc(request.diagram, request.checks))
