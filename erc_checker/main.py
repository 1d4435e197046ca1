"""Artifact ERC — Electrical Rule Check service

Stateless responsibilities:
  1. Check wiring diagrams against the ERC rule catalog
  2. Suggest hardware tests per wire
  3. List the available checks for selection UIs

No persistence. Every request is checked from scratch.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from erc_checker import __version__
from erc_checker.config import get_settings
from erc_checker.routers import erc


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    application = FastAPI(
        title=settings.app_name,
        version=__version__,
        description=(
            "Electrical Rule Check for wiring diagrams.\n\n"
            "Post a diagram, get findings and suggested hardware tests."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Electrical Rule Check (stateless) ───
    application.include_router(erc.router, prefix="/api/erc", tags=["ERC"])

    @application.get("/health")
    async def health_check():
        return {"status": "ok", "service": "artifact-erc", "version": __version__}

    return application


app = create_app()
