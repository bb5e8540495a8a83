"""GET /api/v1/meta/version: application name and version."""

from __future__ import annotations

from fastapi import APIRouter, Request

from version import get_version

router = APIRouter(prefix="/meta", tags=["meta"])


@router.get("/version", summary="Application version")
def meta_version(request: Request) -> dict:
    """Return app title and version (repo root VERSION file)."""
    return {"app": request.app.title, "version": get_version()}
