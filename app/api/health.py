"""Liveness and readiness probes.

/health answers "is the process alive?" and /ready "should it get traffic?".
Everything this service needs is in-process, so both reduce to "it answered".
Once the grant store moves out of process, /ready is where its ping goes.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/ready")
async def ready() -> Response:
    return Response(status_code=200)
