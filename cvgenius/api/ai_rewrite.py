"""
CVGenius • api/ai_rewrite.py
AI rewrite endpoints for work-experience entries.

  • POST /api/ai/rewrite         (local proxy route)
  • ANY  /functions/aiRewrite    (serverless-style route: 204 on OPTIONS, 405 on non-POST)

Responses:
  200 {description, highlights}
  400 {error: {formErrors, fieldErrors}}
  <status> {error: <message>}
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from cvgenius.core import rewrite
from cvgenius.core.utils import log_event


router = APIRouter(prefix="/api/ai", tags=["ai"])
function_router = APIRouter(prefix="/functions", tags=["ai"])


async def _read_body(request: Request) -> Any:
    try:
        return await request.json()
    except Exception:
        return None


def _error(status: int, error: Any) -> JSONResponse:
    return JSONResponse({"error": error}, status_code=status)


async def _handle_rewrite(request: Request) -> JSONResponse:
    body = await _read_body(request)
    try:
        req = rewrite.validate_request(body)
    except ValidationError as e:
        report = rewrite.flatten_validation_error(e)
        log_event("ai_rewrite_invalid", report)
        return _error(400, report)

    try:
        suggestion = await rewrite.rewrite_experience(req)
    except Exception as e:
        status = rewrite.status_for(e)
        log_event("ai_rewrite_failed", {"status": status, "error": str(e), "type": type(e).__name__})
        return _error(status, rewrite.message_for(e))

    return JSONResponse(suggestion.model_dump())


@router.post("/rewrite")
async def api_rewrite(request: Request):
    """Polish a work-experience description and suggest highlight bullets."""
    return await _handle_rewrite(request)


@function_router.api_route("/aiRewrite", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def function_rewrite(request: Request):
    if request.method == "OPTIONS":
        return Response(status_code=204)
    if request.method != "POST":
        return _error(405, "Method not allowed")
    return await _handle_rewrite(request)
