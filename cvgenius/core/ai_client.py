"""
CVGenius • core/ai_client.py
Caller side of the rewrite endpoint. AI_API_BASE_URL overrides the
endpoint; otherwise the local proxy route is used.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from cvgenius.core import config
from cvgenius.core.cv_model import WorkExperience
from cvgenius.core.normalize import apply_suggestion
from cvgenius.core.rewrite import RewriteSuggestion


class RewriteClientError(Exception):
    pass


def rewrite_endpoint() -> str:
    if config.AI_API_BASE_URL:
        return config.AI_API_BASE_URL
    return f"http://{config.AI_PROXY_HOST}:{config.AI_PROXY_PORT}/api/ai/rewrite"


async def rewrite_work_experience(
    payload: Dict[str, Any],
    *,
    endpoint: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RewriteSuggestion:
    async with httpx.AsyncClient(transport=transport) as client:
        r = await client.post(endpoint or rewrite_endpoint(), json=payload)

    if r.status_code < 200 or r.status_code >= 300:
        try:
            body = r.json()
        except ValueError:
            body = {}
        error = body.get("error") if isinstance(body, dict) else None
        raise RewriteClientError(error if isinstance(error, str) else f"Rewrite request failed ({r.status_code})")

    return RewriteSuggestion.model_validate(r.json())


async def suggest_for(
    experience: WorkExperience,
    *,
    endpoint: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RewriteSuggestion:
    """Ask for a rewrite of one entry. An empty description is refused before any request."""
    if not experience.description.strip():
        raise RewriteClientError("Add a brief description before asking AI to improve it.")
    return await rewrite_work_experience(
        {
            "company": experience.company,
            "position": experience.position,
            "description": experience.description,
            "highlights": experience.highlights,
        },
        endpoint=endpoint,
        transport=transport,
    )


async def improve_experience(
    experience: WorkExperience,
    *,
    endpoint: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> WorkExperience:
    """Request a suggestion and accept it into the entry."""
    suggestion = await suggest_for(experience, endpoint=endpoint, transport=transport)
    return apply_suggestion(experience, suggestion.description, suggestion.highlights)
