"""
CVGenius • core/rewrite.py
AI rewrite gateway: validates a rewrite request, builds the prompt, calls an
OpenAI-compatible chat-completion provider (Groq by default), pulls the JSON
object out of the free-text reply and validates it.

One provider round trip per request. No retries.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

import httpx
from openai import APIStatusError, AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cvgenius.core import config
from cvgenius.core.utils import log_event


WARMING_UP_MESSAGE = "Model is warming up. Please try again in a moment."
GENERIC_FAILURE_MESSAGE = "Failed to generate rewrite."
NOT_CONFIGURED_MESSAGE = "AI service is not configured."

# Tests swap this for an httpx.MockTransport
UPSTREAM_TRANSPORT: Optional[httpx.AsyncBaseTransport] = None


# ============================================================
# 📦 Contracts
# ============================================================

class RewriteRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    company: Optional[str] = None
    position: Optional[str] = None
    description: str = Field(..., min_length=1)
    highlights: Optional[List[str]] = None


class RewriteSuggestion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str = Field(..., min_length=1, strict=True)
    highlights: List[str] = Field(default_factory=list)

    @field_validator("highlights", mode="before")
    @classmethod
    def _highlights_or_empty(cls, v: Any) -> Any:
        # malformed highlights degrade to [] instead of failing the suggestion
        if isinstance(v, list) and all(isinstance(h, str) for h in v):
            return v
        return []


# ============================================================
# ❌ Error Taxonomy
# ============================================================

class RewriteError(Exception):
    """Base class for gateway failures; carries the HTTP status to surface."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class NotConfiguredError(RewriteError):
    pass


class ProviderError(RewriteError):
    """Upstream answered with a non-2xx status."""


class EmptyResponseError(RewriteError):
    pass


class ResponseParseError(RewriteError):
    pass


class SchemaError(RewriteError):
    pass


def status_for(exc: BaseException) -> int:
    if isinstance(exc, RewriteError):
        return exc.status_code
    return 500


def message_for(exc: BaseException) -> str:
    status = status_for(exc)
    if status == 503:
        return WARMING_UP_MESSAGE
    if isinstance(exc, RewriteError):
        return str(exc) or GENERIC_FAILURE_MESSAGE
    return GENERIC_FAILURE_MESSAGE


# ============================================================
# ✅ Request Validation
# ============================================================

def flatten_validation_error(exc: ValidationError) -> Dict[str, Any]:
    """
    Field-level report: {"formErrors": [...], "fieldErrors": {"description": [...]}}.
    Errors without a field location land in formErrors.
    """
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        msg = _friendly_message(err)
        if loc:
            field_errors.setdefault(str(loc[0]), []).append(msg)
        else:
            form_errors.append(msg)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def _friendly_message(err: Dict[str, Any]) -> str:
    loc = err.get("loc") or ()
    if loc and loc[0] == "description" and err.get("type") in {"missing", "string_too_short"}:
        return "Description is required"
    return str(err.get("msg") or "Invalid value")


def validate_request(payload: Any) -> RewriteRequest:
    """Raises pydantic.ValidationError for anything that is not a valid request object."""
    return RewriteRequest.model_validate(payload)


# ============================================================
# 🧠 Prompt
# ============================================================

def build_prompt(req: RewriteRequest) -> str:
    highlights = [h for h in (req.highlights or []) if h]
    context_lines = [
        f"Company: {req.company}" if req.company else None,
        f"Role: {req.position}" if req.position else None,
        f"Current Description: {req.description}",
        ("Existing Highlights:\n- " + "\n- ".join(highlights)) if highlights else None,
    ]
    context = "\n".join(line for line in context_lines if line)

    return (
        "Improve the CV entry below. Return ONLY valid JSON matching "
        '{"description": string, "highlights": string[]}.\n\n'
        "Goals:\n"
        "- Polish the description into 2-3 crisp sentences.\n"
        "- Suggest 2-4 action-oriented bullet achievements tailored to the role.\n"
        "- Do not invent technologies the candidate never used.\n\n"
        f"{context}"
    )


def build_messages(prompt: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": config.REWRITE_SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


# ============================================================
# 🔎 Reply Parsing
# ============================================================

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Any:
    """
    Greedy match from the first '{' to the last '}' anywhere in the reply.
    Model output is free text, so surrounding prose is tolerated.
    """
    m = _JSON_OBJECT_RE.search(text or "")
    if not m:
        raise ResponseParseError("Failed to parse AI response as JSON")
    try:
        return json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise ResponseParseError("Failed to parse AI response as JSON") from e


def parse_suggestion(text: str) -> RewriteSuggestion:
    if not isinstance(text, str) or not text.strip():
        raise EmptyResponseError("Empty response from model")
    data = extract_json_object(text)
    try:
        return RewriteSuggestion.model_validate(data)
    except ValidationError as e:
        raise SchemaError("AI response did not include a usable description") from e


# ============================================================
# 🌐 Provider Call
# ============================================================

def _make_client(api_key: str, base_url: str) -> AsyncOpenAI:
    http_client = httpx.AsyncClient(transport=UPSTREAM_TRANSPORT) if UPSTREAM_TRANSPORT else None
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        max_retries=0,
        http_client=http_client,
    )


async def call_provider(
    prompt: str,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
) -> str:
    """Single chat-completion round trip; returns the raw reply text."""
    key = api_key if api_key is not None else config.GROQ_API_KEY
    if not key:
        raise NotConfiguredError(NOT_CONFIGURED_MESSAGE)

    client = _make_client(key, base_url or config.AI_PROVIDER_BASE_URL)
    try:
        resp = await client.chat.completions.create(
            model=model or config.GROQ_MODEL,
            messages=build_messages(prompt),
            temperature=config.REWRITE_TEMPERATURE,
            max_tokens=config.REWRITE_MAX_TOKENS,
        )
    except APIStatusError as e:
        log_event("ai_rewrite_provider_error", {"status": e.status_code, "body": str(e.body)[:400]})
        raise ProviderError(f"Provider request failed ({e.status_code})", status_code=e.status_code) from e
    finally:
        await client.close()

    choices = getattr(resp, "choices", None) or []
    if not choices or choices[0].message is None:
        return ""
    return choices[0].message.content or ""


async def rewrite_experience(
    req: RewriteRequest,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
) -> RewriteSuggestion:
    prompt = build_prompt(req)
    text = await call_provider(prompt, api_key=api_key, model=model, base_url=base_url)
    suggestion = parse_suggestion(text)
    log_event("ai_rewrite_ok", {
        "company": req.company or "",
        "position": req.position or "",
        "highlights": len(suggestion.highlights),
    })
    return suggestion
