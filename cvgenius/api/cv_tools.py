"""
CVGenius • api/cv_tools.py
Stateless helpers over a posted CV:

  • GET  /api/cv/empty             blank CV
  • GET  /api/cv/sample            built-in example CV
  • POST /api/cv/normalize         defaults + legacy field migration
  • POST /api/cv/apply-suggestion  merge an accepted AI rewrite into an entry
  • POST /api/cv/preview           document description (JSON)
  • POST /api/cv/tex               LaTeX source
  • POST /api/cv/pdf               compiled PDF
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import PlainTextResponse, Response

from cvgenius.core.compiler import compile_latex_safely
from cvgenius.core.cv_model import CVData, CVModel, WorkExperience
from cvgenius.core.latex import render_latex
from cvgenius.core.normalize import apply_suggestion, empty_cv, normalize_cv, sample_cv
from cvgenius.core.renderer import render_document
from cvgenius.core.rewrite import RewriteSuggestion
from cvgenius.core.utils import benchmark, download_name, log_event

router = APIRouter(prefix="/api/cv", tags=["cv"])


class ApplySuggestionBody(CVModel):
    experience: WorkExperience
    suggestion: RewriteSuggestion


@router.get("/empty")
async def get_empty():
    return empty_cv().to_wire()


@router.get("/sample")
async def get_sample():
    return sample_cv().to_wire()


@router.post("/normalize")
async def normalize(payload: Dict[str, Any] = Body(...)):
    return normalize_cv(payload).to_wire()


@router.post("/apply-suggestion")
async def accept_suggestion(body: ApplySuggestionBody):
    updated = apply_suggestion(body.experience, body.suggestion.description, body.suggestion.highlights)
    return updated.to_wire()


@router.post("/preview")
async def preview(cv: CVData):
    return render_document(cv).to_dict()


@router.post("/tex", response_class=PlainTextResponse)
async def tex(cv: CVData):
    return render_latex(render_document(cv))


@router.post("/pdf")
def pdf(cv: CVData):
    source = render_latex(render_document(cv))
    with benchmark("render_pdf"):
        pdf_bytes = compile_latex_safely(source)
    if pdf_bytes is None:
        log_event("cv_pdf_unavailable", {"name": cv.personal_info.full_name})
        raise HTTPException(status_code=503, detail="PDF rendering is unavailable. Please try again.")
    filename = download_name(cv.personal_info.full_name)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
