# ============================================================
#  CVGenius • api/cv_store.py
#  Saved-CV endpoints, keyed by the caller-supplied user id.
#   • GET  /api/users/{uid}/cvs                 list summaries (newest first)
#   • GET  /api/users/{uid}/cvs/{cv_id}         full document (404 if absent)
#   • POST /api/users/{uid}/cvs                 save / upsert {id?, name, data}
#   • POST /api/users/{uid}/cvs/{cv_id}/copy    save-as-copy under a new id
# ============================================================

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException

from cvgenius.core import config
from cvgenius.core import cv_store
from cvgenius.core.cv_model import CVData, CVModel

router = APIRouter(prefix="/api/users", tags=["cvs"])


class SaveCVBody(CVModel):
    id: Optional[str] = None
    name: str = ""
    data: CVData


class CopyCVBody(CVModel):
    name: Optional[str] = None


@router.get("/{uid}/cvs")
async def list_cvs(uid: str):
    items = cv_store.list_cvs(uid)
    return {"items": [s.to_wire() for s in items]}


@router.get("/{uid}/cvs/{cv_id}")
async def get_cv(uid: str, cv_id: str):
    doc = cv_store.load_cv(uid, cv_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="CV not found")
    return doc.to_wire()


@router.post("/{uid}/cvs")
async def save_cv(uid: str, body: SaveCVBody):
    try:
        cv_id = cv_store.save_cv(uid, body.name, body.data, cv_id=body.id or None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "id": cv_id}


@router.post("/{uid}/cvs/{cv_id}/copy")
async def copy_cv(uid: str, cv_id: str, body: Optional[CopyCVBody] = None):
    source = cv_store.load_cv(uid, cv_id)
    if source is None:
        raise HTTPException(status_code=404, detail="CV not found")

    name = (body.name if body else None) or f"{source.name or config.DEFAULT_CV_NAME} Copy"
    try:
        new_id = cv_store.save_cv(uid, name, source.data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "id": new_id}
