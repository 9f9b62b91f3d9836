# ============================================================
#  CVGenius • core/cv_store.py
#  Per-user saved CVs, one JSON file per document:
#    <CVS_DIR>/<sha256(uid)>/<sha256(cv id)>.json
#    {"id", "uid", "name", "data": CVData, "createdAt", "updatedAt"}
#  Keys are hashed so distinct ids never share a path; the real id
#  lives in the payload. Timestamps are assigned here, never by the
#  caller. Last write wins per document id.
# ============================================================

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from cvgenius.core import config
from cvgenius.core.cv_model import CVData, SavedCVDocument, SavedCVSummary
from cvgenius.core.utils import ensure_dir, log_event, sha256_str, utc_now_iso


def _root() -> Path:
    return Path(config.CVS_DIR)


def _user_dir(uid: str) -> Path:
    if not (uid or "").strip():
        raise ValueError("User id is required.")
    return _root() / sha256_str(uid)


def _path_for(uid: str, cv_id: str) -> Path:
    if not (cv_id or "").strip():
        raise ValueError("CV id is required.")
    return _user_dir(uid) / f"{sha256_str(cv_id)}.json"


def _read(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _write(path: Path, payload: Dict[str, Any]) -> None:
    ensure_dir(path.parent)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _summary(d: Dict[str, Any]) -> SavedCVSummary:
    return SavedCVSummary(
        id=str(d["id"]),
        name=d.get("name") or config.DEFAULT_CV_NAME,
        created_at=d.get("createdAt"),
        updated_at=d.get("updatedAt"),
    )


def new_cv_id() -> str:
    return uuid.uuid4().hex


# ---------------------- public operations ----------------------

def list_cvs(uid: str) -> List[SavedCVSummary]:
    """Summaries for one user, most recently updated first."""
    user_dir = _user_dir(uid)
    if not user_dir.exists():
        return []
    docs = (_read(p) for p in user_dir.glob("*.json"))
    rows = [_summary(d) for d in docs if d.get("id")]
    return sorted(rows, key=lambda s: s.updated_at or "", reverse=True)


def load_cv(uid: str, cv_id: str) -> Optional[SavedCVDocument]:
    """Full document, or None when it does not exist."""
    path = _path_for(uid, cv_id)
    if not path.exists():
        return None
    d = _read(path)
    if d.get("id") != cv_id:
        return None
    return SavedCVDocument(**_summary(d).model_dump(), data=CVData.model_validate(d.get("data") or {}))

def save_cv(uid: str, name: str, data: CVData, cv_id: Optional[str] = None) -> str:
    """
    Upsert a snapshot and return its id.
    Without an id a new document is created. With an id the document is
    merge-written: name, data and updatedAt replaced, createdAt preserved.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValueError("CV name cannot be empty.")

    doc_id = cv_id or new_cv_id()
    path = _path_for(uid, doc_id)
    existing = _read(path) if cv_id and path.exists() else {}
    now = utc_now_iso()

    payload = dict(existing)
    payload.update({
        "id": doc_id,
        "uid": uid,
        "name": trimmed,
        "data": data.to_wire(),
        "updatedAt": now,
    })
    if not payload.get("createdAt"):
        payload["createdAt"] = now

    _write(path, payload)
    log_event("cv_saved", {"uid": uid, "id": doc_id, "name": trimmed, "merged": bool(existing)})
    return doc_id
