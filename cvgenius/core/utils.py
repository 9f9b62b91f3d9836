"""
CVGenius • core/utils.py
Shared helpers: the JSONL event log, filename helpers, timestamps
and LaTeX escaping.
"""

from __future__ import annotations

import hashlib
import json
import re
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from cvgenius.core import config

_PREVIEW_CHARS = 800


# ============================================================
# 🗂️ Filesystem / Naming
# ============================================================
def ensure_dir(p: Path | str) -> None:
    Path(p).mkdir(parents=True, exist_ok=True)


def safe_filename(name: Optional[str]) -> str:
    """Letters, digits, `_`, `.` and `-` only; at most 64 chars."""
    if not name:
        return "file"
    cleaned = re.sub(r"[^A-Za-z0-9_.-]", "_", name).strip("._")
    return (cleaned or "file")[:64]


def sha256_str(data: Optional[str]) -> str:
    """Hex SHA-256 of a string; used as a collision-free on-disk key."""
    return hashlib.sha256((data or "").encode("utf-8")).hexdigest()


def download_name(full_name: Optional[str]) -> str:
    """`Jane Doe` -> `Jane_Doe-resume.pdf`; blank names fall back to `cv-resume.pdf`."""
    base = (full_name or "").strip()
    return f"{safe_filename(base) if base else 'cv'}-resume.pdf"


# ============================================================
# 📜 LaTeX Text Escaping
# ============================================================
_TEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
_TEX_SPECIALS_RE = re.compile("|".join(re.escape(k) for k in _TEX_SPECIALS))


def tex_escape(text: Optional[str]) -> str:
    """Escape user-entered plain text so it renders literally inside LaTeX."""
    if not text:
        return ""
    return _TEX_SPECIALS_RE.sub(lambda m: _TEX_SPECIALS[m.group(0)], str(text))


# ============================================================
# 🧠 Event Log
# ============================================================
def utc_now_iso() -> str:
    """UTC ISO-8601 with microseconds and a trailing Z, so values sort lexically."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def log_event(event: str, meta: Optional[Dict[str, Any]] = None) -> None:
    """
    One JSON line per event in config.LOG_PATH, echoed to stdout.
    Values that are not JSON-serializable are written with str().
    Logging never raises into the caller.
    """
    record = {"timestamp": utc_now_iso(), "event": str(event), "meta": meta or {}}
    line = json.dumps(record, ensure_ascii=False, default=str)

    preview = json.dumps(record["meta"], ensure_ascii=False, default=str)
    if len(preview) > _PREVIEW_CHARS:
        preview = preview[:_PREVIEW_CHARS] + "…"
    print(f"[{record['timestamp']}] {record['event']} :: {preview}")

    log_path = Path(config.LOG_PATH)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError as e:
        print(f"[{config.APP_NAME}] ⚠️ Failed to write event log: {e}")


@contextmanager
def benchmark(name: str) -> Iterator[None]:
    """Log how long the wrapped block took, even when it raises."""
    start = time.perf_counter()
    try:
        yield
    finally:
        log_event("benchmark", {"name": name, "duration_ms": round((time.perf_counter() - start) * 1000.0, 1)})
