"""
CVGenius • core/compiler.py
LaTeX -> PDF for rendered CVs.

Each build gets its own scratch directory under config.TEMP_LATEX_DIR.
pdflatex runs with shell escape disabled and kpathsea restricted to the
build directory, so a CV can neither run commands nor read files.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from cvgenius.core import config
from cvgenius.core.utils import log_event

PDFLATEX_TIMEOUT_S = 90
# hyperref needs a second run to resolve link anchors
PDFLATEX_PASSES = 2
PDFLATEX_FLAGS = ["-interaction=nonstopmode", "-halt-on-error", "-no-shell-escape"]
JOB_NAME = "cv"

_SANDBOX = {"openin_any": "p", "openout_any": "p", "shell_escape": "f"}


def pdflatex_path() -> Optional[str]:
    return shutil.which("pdflatex")


def _sandbox_env() -> Dict[str, str]:
    env = dict(os.environ)
    env.update(_SANDBOX)
    return env


def _command(exe: str) -> List[str]:
    # relative source name: openin_any=p refuses absolute paths
    return [exe, *PDFLATEX_FLAGS, f"{JOB_NAME}.tex"]


def _run_pass(exe: str, workdir: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        _command(exe),
        cwd=workdir,
        env=_sandbox_env(),
        capture_output=True,
        text=True,
        errors="replace",
        timeout=PDFLATEX_TIMEOUT_S,
        check=False,
    )


def _last_lines(text: str, n: int = 20) -> str:
    return "\n".join((text or "").splitlines()[-n:])


def compile_latex_safely(tex_string: str) -> bytes | None:
    """Returns the PDF bytes, or None (with the reason in the event log)."""
    exe = pdflatex_path()
    if exe is None:
        log_event("pdf_build_skipped", {"reason": "pdflatex not on PATH"})
        return None

    root = Path(config.TEMP_LATEX_DIR)
    root.mkdir(parents=True, exist_ok=True)

    try:
        with tempfile.TemporaryDirectory(prefix="cv-", dir=root) as scratch:
            workdir = Path(scratch)
            (workdir / f"{JOB_NAME}.tex").write_text(tex_string, encoding="utf-8")

            for n in range(1, PDFLATEX_PASSES + 1):
                proc = _run_pass(exe, workdir)
                if proc.returncode != 0:
                    log_event("pdf_build_failed", {"pass": n, "log": _last_lines(proc.stdout)})
                    return None

            pdf = workdir / f"{JOB_NAME}.pdf"
            if not pdf.is_file():
                log_event("pdf_build_failed", {"pass": PDFLATEX_PASSES, "log": "no output file"})
                return None
            data = pdf.read_bytes()
    except subprocess.TimeoutExpired:
        log_event("pdf_build_timeout", {"seconds": PDFLATEX_TIMEOUT_S})
        return None
    except OSError as e:
        log_event("pdf_build_error", {"error": str(e)})
        return None

    log_event("pdf_built", {"bytes": len(data)})
    return data
