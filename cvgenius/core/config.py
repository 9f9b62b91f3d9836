"""
CVGenius • core/config.py
------------------------------------------------------------
Global configuration for backend constants, environment
variables, and directory paths.

Version : 1.2.0
"""

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv


# ============================================================
# 🌍 Environment Setup
# ============================================================

if not load_dotenv(dotenv_path=Path(__file__).resolve().parents[2] / ".env"):
    load_dotenv()
# .env.local wins over .env for local overrides
load_dotenv(dotenv_path=Path(__file__).resolve().parents[2] / ".env.local", override=True)


def _clean_env(val: str | None, default: str = "") -> str:
    v = (val if val is not None else default)
    return str(v).strip().strip('"').strip("'")


def _getenv_clean(name: str, default: str = "") -> str:
    return _clean_env(os.getenv(name), default)


def _getenv_int(name: str, default: int) -> int:
    try:
        return int(_getenv_clean(name, str(default)))
    except ValueError:
        return default


# ============================================================
# 📁 Directory Structure
# ============================================================

BASE_DIR = Path(__file__).resolve().parents[2]


def _resolve_env_path(var_name: str, default_path: Path) -> Path:
    raw = _getenv_clean(var_name, "")
    if not raw:
        return default_path
    p = Path(os.path.expanduser(raw))
    if not p.is_absolute():
        p = BASE_DIR / p
    return p


DATA_DIR = _resolve_env_path("CVGENIUS_DATA_DIR", BASE_DIR / "data")
CVS_DIR = DATA_DIR / "cvs"
LOGS_DIR = DATA_DIR / "logs"
CACHE_DIR = DATA_DIR / "cache"
TEMP_LATEX_DIR = CACHE_DIR / "latex_builds"

for d in (DATA_DIR, CVS_DIR, LOGS_DIR, CACHE_DIR, TEMP_LATEX_DIR):
    d.mkdir(parents=True, exist_ok=True)

LOG_PATH = LOGS_DIR / "events.jsonl"
LOG_PATH.touch(exist_ok=True)


# ============================================================
# ⚙️ Core Settings
# ============================================================

APP_NAME = "CVGenius"
APP_VERSION = "1.2.0"
DEBUG_MODE = _getenv_clean("DEBUG", "false").lower() == "true"

AI_PROXY_HOST = _getenv_clean("AI_PROXY_HOST", "127.0.0.1")
AI_PROXY_PORT = _getenv_int("AI_PROXY_PORT", 3001)

# Client-side override for where the rewrite endpoint lives
AI_API_BASE_URL = _getenv_clean("AI_API_BASE_URL", "").rstrip("/")


# ============================================================
# 🤖 Upstream Provider (OpenAI-compatible chat completions)
# ============================================================

GROQ_API_KEY = _getenv_clean("GROQ_API_KEY", "")
GROQ_MODEL = _getenv_clean("GROQ_MODEL", "llama-3.1-8b-instant")
AI_PROVIDER_BASE_URL = _getenv_clean("AI_PROVIDER_BASE_URL", "https://api.groq.com/openai/v1").rstrip("/")

REWRITE_SYSTEM_PROMPT = "You are an expert resume editor who always responds with strict JSON."
REWRITE_TEMPERATURE = 0.7
REWRITE_MAX_TOKENS = 500

if DEBUG_MODE and not GROQ_API_KEY:
    print("[CVGenius] ⚠️ GROQ_API_KEY not found in environment. /api/ai/rewrite will answer 500.")


# ============================================================
# 📄 Document Defaults
# ============================================================

DEFAULT_CV_NAME = "Untitled CV"
FONT_SIZE_POINTS = {"small": 10, "medium": 11, "large": 12}
DEFAULT_LINK_COLOR = "2563EB"


def is_ai_configured() -> bool:
    return bool(GROQ_API_KEY)


# ============================================================
# 📊 Diagnostics
# ============================================================

if __name__ == "__main__":
    print("=========== CVGenius CONFIG ===========")
    print(f"APP_NAME              : {APP_NAME}")
    print(f"VERSION               : {APP_VERSION}")
    print(f"BASE_DIR              : {BASE_DIR}")
    print(f"DATA_DIR              : {DATA_DIR}")
    print(f"CVS_DIR               : {CVS_DIR}")
    print(f"GROQ_API_KEY_LEN      : {len(GROQ_API_KEY) if GROQ_API_KEY else 0}")
    print(f"GROQ_MODEL            : {GROQ_MODEL}")
    print(f"AI_PROVIDER_BASE_URL  : {AI_PROVIDER_BASE_URL}")
    print(f"AI_PROXY              : {AI_PROXY_HOST}:{AI_PROXY_PORT}")
    print(f"AI_API_BASE_URL       : {AI_API_BASE_URL or '(same origin)'}")
