"""
============================================================
 CVGenius v1.2.0 • main.py (API server)
 Backend for the CV editor: AI rewrite proxy, CV rendering,
 and saved-CV storage.

 Features:
   • .env loading via cvgenius.core.config
   • CORS for the browser editor
   • Request tracing middleware (CVGENIUS_VERBOSE=1, skips /health)
   • /health and /__routes__ diagnostics
   • Serverless-style /functions/aiRewrite next to /api/ai/rewrite
============================================================
"""

import os
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from cvgenius.core import config
from cvgenius.core.utils import log_event
from cvgenius.api import ai_rewrite, cv_store, cv_tools

VERBOSE = os.getenv("CVGENIUS_VERBOSE", "0") == "1"

app = FastAPI(
    title="CVGenius API",
    description="CV editor backend: AI rewrite proxy, rendering and storage",
    version=config.APP_VERSION,
)


def _elog(event: str, meta: Optional[Dict[str, Any]] = None) -> None:
    if VERBOSE:
        log_event(event, meta or {})


# ============================ CORS ======================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=False,
    allow_methods=["*"], allow_headers=["*"],
)

# =========================== Register Routers ===========================
ROUTERS = {
    "ai_rewrite": ai_rewrite.router,
    "ai_rewrite_function": ai_rewrite.function_router,
    "cv_tools": cv_tools.router,
    "cv_store": cv_store.router,
}
for name, r in ROUTERS.items():
    app.include_router(r)
    _elog("router_registered", {"module": name, "prefix": r.prefix})


# ============================= Health ===================================
@app.get("/health", include_in_schema=False)
def health():
    return JSONResponse(
        {
            "ok": True,
            "service": config.APP_NAME,
            "version": config.APP_VERSION,
            "ai_configured": config.is_ai_configured(),
        },
        headers={"Cache-Control": "no-store"},
    )


@app.get("/__routes__", include_in_schema=False)
def __routes__():
    return sorted(
        f"{','.join(sorted(r.methods))} {getattr(r, 'path', getattr(r, 'path_format', ''))}"
        for r in app.router.routes
        if getattr(r, "methods", None)
    )


# ================== Middleware: Request/Response log ===================
@app.middleware("http")
async def trace_requests(request: Request, call_next):
    start = time.time()
    path = request.url.path
    method = request.method

    log_this = VERBOSE and method != "OPTIONS" and path not in {"/health", "/__routes__"}

    if log_this:
        _elog("http_request", {"method": method, "path": path})
    try:
        response: Response = await call_next(request)
    except Exception as e:
        log_event("middleware_error", {"path": path, "error": str(e)})
        return JSONResponse({"error": "Internal server error."}, status_code=500)

    if log_this:
        _elog("http_response", {
            "method": method, "path": path, "status": response.status_code,
            "ms": round((time.time() - start) * 1000, 1),
        })
    return response


# ================================ Main ==================================
def start_backend() -> None:
    import uvicorn

    host, port = config.AI_PROXY_HOST, config.AI_PROXY_PORT
    log_event("backend_start", {"host": host, "port": port})
    uvicorn.run(app, host=host, port=port, log_level="warning", timeout_keep_alive=25)


if __name__ == "__main__":
    print(f"🚀 Launching {config.APP_NAME} v{config.APP_VERSION}")
    print(f"🟢 AI proxy listening on http://{config.AI_PROXY_HOST}:{config.AI_PROXY_PORT}\n")
    start_backend()
