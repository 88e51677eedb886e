# restopos/main.py
from __future__ import annotations
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .auth import router as auth_router
from .errors import PosError
from .models import ensure_tables
from .routers.orders import router as orders_router
from .routers.printing import router as printing_router
from .routers.reports import router as reports_router
from .routers.tables import router as tables_router
from .utils.settings import APP_NAME, APP_VERSION, CORS_ORIGINS, STATIC_DIR, LOG_LEVEL, TABLE_COUNT

logging.basicConfig(level=LOG_LEVEL, format="[restopos] %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("restopos")

app = FastAPI(title=APP_NAME, version=APP_VERSION)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if CORS_ORIGINS == ["*"] else CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 啟動時確保資料表存在並建立桌號池
@app.on_event("startup")
def _bootstrap():
    ensure_tables(table_count=TABLE_COUNT)
    log.info("Database ready")

# ── 錯誤對應 ─────────────────────────────────────────────────────────
@app.exception_handler(PosError)
async def _pos_error(request: Request, exc: PosError):
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    else:
        log.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)

# 輸入格式錯誤一律 400
@app.exception_handler(RequestValidationError)
async def _request_invalid(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
        for e in exc.errors()
    ]
    return JSONResponse({"detail": "invalid request", "errors": errors}, status_code=400)

# ── health & root ───────────────────────────────────────────────────
@app.get("/healthz")
def healthz():
    return {"ok": True, "version": APP_VERSION}

@app.get("/")
def root():
    return {"service": APP_NAME, "docs": "/docs", "health": "/healthz"}

app.include_router(auth_router)
app.include_router(tables_router)
app.include_router(orders_router)
app.include_router(reports_router)
app.include_router(printing_router)

# 前端靜態檔（有資料夾才掛）
if STATIC_DIR and os.path.isdir(STATIC_DIR):
    app.mount("/ui", StaticFiles(directory=STATIC_DIR, html=True), name="static")
    log.info(f"Mounted static from: {STATIC_DIR}")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("restopos.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
