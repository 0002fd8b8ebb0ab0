# app/main.py
from __future__ import annotations

import os
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import routers
from app.core.config import get_settings
from app.core.logging import configure_logging

# === إعدادات وتسجيل ===
settings = get_settings()
logger = configure_logging()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
)

# === CORS ===
def _as_list(val: Iterable | str | None, fallback: list[str]) -> list[str]:
    if val is None:
        return fallback
    if isinstance(val, (list, tuple, set)):
        items = [str(x).strip() for x in val if str(x).strip()]
        return items or fallback
    # يدعم "a,b,c"
    items = [x.strip() for x in str(val).split(",") if x.strip()]
    return items or fallback

allow_origins = _as_list(
    settings.allow_origins or os.getenv("ALLOWED_ORIGINS"),
    fallback=["*"],
)
allow_credentials = os.getenv("ALLOW_CREDENTIALS", "0") in ("1", "true", "True")

# ملاحظة أمنية: لا نسمح بالاعتمادات مع allow_origins=["*"].
if allow_credentials and ("*" in allow_origins):
    allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Routers ===
for router in routers:
    app.include_router(router)

# === Basic endpoints ===
@app.get("/")
async def root() -> dict:
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to Image Watermark API"}

@app.get("/health")
async def health_check() -> dict:
    logger.debug("Health check invoked")
    return {"status": "ok", "message": "Image Watermark API is running"}
