import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# ✅ Import All API Routes
from aiface.api.routes import analysis, auth, health, upload

from aiface.core import config
from aiface.core.exceptions import (
    ProviderFailure,
    QuotaExceeded,
    provider_failure_handler,
    quota_exceeded_handler,
)
from aiface.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_DIR)

    if config.RUN_MIGRATIONS:
        from aiface.db.migrate import run_migrations
        run_migrations()
    else:
        from aiface.db.init_db import init_db
        init_db()

    logger.info("AiFace API started")
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="AiFace API", lifespan=lifespan)

# ✅ CORS: only the web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.add_exception_handler(QuotaExceeded, quota_exceeded_handler)
app.add_exception_handler(ProviderFailure, provider_failure_handler)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(upload.router)
app.include_router(analysis.router)
app.include_router(health.router)

# Stored images, addressed by the path recorded on each Image
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
def root():
    return {"status": "AiFace API running"}
