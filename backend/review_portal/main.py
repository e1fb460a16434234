# review_portal/main.py
import datetime as dt
import logging
import os
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from review_portal.config import settings
from review_portal.core.db import init_db, close_db
from review_portal.core.errors import NotFoundError, register_error_handlers
from review_portal.core.security import ensure_signing_secret

from review_portal.api.routers import auth, reviews

logger = logging.getLogger("uvicorn.error")

STARTED_AT = time.monotonic()

app = FastAPI(title=settings.APP_NAME)

# CORS (Bearer header, no cookies)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

@app.on_event("startup")
async def on_startup():
    # Refuse to serve without a signing secret
    ensure_signing_secret()
    await init_db()
    logger.info("[startup] %s ready (env=%s, token ttl=%sh)",
                settings.APP_NAME, settings.env, settings.token_ttl_hours)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api")
app.include_router(reviews.router, prefix="/api")

@app.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }

# Must stay after the API routers: anything left under /api is unknown
@app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def api_not_found(path: str):
    raise NotFoundError("Not found")

# Client application shell for every other path
@app.get("/{path:path}", include_in_schema=False)
async def client_shell(path: str):
    return FileResponse(os.path.join(settings.static_dir, "index.html"), media_type="text/html")


def run() -> None:
    """Console entrypoint: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("review_portal.main:app", host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())
