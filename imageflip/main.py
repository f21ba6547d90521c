import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from imageflip.database import close_db, provision
from imageflip.middleware import (
    error_envelope_middleware,
    http_exception_handler,
    request_id_middleware,
)
from imageflip.storage import close_storage
from imageflip.task.dependencies import get_settings
from imageflip.task.router import router as task_router

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(levelname)s:%(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Image flip function

Rotates task images stored in Azure Blob Storage by 180 degrees and tracks
progress on the task's Cosmos DB record (Pending → In progress → Done).

* **RotateImg** — `GET /api/RotateImg?id=<task id>` returns the URL of the
  uploaded `<name>_flipped.<ext>` blob as plain text.

### Authentication
Function-level key, enforced by the Azure Functions host
(`x-functions-key` header or `code` query parameter).

### Error shape
```json
{ "error": { "code": "task_not_found", "message": "..." }, "request_id": "..." }
```
"""


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.cosmos_auto_provision and settings.cosmos_endpoint:
        await provision(settings)
    yield
    await close_db()
    await close_storage()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Image Flip Function",
        version="1.0.0",
        description=_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)

    app.include_router(task_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="imageflip")

    return app


app = create_app()
