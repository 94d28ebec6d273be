"""
api/main.py -- FastAPI application entry point for the cake-order backend.

Run with:  python main.py serve
           uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware  -- open to browser front-ends (CORS_ORIGINS)
  2. log_requests    -- one log line per request with status and latency

Lifespan opens the single shared Database handle, builds the three
repositories on it, optionally reseeds the layer catalog, and disposes the
handle on shutdown. A store that cannot be reached at startup aborts startup:
the process never begins serving.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, RouteInfo, wire_name
from api.routes.cakeorders import router as cakeorders_router
from api.routes.layers import router as layers_router
from api.routes.sessions import router as sessions_router
from api.routes.users import router as users_router
from auth.store import UserStore
from catalog.store import LayerStore
from core.config import get_settings
from core.database import Database
from core.errors import InvalidCredentials, NotFound, Unauthorized, ValidationError
from orders.store import OrderStore

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cakemaker.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the store, wire repositories into app.state, close on shutdown.

    Startup order matters:
      1. Database ping first -- connectivity failure must stop startup here.
      2. Repositories second -- each creates its own tables on the shared handle.
      3. Catalog reload last, and only when RESET_DATABASE is set, so it
         completes before the listener accepts the first request.
    """
    settings = get_settings()
    logger.info("Cake maker API starting up (order schema: %s)", settings.cake_order_schema)

    db = Database(settings.database_url)
    try:
        db.ping()
    except SQLAlchemyError:
        logger.critical("Document store unreachable at startup -- refusing to serve")
        db.close()
        raise
    app.state.db = db
    app.state.user_store = UserStore(db)
    app.state.order_store = OrderStore(db, schema=settings.cake_order_schema)
    app.state.layer_store = LayerStore(db)
    logger.info("Stores initialized")

    if settings.reset_database:
        app.state.layer_store.reload()

    yield

    db.close()
    logger.info("Cake maker API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Cake Maker API",
    description="Sign up, sign in, and order custom cakes.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(users_router, tags=["Users"])
app.include_router(sessions_router, tags=["Sessions"])
app.include_router(cakeorders_router, tags=["Cake orders"])
app.include_router(layers_router, tags=["Layers"])


@app.get("/", response_model=list[RouteInfo], tags=["Index"])
async def list_endpoints() -> list[RouteInfo]:
    """List every registered API route with its methods, in registration order.

    Read from the generated OpenAPI paths, which include routes mounted with
    include_router however the installed FastAPI release stores them.
    """
    paths = app.openapi().get("paths", {})
    return [
        RouteInfo(path=path, methods=sorted(method.upper() for method in operations))
        for path, operations in paths.items()
    ]


# ---------------------------------------------------------------------------
# Exception handlers
#
# Domain errors from core/errors.py are translated here and nowhere else.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str, errors: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, errors=errors).model_dump(exclude_none=True),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """400 with every invalid field, keyed by wire name. Covers DuplicateEmail too."""
    return _error(400, exc.message, {wire_name(k): v for k, v in exc.errors.items()})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return _error(400, exc.message)


@app.exception_handler(InvalidCredentials)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentials) -> JSONResponse:
    resp = JSONResponse(status_code=400, content={"notFound": True})
    resp.headers["Cache-Control"] = "no-store"
    return resp


@app.exception_handler(Unauthorized)
async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse(status_code=401, content={"loggedOut": True, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or wrongly typed fields: same 400 envelope as domain validation."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        # loc[0] is "body" / "query" / "path"
        key = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
        errors.setdefault(key, err.get("msg", "Invalid value."))
    return _error(400, "Request validation failed.", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "An unexpected error occurred.")
