#!/usr/bin/env python3
"""FakeSO: Q&A forum with private threads and topic forums.

Run with: uvicorn server:app --host 0.0.0.0 --port 8000
"""

import logging
import os
import sqlite3

import config

# Register all routes
import routes_accounts  # noqa: F401
import routes_answers  # noqa: F401
import routes_forums  # noqa: F401
import routes_meta  # noqa: F401
import routes_questions  # noqa: F401
import routes_threads  # noqa: F401
from broadcast import Broadcaster
from config import app
from db import init_db
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from repository import ConflictError, Repository
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def configure(db_path=None) -> Repository:
    """Create the schema and attach the service handles to the app."""
    db_path = db_path or config.DB_PATH
    init_db(db_path)
    repository = Repository(db_path)
    app.state.repository = repository
    app.state.broadcaster = Broadcaster()
    return repository


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        problems.append(f"{where}: {err.get('msg')}" if where else err.get("msg", ""))
    return JSONResponse(
        {"error": "Invalid request: " + "; ".join(problems)}, status_code=400
    )


@app.exception_handler(ConflictError)
async def conflict_error(request: Request, exc: ConflictError):
    return JSONResponse({"error": f"Conflict: {exc}"}, status_code=400)


@app.exception_handler(sqlite3.Error)
async def store_error(request: Request, exc: sqlite3.Error):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        {"error": f"Error when handling {request.method} {request.url.path}: {exc}"},
        status_code=500,
    )


@app.on_event("startup")
async def startup():
    if getattr(app.state, "repository", None) is None:
        configure()
    logger.info("FakeSO started. DB at %s", app.state.repository.db_path)


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("FAKESO_PORT", "8000"))
    host = os.environ.get("FAKESO_BIND_HOST", "127.0.0.1")
    uvicorn.run(app, host=host, port=port)
