# src/popdistance/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and registers the routes. Parsing lives in
`popdistance.ingestion` and the numeric work in `popdistance.engine`.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from popdistance.config.settings import get_settings
from popdistance.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="PopDistance API", version="0.1.0", docs_url="/docs")

cors_origins = get_settings().api.cors_origins
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(RequestValidationError)
async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 with the same envelope as other input errors."""
    first = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{loc}: {first.get('msg', 'invalid request')}" if loc else first.get("msg", "invalid request")
    return JSONResponse(status_code=400, content={"detail": {"code": "VALIDATION_ERROR", "message": message}})


app.include_router(router)
