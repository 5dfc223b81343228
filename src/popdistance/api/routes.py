"""
API routes.

Endpoints:
- GET  `/`, `/json`, `/csv`: usage hints for the matching POST endpoint.
- POST `/`, `/json`: JSON array of city rows and/or nested country objects.
- POST `/csv`: delimited text body (`text/csv`), first line is a header.
- GET  `/health`: liveness probe.

Every POST accepts repeatable `?period=` query parameters to restrict the computation
to some periods. Responses list `{period, name_a, name_b, distance_km}` in engine order.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool

from popdistance.config.settings import get_settings
from popdistance.domain.errors import DomainError, InvalidArgumentError
from popdistance.domain.models import PairResultOut
from popdistance.engine.pairwise import distance
from popdistance.ingestion.base import RecordParser
from popdistance.ingestion.loader import build_parser

logger = logging.getLogger(__name__)

router = APIRouter()


def _compute(parser: RecordParser, raw: Any) -> list[PairResultOut]:
    """Parse + compute, mapping engine errors onto HTTP errors."""
    settings = get_settings()
    try:
        aggregates = parser.parse(raw)
        results = distance(aggregates, engine=settings.engine)
    except InvalidArgumentError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except DomainError as e:
        raise HTTPException(
            status_code=422,
            detail={"code": "DOMAIN_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        logger.exception("Distance computation failed")
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": str(e)},
        ) from e
    return [PairResultOut(**r.as_dict()) for r in results]


@router.get("/")
@router.get("/json")
def get_json_usage() -> dict:
    return {"message": "Submit a JSON array of Country objects."}


@router.get("/csv")
def get_csv_usage() -> dict:
    return {"message": "Submit a CSV string of country-city data."}


@router.get("/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.post("/", response_model=list[PairResultOut])
@router.post("/json", response_model=list[PairResultOut])
def post_json(
    payload: list[Any] = Body(...),
    period: list[str] | None = Query(default=None),
) -> list[PairResultOut]:
    """Compute population-weighted distances from a JSON array."""
    return _compute(build_parser("json", periods=period), payload)


@router.post("/csv", response_model=list[PairResultOut])
async def post_csv(request: Request, period: list[str] | None = Query(default=None)) -> list[PairResultOut]:
    """Compute population-weighted distances from a delimited-text body."""
    parser = build_parser("csv", periods=period)
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type and content_type not in parser.media_types:
        raise HTTPException(
            status_code=415,
            detail={"code": "UNSUPPORTED_MEDIA_TYPE", "message": f"Expected text/csv, got {content_type}."},
        )
    body = await request.body()
    # CPU-bound; keep it off the event loop.
    return await run_in_threadpool(_compute, parser, body)
