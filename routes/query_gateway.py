"""
Query Gateway

JSON-over-HTTP access to the configured database for integration test
harnesses. Every POST endpoint takes { query, params } and differs only in
how the driver result is shaped into the response.

Paths:
- GET  /is_ready
- POST /fetchAll
- POST /insert
- POST /execute       (requires query)
- POST /fetchScalar   (requires query)
"""

from dataclasses import dataclass
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from models.query import ClientError, ExecutionError, LifecycleState, Outcome, QueryRequest, Success
from services.query_service import QueryService
from services.result_shaping import (
    ResultShaper,
    shape_insert_id,
    shape_rows,
    shape_rows_or_message,
    shape_scalar,
)


router = APIRouter(tags=["Query Gateway"])


@dataclass(frozen=True)
class EndpointPolicy:
    shaper: ResultShaper
    require_query: bool = False


FETCH_ALL = EndpointPolicy(shaper=shape_rows)
INSERT = EndpointPolicy(shaper=shape_insert_id)
EXECUTE = EndpointPolicy(shaper=shape_rows_or_message, require_query=True)
FETCH_SCALAR = EndpointPolicy(shaper=shape_scalar, require_query=True)


def outcome_to_response(outcome: Outcome) -> JSONResponse:
    if isinstance(outcome, Success):
        return JSONResponse(outcome.body)
    if isinstance(outcome, (ClientError, ExecutionError)):
        return JSONResponse(status_code=outcome.status_code, content={"error": outcome.message})
    raise TypeError(f"Unknown outcome: {outcome!r}")


async def _handle(request: Request, payload: QueryRequest, policy: EndpointPolicy) -> JSONResponse:
    service: QueryService = request.app.state.query_service
    outcome = await service.run(payload, policy.shaper, require_query=policy.require_query)
    return outcome_to_response(outcome)


@router.get("/is_ready")
async def is_ready(request: Request) -> Dict[str, Any]:
    state = getattr(request.app.state, "lifecycle", LifecycleState.STARTING)
    return {"ready": state is LifecycleState.READY}


@router.post("/fetchAll")
async def fetch_all(payload: QueryRequest, request: Request) -> JSONResponse:
    """Return the full result set."""
    return await _handle(request, payload, FETCH_ALL)


@router.post("/insert")
async def insert(payload: QueryRequest, request: Request) -> JSONResponse:
    """Return only the generated id, 0 when the statement produced none."""
    return await _handle(request, payload, INSERT)


@router.post("/execute")
async def execute(payload: QueryRequest, request: Request) -> JSONResponse:
    return await _handle(request, payload, EXECUTE)


@router.post("/fetchScalar")
async def fetch_scalar(payload: QueryRequest, request: Request) -> JSONResponse:
    """Return the first column of the first row."""
    return await _handle(request, payload, FETCH_SCALAR)
