"""FastAPI routes for station marking."""
from __future__ import annotations

from functools import lru_cache
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.schemas import ErrorResp, MarkReq, QuestionSummary, StationSummary
from config.settings import settings
from grading.pipeline import MarkingPipeline, build_pipeline
from stations.catalog import StationCatalog, load_catalog


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

router = APIRouter(prefix="/api")


@lru_cache(maxsize=1)
def get_catalog() -> StationCatalog:
    return load_catalog(settings.STATIONS_PATH)


def get_pipeline(catalog: StationCatalog = Depends(get_catalog)) -> MarkingPipeline:
    return build_pipeline(settings, catalog)


@router.options("/mark")
def mark_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/mark",
    responses={400: {"model": ErrorResp}, 500: {"model": ErrorResp}},
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": MarkReq.model_json_schema()}}}},
)
async def mark(request: Request, pipeline: MarkingPipeline = Depends(get_pipeline)) -> JSONResponse:
    raw = await request.body()
    status_code, body = await run_in_threadpool(pipeline.handle, raw)
    return JSONResponse(body, status_code=status_code, headers=CORS_HEADERS)


@router.api_route("/mark", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def mark_wrong_method() -> JSONResponse:
    return JSONResponse({"error": "Method not allowed. Use POST."}, status_code=405, headers=CORS_HEADERS)


@router.get("/stations", response_model=List[StationSummary])
def list_stations(response: Response, catalog: StationCatalog = Depends(get_catalog)) -> List[StationSummary]:
    response.headers["Access-Control-Allow-Origin"] = "*"
    summaries: List[StationSummary] = []
    for station_id in catalog.ids():
        station = catalog.lookup(station_id)
        summaries.append(
            StationSummary(
                id=station.id,
                title=station.title,
                timings=station.timings.model_dump(),
                questions=[
                    QuestionSummary(id=question.id, label=question.label, prompt=question.prompt)
                    for question in station.questions
                ],
            )
        )
    return summaries
