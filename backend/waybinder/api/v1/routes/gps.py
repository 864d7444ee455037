"""
GPS File Routes

Endpoints for parsing uploaded GPS files and listing trackpoints.
Persistence of the result is left to the caller.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from waybinder.config import settings
from waybinder.features.gps import (
    GPSPipelineService,
    ParseResult,
    TrackpointPage,
    TrackpointQuery,
    extension_from_filename,
    extract_trackpoints,
)
from waybinder.shared.constants import SIMPLIFICATION_TOLERANCES, SimplificationLevel
from waybinder.shared.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/parse", response_model=ParseResult, response_model_exclude_none=True)
async def parse_gps_file(
    file: UploadFile = File(...),
    simplification: Optional[SimplificationLevel] = Query(default=None),
):
    """
    Upload and parse a GPS file (GPX, KML, FIT or TCX).

    Returns the full geometry and its statistics, including a
    simplified geometry for rendering unless simplification=none.
    """
    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > settings.max_upload_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large (max {settings.max_upload_size_mb}MB)"
        )

    if simplification is None:
        tolerance = settings.gps_simplify_tolerance
    else:
        tolerance = SIMPLIFICATION_TOLERANCES[simplification]

    # Parsing and simplification are CPU-bound; keep them off the event loop
    result = await run_in_threadpool(
        GPSPipelineService.process,
        content,
        extension_from_filename(file.filename),
        simplify_tolerance=tolerance,
        moving_speed_threshold_kmh=settings.gps_moving_speed_threshold_kmh,
    )

    if not result.success:
        logger.info(f"Rejected GPS upload {file.filename!r}: {result.error}")
        raise HTTPException(status_code=400, detail=result.error)

    return result


@router.post("/trackpoints", response_model=TrackpointPage)
def list_trackpoints(query: TrackpointQuery):
    """
    List trackpoints of a stored geometry with pagination and time filter.

    start and end are optional; giving only one filters an open-ended range.
    """
    start = _parse_bound(query.start, "start")
    end = _parse_bound(query.end, "end")
    time_range = (start, end) if start is not None or end is not None else None

    return extract_trackpoints(
        query.geometry,
        page=query.page,
        limit=query.limit,
        time_range=time_range,
    )


def _parse_bound(value: Optional[str], name: str):
    if not value:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise HTTPException(status_code=400, detail=f"Invalid {name} time")
    return parsed
