"""API route handlers for farm profiles and model-backed advisories.

POST /api/user-inputs          — persist a farm profile
GET  /api/user-inputs/{userId} — profile history, most recent first
POST /api/crop-analysis        — advisory report as a PDF download
POST /api/crop-plan            — structured crop plan (optionally translated)
POST /api/disease-detection    — disease diagnosis JSON
"""

import asyncio
import logging

from fastapi import APIRouter
from fastapi.responses import Response

from agriadvisor.api.schemas import (
    CropPlanRequest,
    DiseaseDetectionRequest,
    ErrorResponse,
    FarmProfileRequest,
    SaveUserInputResponse,
    UserInputRecord,
)
from agriadvisor.core.errors import AdvisoryError, UpstreamError, ValidationError
from agriadvisor.pipeline.advisory import diagnose_disease, generate_advisory_report, generate_crop_plan
from agriadvisor.render.pdf import render_report
from agriadvisor.storage.db import get_session
from agriadvisor.storage.user_inputs import list_user_inputs, save_user_input

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["advisory"])

REPORT_FILENAME = "farm_advisory_report.pdf"

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing required field"},
    500: {"model": ErrorResponse, "description": "Upstream or store failure"},
}


def _require_profile(request: FarmProfileRequest) -> None:
    missing = request.missing_fields()
    if missing:
        logger.info("Rejected farm profile, missing: %s", ", ".join(missing))
        raise ValidationError("Missing required fields")


def _upstream_failure(e: Exception, endpoint: str) -> UpstreamError:
    """Wrap an unexpected failure so the client sees a 500 with its message."""
    logger.exception("Unexpected failure in %s", endpoint, extra={"endpoint": endpoint})
    return UpstreamError(str(e))


# ---------------------------------------------------------------------------
# Farm profile history
# ---------------------------------------------------------------------------

@router.post("/user-inputs", response_model=SaveUserInputResponse, responses=_ERROR_RESPONSES)
async def create_user_input(request: FarmProfileRequest):
    """Persist a farm profile; language defaults to "en", user to "anonymous"."""
    _require_profile(request)

    session = await get_session()
    try:
        row_id = await save_user_input(session, request.to_profile())
    finally:
        await session.close()
    return SaveUserInputResponse(success=True, id=row_id)


@router.get("/user-inputs/{user_id}", response_model=list[UserInputRecord], responses=_ERROR_RESPONSES)
async def get_user_inputs(user_id: str):
    """Profile history for one user, most recent first."""
    session = await get_session()
    try:
        rows = await list_user_inputs(session, user_id)
    finally:
        await session.close()
    return [UserInputRecord(**row) for row in rows]


# ---------------------------------------------------------------------------
# Model-backed advisories
# ---------------------------------------------------------------------------

@router.post(
    "/crop-analysis",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Advisory report PDF"},
        **_ERROR_RESPONSES,
    },
)
async def crop_analysis(request: FarmProfileRequest):
    """Generate the farm advisory, translate it if asked, and return it as a PDF."""
    _require_profile(request)
    profile = request.to_profile()
    logger.info(
        "Advisory requested for %s", profile.location,
        extra={"endpoint": "crop-analysis", "language": profile.language},
    )

    try:
        title, result = await generate_advisory_report(profile, api_key=request.api_key)
        # ReportLab layout is CPU-bound
        pdf = await asyncio.to_thread(render_report, title, result)
    except AdvisoryError:
        raise
    except Exception as e:
        raise _upstream_failure(e, "crop-analysis") from e

    # Content-Length is set from the body
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{REPORT_FILENAME}"'},
    )


@router.post("/crop-plan", responses=_ERROR_RESPONSES)
async def crop_plan(request: CropPlanRequest):
    """Week-by-week plan for one crop, translated field by field when language != "en"."""
    if not request.crop_name:
        raise ValidationError("Crop name is required")

    try:
        return await generate_crop_plan(
            request.crop_name,
            location=request.location,
            land_size=request.land_size,
            land_type=request.land_type,
            season=request.season,
            language=request.language,
            api_key=request.api_key,
        )
    except AdvisoryError:
        raise
    except Exception as e:
        raise _upstream_failure(e, "crop-plan") from e


@router.post("/disease-detection", responses=_ERROR_RESPONSES)
async def disease_detection(request: DiseaseDetectionRequest):
    """Diagnose a crop disease from a base64 image payload."""
    if not request.image_base64:
        raise ValidationError("Image is required")

    try:
        return await diagnose_disease(request.image_base64, request.crop_type)
    except AdvisoryError:
        raise
    except Exception as e:
        raise _upstream_failure(e, "disease-detection") from e
