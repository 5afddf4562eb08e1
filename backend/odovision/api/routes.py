"""
OdoVision REST API Routes
"""
import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Query
from fastapi.responses import JSONResponse

from ..schemas.recognition import ErrorResponse, RecognitionResponse
from ..services.errors import OCRError
from ..services.ocr import OdometerOCRService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["odometer"])


@lru_cache()
def get_ocr_service() -> OdometerOCRService:
    """Dependency to get the OCR service (the EasyOCR reader is loaded once)."""
    return OdometerOCRService.from_settings()


@router.post(
    "/odometer/read",
    response_model=RecognitionResponse,
    responses={422: {"model": ErrorResponse}},
)
async def read_odometer(
    file: UploadFile = File(...),
    prior_mileage: Optional[int] = Query(
        None, ge=0, description="Vehicle's last known mileage"
    ),
    ocr_service: OdometerOCRService = Depends(get_ocr_service),
):
    """
    Upload an odometer photo and read the mileage.

    Returns the recognized mileage, or a 422 with a user-facing reason.
    """
    # Validate file type
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="File must be an image")

    content = await file.read()

    try:
        result = await ocr_service.recognize_mileage(content, prior_mileage=prior_mileage)
    except OCRError as e:
        logger.info("Recognition failed: %s", e.code)
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(code=e.code, message=e.user_message).model_dump(),
        )
    except Exception as e:
        logger.exception("Processing error")
        raise HTTPException(status_code=500, detail=f"Processing error: {str(e)}")

    return RecognitionResponse.from_result(result)


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
