"""
Pydantic Schemas for Odometer Recognition API
"""
from pydantic import BaseModel, Field
from typing import Optional

from ..services.contracts import ConfidenceLevel, RecognitionResult, Unit


class RecognitionResponse(BaseModel):
    """Schema for a recognized odometer reading."""
    mileage: int = Field(ge=0, le=1_000_000)
    confidence: float = Field(ge=0.0, le=1.0)
    raw_text: str
    detected_unit: Optional[Unit] = None
    confidence_level: ConfidenceLevel

    @classmethod
    def from_result(cls, result: RecognitionResult) -> "RecognitionResponse":
        return cls(
            mileage=result.mileage,
            confidence=round(result.confidence, 4),
            raw_text=result.raw_text,
            detected_unit=result.detected_unit,
            confidence_level=result.confidence_level,
        )


class ErrorResponse(BaseModel):
    """Schema for a recognition failure shown to the user."""
    code: str
    message: str
