"""
Value types shared by the odometer recognition pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


MINIMUM_MILEAGE = 0
MAXIMUM_MILEAGE = 1_000_000

# Confidence thresholds used by the confirmation screen
HIGH_CONFIDENCE_THRESHOLD = 0.80
MEDIUM_CONFIDENCE_THRESHOLD = 0.50

KM_PER_MILE = 1.60934
MILES_PER_KM = 0.621371


class Unit(str, Enum):
    """Distance unit shown on an odometer."""
    MILES = "miles"
    KILOMETERS = "kilometers"

    @property
    def abbreviation(self) -> str:
        return "mi" if self is Unit.MILES else "km"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def convert(self, value: int, to: "Unit") -> int:
        """Convert a reading in this unit to `to`, rounded to the nearest integer."""
        if to is self:
            return value
        if self is Unit.MILES:
            return int(round(value * KM_PER_MILE))
        return int(round(value * MILES_PER_KM))


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PreprocessingMethod(Enum):
    """
    Closed set of preprocessing variants, in the order they are produced.

    ORIGINAL must stay first so the pipeline still works with zero
    enhancements.
    """
    ORIGINAL = "Original"
    CONTRAST_ENHANCED = "Contrast Enhanced"
    GRAYSCALE_SHARPENED = "Grayscale Sharpened"
    DOCUMENT_ENHANCED = "Document Enhanced"
    ADAPTIVE_BINARIZED = "Adaptive Binarized"


@dataclass(frozen=True)
class PreprocessedImage:
    method: PreprocessingMethod
    image: np.ndarray

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


@dataclass(frozen=True)
class BoundingBox:
    """
    Normalized axis-aligned rectangle; all values within [0, 1].
    (x, y) is the top-left corner.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class TextObservation:
    """One piece of text returned by a text recognizer (no correction applied)."""
    text: str
    confidence: float
    bounding_box: Optional[BoundingBox] = None


@dataclass(frozen=True)
class ObservationMetadata:
    bounding_box: BoundingBox

    @property
    def area(self) -> float:
        return self.bounding_box.area


@dataclass(frozen=True)
class Candidate:
    """A numeric reading taken from one observation, eligible for scoring."""
    mileage: int
    confidence: float
    raw_text: str
    metadata: Optional[ObservationMetadata] = None
    detected_unit: Optional[Unit] = None


@dataclass(frozen=True)
class RecognitionResult:
    """Final pipeline output for one photograph."""
    mileage: int
    confidence: float
    raw_text: str
    detected_unit: Optional[Unit] = None

    @property
    def confidence_level(self) -> ConfidenceLevel:
        if self.confidence >= HIGH_CONFIDENCE_THRESHOLD:
            return ConfidenceLevel.HIGH
        if self.confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
