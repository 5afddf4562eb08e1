"""
OCR Service for Odometer Mileage Recognition
Runs every preprocessing variant through the text recognizer and picks the
most plausible mileage reading.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import Settings, get_settings
from .contracts import (
    MAXIMUM_MILEAGE,
    MINIMUM_MILEAGE,
    Candidate,
    ObservationMetadata,
    PreprocessedImage,
    PreprocessingMethod,
    RecognitionResult,
    TextObservation,
)
from .correction import correct_text
from .errors import ImageProcessingFailed, InvalidMileage, NoTextFound, NoValidMileageFound
from .extraction import detect_unit, extract_numbers
from .preprocessor import ImagePreprocessor, ImageSource
from .recognizer import EasyOCRRecognizer, TextRecognizer
from .scoring import score_candidate
from .trip_meter import DEFAULT_FRACTION, DEFAULT_MIN_GAP, discard_trip_meter

logger = logging.getLogger(__name__)


@dataclass
class VariantReading:
    """Observations of one preprocessing variant with the numbers found in each."""
    method: PreprocessingMethod
    readings: List[Tuple[TextObservation, List[int]]] = field(default_factory=list)
    error: Optional[Exception] = None


def validate_mileage(mileage: int) -> None:
    """
    Raise InvalidMileage if the value is outside the sanity bound.
    """
    if mileage < MINIMUM_MILEAGE:
        raise InvalidMileage(reason="Mileage cannot be negative")
    if mileage > MAXIMUM_MILEAGE:
        raise InvalidMileage(reason="Mileage exceeds maximum reasonable value")


def is_valid_mileage(mileage: int) -> bool:
    return MINIMUM_MILEAGE <= mileage <= MAXIMUM_MILEAGE


class OdometerOCRService:
    """
    Extracts mileage readings from odometer photographs.

    Stateless: every call processes one image from scratch. The text
    recognizer is injected so tests can substitute a deterministic fake.
    """

    def __init__(
        self,
        recognizer: TextRecognizer,
        preprocessor: Optional[ImagePreprocessor] = None,
        trip_meter_fraction: float = DEFAULT_FRACTION,
        trip_meter_min_gap: int = DEFAULT_MIN_GAP,
    ):
        self.recognizer = recognizer
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.trip_meter_fraction = trip_meter_fraction
        self.trip_meter_min_gap = trip_meter_min_gap

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        recognizer: Optional[TextRecognizer] = None,
    ) -> "OdometerOCRService":
        """Build a service configured from application settings."""
        settings = settings or get_settings()
        if recognizer is None:
            recognizer = EasyOCRRecognizer(
                languages=settings.ocr_languages,
                gpu=settings.ocr_gpu,
                min_confidence=settings.ocr_min_confidence,
            )
        return cls(
            recognizer=recognizer,
            trip_meter_fraction=settings.trip_meter_fraction,
            trip_meter_min_gap=settings.trip_meter_min_gap,
        )

    # ==================== PUBLIC API ====================

    async def recognize_mileage(
        self,
        image: ImageSource,
        prior_mileage: Optional[int] = None,
    ) -> RecognitionResult:
        """
        Recognize the mileage shown in an odometer photograph.

        Args:
            image: Oriented, cropped photograph (array, encoded bytes or path)
            prior_mileage: Vehicle's last known mileage, if any

        Returns:
            RecognitionResult for the most plausible reading

        Raises:
            ImageProcessingFailed: the image could not be read
            NoTextFound: no variant produced any text
            NoValidMileageFound: text was found but no usable number
            InvalidMileage: only out-of-range numbers were found

        Any exception raised by the recognizer on every variant is re-raised.
        """
        if prior_mileage is not None:
            validate_mileage(prior_mileage)

        variants = await asyncio.to_thread(self.preprocessor.preprocess, image)
        if not variants:
            raise ImageProcessingFailed()

        cancelled = threading.Event()

        # Fan out: variants are independent; gather keeps the variant order
        try:
            variant_readings = await asyncio.gather(
                *(asyncio.to_thread(self._read_variant, variant, cancelled) for variant in variants)
            )
        except asyncio.CancelledError:
            cancelled.set()
            raise

        errors = [v.error for v in variant_readings if v.error is not None]
        if errors and len(errors) == len(variant_readings):
            logger.error("Text recognizer failed on all %d variants", len(errors))
            raise errors[-1]

        return self.select_result(list(variant_readings), prior_mileage=prior_mileage)

    def recognize_mileage_sync(
        self,
        image: ImageSource,
        prior_mileage: Optional[int] = None,
    ) -> RecognitionResult:
        """Blocking wrapper around recognize_mileage for scripts."""
        return asyncio.run(self.recognize_mileage(image, prior_mileage=prior_mileage))

    # ==================== PER VARIANT ====================

    def _read_variant(
        self,
        variant: PreprocessedImage,
        cancelled: Optional[threading.Event] = None,
    ) -> VariantReading:
        """
        Run OCR on one variant and extract numbers from every observation.

        A recognizer exception is logged and kept on the reading. Once
        `cancelled` is set the variant is skipped.
        """
        reading = VariantReading(method=variant.method)

        if cancelled is not None and cancelled.is_set():
            return reading

        try:
            observations = self.recognizer.recognize(variant.image)
        except Exception as e:
            logger.warning("OCR '%s' error: %s", variant.method.value, e)
            reading.error = e
            return reading

        if cancelled is not None and cancelled.is_set():
            return reading

        for observation in observations:
            numbers = extract_numbers(correct_text(observation.text))
            reading.readings.append((observation, numbers))

        logger.debug(
            "Pipeline '%s': %d observations",
            variant.method.value, len(reading.readings),
        )
        return reading

    # ==================== SELECTION ====================

    def collect_candidates(
        self, variant_readings: List[VariantReading]
    ) -> Tuple[List[Candidate], List[int]]:
        """
        Turn extracted numbers into candidates.

        Returns:
            Tuple of (in-range candidates, out-of-range values)
        """
        all_text = " ".join(
            observation.text
            for variant in variant_readings
            for observation, _ in variant.readings
        )
        run_unit = detect_unit(all_text)

        candidates = []
        out_of_range = []
        for variant in variant_readings:
            for observation, numbers in variant.readings:
                unit = detect_unit(observation.text) or run_unit
                metadata = (
                    ObservationMetadata(bounding_box=observation.bounding_box)
                    if observation.bounding_box is not None else None
                )
                for number in numbers:
                    if not is_valid_mileage(number):
                        out_of_range.append(number)
                        continue
                    candidates.append(Candidate(
                        mileage=number,
                        confidence=observation.confidence,
                        raw_text=observation.text,
                        metadata=metadata,
                        detected_unit=unit,
                    ))

        return candidates, out_of_range

    def select_result(
        self,
        variant_readings: List[VariantReading],
        prior_mileage: Optional[int] = None,
    ) -> RecognitionResult:
        """
        Pick the winning candidate across all variants.

        Deterministic for a given variant order: ties go to the candidate
        that comes first.
        """
        observation_count = sum(len(v.readings) for v in variant_readings)
        if observation_count == 0:
            raise NoTextFound()

        candidates, out_of_range = self.collect_candidates(variant_readings)

        if not candidates:
            if out_of_range:
                logger.info("Only out-of-range readings found: %s", out_of_range)
                validate_mileage(out_of_range[0])
            raise NoValidMileageFound()

        survivors = discard_trip_meter(
            candidates,
            key=lambda c: c.mileage,
            fraction=self.trip_meter_fraction,
            min_gap=self.trip_meter_min_gap,
        )

        # Area only counts when every survivor has a bounding box
        areas = [c.metadata.area for c in survivors if c.metadata is not None]
        max_area = max(areas) if areas and len(areas) == len(survivors) else None

        best = max(
            survivors,
            key=lambda c: score_candidate(
                c.mileage,
                c.confidence,
                metadata=c.metadata,
                max_area=max_area,
                prior_mileage=prior_mileage,
            ),
        )
        validate_mileage(best.mileage)

        logger.info(
            "Selected mileage %d (conf=%.2f, unit=%s) from %d candidates",
            best.mileage, best.confidence,
            best.detected_unit.value if best.detected_unit else None,
            len(survivors),
        )

        return RecognitionResult(
            mileage=best.mileage,
            confidence=best.confidence,
            raw_text=best.raw_text,
            detected_unit=best.detected_unit,
        )
