from __future__ import annotations

import unittest

from odovision.services.contracts import (
    BoundingBox,
    ConfidenceLevel,
    PreprocessingMethod,
    RecognitionResult,
    Unit,
)
from odovision.services.errors import (
    ImageProcessingFailed,
    InvalidMileage,
    NoTextFound,
    NoValidMileageFound,
    OCRError,
)


class TestUnit(unittest.TestCase):
    def test_labels(self) -> None:
        self.assertEqual(Unit.MILES.abbreviation, "mi")
        self.assertEqual(Unit.KILOMETERS.abbreviation, "km")
        self.assertEqual(Unit.KILOMETERS.display_name, "Kilometers")

    def test_convert(self) -> None:
        self.assertEqual(Unit.MILES.convert(100, Unit.KILOMETERS), 161)
        self.assertEqual(Unit.KILOMETERS.convert(161, Unit.MILES), 100)
        self.assertEqual(Unit.MILES.convert(52347, Unit.MILES), 52347)


class TestRecognitionResult(unittest.TestCase):
    def test_confidence_level_thresholds(self) -> None:
        cases = [(0.95, ConfidenceLevel.HIGH), (0.80, ConfidenceLevel.HIGH),
                 (0.79, ConfidenceLevel.MEDIUM), (0.50, ConfidenceLevel.MEDIUM),
                 (0.49, ConfidenceLevel.LOW)]
        for confidence, expected in cases:
            with self.subTest(confidence=confidence):
                result = RecognitionResult(mileage=52347, confidence=confidence, raw_text="52347")
                self.assertEqual(result.confidence_level, expected)

    def test_bounding_box_area(self) -> None:
        self.assertAlmostEqual(BoundingBox(x=0.1, y=0.1, width=0.5, height=0.2).area, 0.1)

    def test_original_variant_comes_first(self) -> None:
        self.assertIs(list(PreprocessingMethod)[0], PreprocessingMethod.ORIGINAL)
        self.assertEqual(len(PreprocessingMethod), 5)


class TestErrors(unittest.TestCase):
    def test_codes_and_messages(self) -> None:
        for error, code in [
            (ImageProcessingFailed(), "image_processing_failed"),
            (NoTextFound(), "no_text_found"),
            (NoValidMileageFound(), "no_valid_mileage_found"),
        ]:
            with self.subTest(code=code):
                self.assertIsInstance(error, OCRError)
                self.assertEqual(error.code, code)
                self.assertTrue(error.user_message)

    def test_invalid_mileage_carries_reason(self) -> None:
        error = InvalidMileage(reason="Mileage cannot be negative")
        self.assertEqual(error.code, "invalid_mileage")
        self.assertEqual(error.reason, "Mileage cannot be negative")
        self.assertEqual(error.user_message, "Invalid mileage: Mileage cannot be negative")


if __name__ == "__main__":
    unittest.main()
