from __future__ import annotations

import unittest

import numpy as np

from odovision.services.recognizer import EasyOCRRecognizer, normalize_bbox


class _FakeReader:
    def __init__(self, results) -> None:
        self.results = results
        self.calls = 0

    def readtext(self, image, **kwargs):
        self.calls += 1
        return self.results


class TestNormalizeBBox(unittest.TestCase):
    def test_quadrilateral_to_box(self) -> None:
        box = normalize_bbox([[20, 10], [120, 10], [120, 50], [20, 50]], width=200, height=100)
        self.assertAlmostEqual(box.x, 0.1)
        self.assertAlmostEqual(box.y, 0.1)
        self.assertAlmostEqual(box.width, 0.5)
        self.assertAlmostEqual(box.height, 0.4)

    def test_clamped_to_image(self) -> None:
        box = normalize_bbox([[-10, -5], [250, -5], [250, 150], [-10, 150]], width=200, height=100)
        self.assertEqual((box.x, box.y, box.width, box.height), (0.0, 0.0, 1.0, 1.0))

    def test_degenerate_input(self) -> None:
        self.assertIsNone(normalize_bbox([], width=200, height=100))
        self.assertIsNone(normalize_bbox([[0, 0]], width=0, height=100))


class TestEasyOCRRecognizer(unittest.TestCase):
    def _recognizer(self, results, min_confidence: float = 0.0) -> EasyOCRRecognizer:
        recognizer = EasyOCRRecognizer(min_confidence=min_confidence)
        recognizer._reader = _FakeReader(results)
        return recognizer

    def test_converts_reader_output(self) -> None:
        recognizer = self._recognizer([
            ([[20, 10], [120, 10], [120, 50], [20, 50]], "52347", 0.91),
            ([[130, 10], [160, 10], [160, 50], [130, 50]], "km", 1.2),
        ])
        observations = recognizer.recognize(np.zeros((100, 200, 3), dtype=np.uint8))

        self.assertEqual([o.text for o in observations], ["52347", "km"])
        self.assertAlmostEqual(observations[0].confidence, 0.91)
        self.assertEqual(observations[1].confidence, 1.0)
        self.assertAlmostEqual(observations[0].bounding_box.width, 0.5)

    def test_drops_blank_and_low_confidence_text(self) -> None:
        recognizer = self._recognizer([
            ([[0, 0], [10, 0], [10, 10], [0, 10]], "  ", 0.9),
            ([[0, 0], [10, 0], [10, 10], [0, 10]], "123", 0.05),
            ([[0, 0], [10, 0], [10, 10], [0, 10]], "84211", 0.6),
        ], min_confidence=0.1)
        observations = recognizer.recognize(np.zeros((20, 20), dtype=np.uint8))
        self.assertEqual([o.text for o in observations], ["84211"])

    def test_reader_is_reused(self) -> None:
        recognizer = self._recognizer([])
        image = np.zeros((20, 20), dtype=np.uint8)
        recognizer.recognize(image)
        recognizer.recognize(image)
        self.assertEqual(recognizer._reader.calls, 2)


if __name__ == "__main__":
    unittest.main()
