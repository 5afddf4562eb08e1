from __future__ import annotations

import unittest
from typing import Optional

from fastapi.testclient import TestClient

from odovision.api.routes import get_ocr_service
from odovision.main import app
from odovision.services.contracts import RecognitionResult, Unit
from odovision.services.errors import InvalidMileage, NoTextFound


class _FakeService:
    def __init__(self, result: Optional[RecognitionResult] = None, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error
        self.prior_mileage = None

    async def recognize_mileage(self, image, prior_mileage=None):
        self.prior_mileage = prior_mileage
        if self.error is not None:
            raise self.error
        return self.result


class TestOdometerRoutes(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _use(self, service: _FakeService) -> None:
        app.dependency_overrides[get_ocr_service] = lambda: service

    def _post(self, content_type: str = "image/jpeg", params=None):
        return self.client.post(
            "/api/odometer/read",
            files={"file": ("odo.jpg", b"\xff\xd8fake", content_type)},
            params=params,
        )

    def test_read_success(self) -> None:
        service = _FakeService(result=RecognitionResult(
            mileage=52347, confidence=0.912345, raw_text="52,347", detected_unit=Unit.MILES,
        ))
        self._use(service)

        response = self._post(params={"prior_mileage": 50000})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            "mileage": 52347,
            "confidence": 0.9123,
            "raw_text": "52,347",
            "detected_unit": "miles",
            "confidence_level": "high",
        })
        self.assertEqual(service.prior_mileage, 50000)

    def test_non_image_upload_is_rejected(self) -> None:
        self._use(_FakeService())
        response = self._post(content_type="text/plain")
        self.assertEqual(response.status_code, 400)

    def test_recognition_failure_maps_to_422(self) -> None:
        self._use(_FakeService(error=NoTextFound()))
        response = self._post()
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json(), {
            "code": "no_text_found",
            "message": "No text could be recognized in the image",
        })

    def test_invalid_mileage_message(self) -> None:
        self._use(_FakeService(error=InvalidMileage(reason="Mileage exceeds maximum reasonable value")))
        response = self._post()
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "invalid_mileage")

    def test_engine_failure_is_a_server_error(self) -> None:
        self._use(_FakeService(error=RuntimeError("model download failed")))
        response = self._post()
        self.assertEqual(response.status_code, 500)

    def test_negative_prior_is_a_validation_error(self) -> None:
        self._use(_FakeService())
        response = self._post(params={"prior_mileage": -5})
        self.assertEqual(response.status_code, 422)

    def test_health_and_root(self) -> None:
        health = self.client.get("/api/health")
        self.assertEqual(health.status_code, 200)
        self.assertEqual(health.json()["status"], "healthy")

        root = self.client.get("/")
        self.assertEqual(root.status_code, 200)
        self.assertEqual(root.json()["health"], "/api/health")


if __name__ == "__main__":
    unittest.main()
