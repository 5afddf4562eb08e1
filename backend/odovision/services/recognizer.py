"""
Text recognition adapters.

A recognizer turns one image into raw text observations. It must not correct
or filter text semantically; that is the pipeline's job.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import easyocr
import numpy as np

from .contracts import BoundingBox, TextObservation

logger = logging.getLogger(__name__)

# Digits, letters for unit labels, and digit group separators
OCR_ALLOWLIST = (
    '0123456789'
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    'abcdefghijklmnopqrstuvwxyz'
    ',.'
)


class TextRecognizer(ABC):
    """Interface for OCR engines used by the odometer pipeline."""

    @abstractmethod
    def recognize(self, image: np.ndarray) -> List[TextObservation]:
        """Return zero or more observations for the image, in any order."""
        raise NotImplementedError


def normalize_bbox(points: Sequence[Sequence[float]], width: int, height: int) -> Optional[BoundingBox]:
    """
    Convert an EasyOCR quadrilateral (pixel corner points) into a normalized
    axis-aligned box clamped to [0, 1].
    """
    if not points or width <= 0 or height <= 0:
        return None

    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]

    x0 = min(max(min(xs) / width, 0.0), 1.0)
    x1 = min(max(max(xs) / width, 0.0), 1.0)
    y0 = min(max(min(ys) / height, 0.0), 1.0)
    y1 = min(max(max(ys) / height, 0.0), 1.0)

    return BoundingBox(x=x0, y=y0, width=x1 - x0, height=y1 - y0)


class EasyOCRRecognizer(TextRecognizer):
    """Text recognizer backed by an EasyOCR reader."""

    def __init__(
        self,
        languages: Optional[List[str]] = None,
        gpu: bool = False,
        min_confidence: float = 0.0,
    ):
        self.languages = list(languages or ["en"])
        self.gpu = gpu
        self.min_confidence = min_confidence
        self._reader: Optional[easyocr.Reader] = None
        self._lock = threading.Lock()

    def _load_reader(self) -> easyocr.Reader:
        """Load the EasyOCR reader."""
        logger.info("Loading EasyOCR reader (languages=%s, gpu=%s)...", self.languages, self.gpu)
        reader = easyocr.Reader(self.languages, gpu=self.gpu)
        logger.info("EasyOCR reader loaded successfully!")
        return reader

    @property
    def reader(self) -> easyocr.Reader:
        """Get the loaded EasyOCR reader."""
        with self._lock:
            if self._reader is None:
                self._reader = self._load_reader()
        return self._reader

    def recognize(self, image: np.ndarray) -> List[TextObservation]:
        results = self.reader.readtext(
            image,
            allowlist=OCR_ALLOWLIST,
            paragraph=False,
            min_size=10,
            text_threshold=0.6,
            low_text=0.4,
            contrast_ths=0.1,
            adjust_contrast=0.5,
            width_ths=0.7,
        )

        height, width = image.shape[:2]
        observations = []
        for bbox, text, conf in results:
            conf = float(conf)
            if conf < self.min_confidence or not text.strip():
                continue
            observations.append(TextObservation(
                text=text,
                confidence=min(max(conf, 0.0), 1.0),
                bounding_box=normalize_bbox(bbox, width, height),
            ))
        return observations
