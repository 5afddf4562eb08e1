from .contracts import (
    PreprocessingMethod,
    RecognitionResult,
    TextObservation,
    Unit,
)
from .errors import (
    ImageProcessingFailed,
    InvalidMileage,
    NoTextFound,
    NoValidMileageFound,
    OCRError,
)
from .ocr import OdometerOCRService
from .preprocessor import ImagePreprocessor
from .recognizer import EasyOCRRecognizer, TextRecognizer

__all__ = [
    "EasyOCRRecognizer",
    "ImagePreprocessor",
    "ImageProcessingFailed",
    "InvalidMileage",
    "NoTextFound",
    "NoValidMileageFound",
    "OCRError",
    "OdometerOCRService",
    "PreprocessingMethod",
    "RecognitionResult",
    "TextObservation",
    "TextRecognizer",
    "Unit",
]
