"""
Typed, user-recoverable failures of the odometer recognition pipeline.
"""


class OCRError(Exception):
    """Base class for recognition failures shown to the user."""

    code = "ocr_error"
    message = "Mileage could not be read"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)

    @property
    def user_message(self) -> str:
        return str(self)


class ImageProcessingFailed(OCRError):
    code = "image_processing_failed"
    message = "Failed to process the image"


class NoTextFound(OCRError):
    code = "no_text_found"
    message = "No text could be recognized in the image"


class NoValidMileageFound(OCRError):
    code = "no_valid_mileage_found"
    message = "No valid mileage number was found"


class InvalidMileage(OCRError):
    code = "invalid_mileage"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid mileage: {reason}")
