from .recognition import (
    ErrorResponse,
    RecognitionResponse,
)

__all__ = [
    "ErrorResponse",
    "RecognitionResponse",
]
