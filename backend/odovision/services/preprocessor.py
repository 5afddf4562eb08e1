"""
Image preprocessing for odometer OCR.

Produces several enhanced copies of the photograph so that at least one of
them is legible to the text recognizer.
"""
import logging
from pathlib import Path
from typing import Callable, List, Union

import cv2
import numpy as np

from .contracts import PreprocessedImage, PreprocessingMethod
from .errors import ImageProcessingFailed

logger = logging.getLogger(__name__)

ImageSource = Union[np.ndarray, bytes, bytearray, str, Path]


def load_image(source: ImageSource) -> np.ndarray:
    """
    Load an image into an 8-bit BGR or grayscale array.

    Args:
        source: numpy array, encoded image bytes, or path to an image file

    Returns:
        Image as numpy array

    Raises:
        ImageProcessingFailed: if the source cannot be read as an image
    """
    if isinstance(source, (bytes, bytearray)):
        nparr = np.frombuffer(bytes(source), np.uint8)
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR) if nparr.size else None
        if image is None:
            raise ImageProcessingFailed()
    elif isinstance(source, (str, Path)):
        image = cv2.imread(str(source), cv2.IMREAD_COLOR)
        if image is None:
            logger.warning("Failed to load image: %s", source)
            raise ImageProcessingFailed()
    elif isinstance(source, np.ndarray):
        image = source
    else:
        raise ImageProcessingFailed()

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    if image.ndim not in (2, 3) or (image.ndim == 3 and image.shape[2] not in (3, 4)):
        raise ImageProcessingFailed()
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ImageProcessingFailed()

    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    if image.ndim == 3 and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

    return image


class ImagePreprocessor:
    """Builds the fixed set of preprocessing variants for one photograph."""

    def preprocess(self, source: ImageSource) -> List[PreprocessedImage]:
        """
        Preprocess an image using every enhancement method.

        The original is always first. An enhancement that fails or yields an
        empty image is left out.

        Raises:
            ImageProcessingFailed: if even the original cannot be loaded
        """
        original = load_image(source)
        results = [PreprocessedImage(method=PreprocessingMethod.ORIGINAL, image=original)]

        enhancements: List[tuple] = [
            (PreprocessingMethod.CONTRAST_ENHANCED, self.contrast_enhance),
            (PreprocessingMethod.GRAYSCALE_SHARPENED, self.grayscale_sharpen),
            (PreprocessingMethod.DOCUMENT_ENHANCED, self.document_enhance),
            (PreprocessingMethod.ADAPTIVE_BINARIZED, self.adaptive_binarize),
        ]

        for method, enhance in enhancements:
            processed = self._try_enhancement(method, enhance, original)
            if processed is not None:
                results.append(PreprocessedImage(method=method, image=processed))

        return results

    def _try_enhancement(
        self,
        method: PreprocessingMethod,
        enhance: Callable[[np.ndarray], np.ndarray],
        image: np.ndarray,
    ):
        try:
            processed = enhance(image.copy())
        except Exception as e:
            logger.warning("Preprocessing '%s' failed: %s", method.value, e)
            return None

        if processed is None or processed.size == 0 or processed.shape[0] == 0 or processed.shape[1] == 0:
            logger.warning("Preprocessing '%s' produced an empty image", method.value)
            return None
        return processed

    # ==================== FILTERS ====================

    def to_grayscale(self, image: np.ndarray) -> np.ndarray:
        if len(image.shape) == 3:
            return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        return image.copy()

    def unsharp_mask(self, image: np.ndarray, sigma: float = 3.0, amount: float = 0.5) -> np.ndarray:
        """
        Sharpen image using unsharp masking.
        """
        blurred = cv2.GaussianBlur(image, (0, 0), sigma)
        return cv2.addWeighted(image, 1.0 + amount, blurred, -amount, 0)

    def adjust_contrast(self, image: np.ndarray, contrast: float, brightness: float = 0.0) -> np.ndarray:
        """Scale pixel values around mid-gray, then shift by `brightness` (0-1 of full range)."""
        beta = 128.0 * (1.0 - contrast) + 255.0 * brightness
        return self.scale_pixels(image, alpha=contrast, beta=beta)

    def scale_pixels(self, image: np.ndarray, alpha: float, beta: float = 0.0) -> np.ndarray:
        """alpha * pixel + beta, saturated to 0-255."""
        scaled = image.astype(np.float32) * alpha + beta
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def contrast_enhance(self, image: np.ndarray) -> np.ndarray:
        """
        Boost contrast with reduced saturation (cuts colour noise from
        backlit displays) and a slight brightness lift.
        """
        clahe = cv2.createCLAHE(clipLimit=3.0, tileGridSize=(8, 8))

        if len(image.shape) == 3:
            lab = cv2.cvtColor(image, cv2.COLOR_BGR2LAB)
            l, a, b = cv2.split(lab)
            l = clahe.apply(l)
            enhanced = cv2.cvtColor(cv2.merge([l, a, b]), cv2.COLOR_LAB2BGR)

            hsv = cv2.cvtColor(enhanced, cv2.COLOR_BGR2HSV)
            hsv[:, :, 1] = (hsv[:, :, 1] * 0.2).astype(np.uint8)
            enhanced = cv2.cvtColor(hsv, cv2.COLOR_HSV2BGR)
        else:
            enhanced = clahe.apply(image)

        return self.adjust_contrast(enhanced, contrast=1.3, brightness=0.05)

    def grayscale_sharpen(self, image: np.ndarray) -> np.ndarray:
        """Grayscale conversion followed by edge sharpening."""
        gray = self.to_grayscale(image)
        return self.unsharp_mask(gray, sigma=3.0, amount=0.7)

    def document_enhance(self, image: np.ndarray) -> np.ndarray:
        """
        Document style enhancement, good for LCD displays:
        unsharp mask, exposure lift, then high contrast in full grayscale.
        """
        sharpened = self.unsharp_mask(image, sigma=2.5, amount=0.5)

        # +0.3 EV
        exposed = self.scale_pixels(sharpened, alpha=2 ** 0.3)

        gray = self.to_grayscale(exposed)
        return self.adjust_contrast(gray, contrast=1.2)

    def adaptive_binarize(self, image: np.ndarray) -> np.ndarray:
        """
        Adaptive thresholding for LCD and mechanical odometers in mixed lighting.
        """
        gray = self.to_grayscale(image)

        # Bilateral filter keeps digit edges while removing noise
        filtered = cv2.bilateralFilter(gray, 11, 17, 17)

        # Block size must be odd and smaller than the image
        block_size = min(31, max(3, (min(gray.shape[:2]) // 2) | 1))
        return cv2.adaptiveThreshold(
            filtered, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY, block_size, 2
        )
