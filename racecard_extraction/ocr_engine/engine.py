"""
Main OCR Engine Module.

This module provides the OCREngine class, the single recognition entry
point used by the document parser. It picks a backend once:

    - Cloud Vision when it is configured and the library is installed
    - a local Tesseract worker otherwise

Usage:
    from racecard_extraction.ocr_engine import OCREngine

    engine = OCREngine()
    result = engine.recognize("program.jpg")
    print(result.text, result.confidence)

Author: Railbird Engineering Team
"""

import io
from pathlib import Path
from typing import Callable, List, Optional, Union
from PIL import Image

from racecard_extraction.input_handler.image_processor import ImageProcessor
from racecard_extraction.utils.logger import get_logger
from racecard_extraction.utils.exceptions import OCREngineNotAvailableError
from .cloud_vision_backend import CloudVisionBackend
from .ocr_result import RecognitionResult
from .tesseract_backend import TesseractWorker

# Initialize module logger
logger = get_logger(__name__)


class OCREngine:
    """
    Recognition engine with cloud-first backend selection.

    An error raised by a configured cloud backend is not retried locally;
    Tesseract is only used when the cloud backend is unavailable.

    Attributes:
        cloud_backend: CloudVisionBackend, or None when unavailable
        worker_factory: Callable creating a scoped Tesseract worker
        image_processor: Loader and preprocessor for local recognition

    Example:
        >>> engine = OCREngine()
        >>> engine.backend_name
        'tesseract'
        >>> result = engine.recognize("program.png")
    """

    def __init__(
        self,
        cloud_backend: Optional[CloudVisionBackend] = None,
        worker_factory: Optional[Callable[[], TesseractWorker]] = None,
        image_processor: Optional[ImageProcessor] = None,
        use_cloud: bool = True
    ) -> None:
        """
        Initialize the OCR engine.

        Args:
            cloud_backend: Pre-built cloud backend. When omitted and
                          ``use_cloud`` is set, one is created from
                          configuration if possible.
            worker_factory: Creates Tesseract workers (default TesseractWorker).
            image_processor: Image loader/preprocessor.
            use_cloud: Set to False to force local recognition.
        """
        self.worker_factory = worker_factory or TesseractWorker
        self.image_processor = image_processor or ImageProcessor()
        self.cloud_backend = cloud_backend

        if self.cloud_backend is None and use_cloud:
            try:
                self.cloud_backend = CloudVisionBackend()
            except OCREngineNotAvailableError as e:
                logger.info(f"Cloud recognition unavailable, using Tesseract: {e.message}")

        logger.info(f"OCR Engine initialized with backend: {self.backend_name}")

    @property
    def backend_name(self) -> str:
        return "cloud_vision" if self.cloud_backend is not None else "tesseract"

    def recognize(self, image_path: Union[str, Path]) -> RecognitionResult:
        """
        Recognize text in an image file.

        Args:
            image_path: Path to a JPEG or PNG file.

        Returns:
            RecognitionResult.

        Raises:
            OCRError: If recognition fails or no backend is usable.
            CorruptedFileError: If the image cannot be decoded locally.
        """
        if self.cloud_backend is not None:
            return self.cloud_backend.recognize(image_path)

        image = self.image_processor.load(image_path)
        return self.recognize_images([image])

    def recognize_images(self, images: List[Image.Image]) -> RecognitionResult:
        """
        Recognize text in a sequence of page images.

        Page texts are joined in order; confidence is the mean page
        confidence.

        Args:
            images: PIL Images (e.g. rendered PDF pages).

        Returns:
            Combined RecognitionResult.
        """
        if self.cloud_backend is not None:
            results = [
                self.cloud_backend.recognize_content(self._encode_png(image), source=f"page {i + 1}")
                for i, image in enumerate(images)
            ]
        else:
            with self.worker_factory() as worker:
                results = [
                    worker.recognize(self.image_processor.preprocess_for_ocr(image))
                    for image in images
                ]

        return self._combine(results)

    @staticmethod
    def _encode_png(image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, format='PNG')
        return buffer.getvalue()

    def _combine(self, results: List[RecognitionResult]) -> RecognitionResult:
        if len(results) == 1:
            return results[0]

        if not results:
            return RecognitionResult(engine=self.backend_name)

        return RecognitionResult(
            text='\n'.join(result.text for result in results),
            confidence=sum(result.confidence for result in results) / len(results),
            engine=self.backend_name,
            block_count=sum(result.block_count for result in results),
            processing_time=sum(result.processing_time for result in results)
        )
