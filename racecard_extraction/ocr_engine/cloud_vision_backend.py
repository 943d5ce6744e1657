"""
Google Cloud Vision Recognition Backend.

Sends program images to the Cloud Vision text detection API.

Credentials come from ``ocr.cloud.key_file`` (service account JSON) or
``ocr.cloud.api_key``; the environment variables GOOGLE_CLOUD_KEY_FILE
and GOOGLE_CLOUD_API_KEY override them.

Requirements:
    - google-cloud-vision Python package

Author: Railbird Engineering Team
"""

import time
from pathlib import Path
from typing import Any, Optional, Union

from config import get_config
from racecard_extraction.utils.logger import get_logger
from racecard_extraction.utils.exceptions import (
    OCREngineNotAvailableError,
    OCRProcessingError
)
from .ocr_result import RecognitionResult

# Initialize module logger
logger = get_logger(__name__)

ENGINE_NAME = "cloud_vision"


class CloudVisionBackend:
    """
    Cloud Vision text detection backend.

    The service does not report a usable page confidence, so one is
    assigned from the number of detections: several blocks give
    ``confidence.cloud_multi_block``, a single block gives
    ``confidence.cloud_single_block``.

    Attributes:
        client: ImageAnnotatorClient (or a compatible object)

    Example:
        >>> backend = CloudVisionBackend()
        >>> result = backend.recognize("program.jpg")
    """

    def __init__(self, client: Optional[Any] = None) -> None:
        """
        Initialize the backend.

        Args:
            client: Pre-built annotator client. When omitted, one is
                   created from configured credentials.

        Raises:
            OCREngineNotAvailableError: If the backend is disabled, has no
                credentials, or google-cloud-vision is not installed.
        """
        self.multi_block_confidence = get_config("confidence.cloud_multi_block", 0.85)
        self.single_block_confidence = get_config("confidence.cloud_single_block", 0.7)

        try:
            from google.cloud import vision
        except ImportError:
            vision = None

        self._vision = vision
        self.client = client if client is not None else self._create_client()

        logger.info("Cloud Vision backend initialized")

    def _create_client(self) -> Any:
        """Build an ImageAnnotatorClient from configuration."""
        if not get_config("ocr.cloud.enabled", True):
            raise OCREngineNotAvailableError(ENGINE_NAME, "disabled in configuration")

        if self._vision is None:
            raise OCREngineNotAvailableError(
                ENGINE_NAME,
                "google-cloud-vision not installed (pip install google-cloud-vision)"
            )

        key_file = get_config("ocr.cloud.key_file")
        api_key = get_config("ocr.cloud.api_key")
        project_id = get_config("ocr.cloud.project_id")

        try:
            if key_file:
                logger.debug(f"Using service account key file: {key_file}")
                return self._vision.ImageAnnotatorClient.from_service_account_json(key_file)

            if api_key:
                options = {"api_key": api_key}
                if project_id:
                    options["quota_project_id"] = project_id
                return self._vision.ImageAnnotatorClient(client_options=options)

        except Exception as e:
            raise OCREngineNotAvailableError(ENGINE_NAME, f"client creation failed: {e}")

        raise OCREngineNotAvailableError(ENGINE_NAME, "no credentials configured")

    def _build_image(self, content: bytes) -> Any:
        if self._vision is not None:
            return self._vision.Image(content=content)
        return {"content": content}

    def recognize(self, image_path: Union[str, Path]) -> RecognitionResult:
        """
        Detect text in an image file.

        Args:
            image_path: Path to a JPEG or PNG file.

        Returns:
            RecognitionResult with the full detected text.

        Raises:
            OCRProcessingError: If the file cannot be read, the service
                reports an error, or no text is detected.
        """
        image_path = Path(image_path)

        try:
            content = image_path.read_bytes()
        except OSError as e:
            raise OCRProcessingError(str(image_path), f"Failed to read image: {e}")

        return self.recognize_content(content, source=str(image_path))

    def recognize_content(self, content: bytes, source: str = "image") -> RecognitionResult:
        """
        Detect text in encoded image bytes.

        Args:
            content: JPEG or PNG bytes.
            source: Label used in logs and errors.

        Raises:
            OCRProcessingError: If the service reports an error or no text.
        """
        start_time = time.time()
        logger.debug(f"Sending {source} to Cloud Vision ({len(content)} bytes)")

        try:
            response = self.client.text_detection(image=self._build_image(content))
        except Exception as e:
            logger.error(f"Cloud Vision request failed: {e}")
            raise OCRProcessingError(source, str(e))

        error = getattr(response, 'error', None)
        if error is not None and getattr(error, 'message', ''):
            raise OCRProcessingError(source, error.message)

        annotations = list(response.text_annotations or [])
        if not annotations:
            raise OCRProcessingError(source, "No text detected in image")

        # The first annotation holds the full text, the rest are single blocks
        confidence = (
            self.multi_block_confidence if len(annotations) > 1
            else self.single_block_confidence
        )

        result = RecognitionResult(
            text=annotations[0].description or "",
            confidence=confidence,
            engine=ENGINE_NAME,
            block_count=len(annotations),
            processing_time=time.time() - start_time
        )

        logger.info(
            f"Cloud Vision completed: {len(annotations)} detections, "
            f"confidence {confidence:.2f} ({result.processing_time:.2f}s)"
        )
        return result
