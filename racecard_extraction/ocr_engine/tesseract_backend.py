"""
Tesseract Recognition Worker.

Local recognition with Tesseract (pytesseract). The worker is a scoped
resource and is meant to be used as a context manager:

    with TesseractWorker() as worker:
        result = worker.recognize(image)

Entering acquires the worker (checks the Tesseract binary and creates a
private scratch directory); leaving terminates it on every exit path,
including exceptions raised during recognition.

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package

Author: Railbird Engineering Team
"""

import tempfile
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from PIL import Image

from config import get_config
from racecard_extraction.utils.logger import get_logger
from racecard_extraction.utils.exceptions import (
    OCREngineNotAvailableError,
    OCRProcessingError
)
from .ocr_result import OCRLine, OCRWord, RecognitionResult

# Initialize module logger
logger = get_logger(__name__)

ENGINE_NAME = "tesseract"


class TesseractWorker:
    """
    Scoped Tesseract worker.

    Attributes:
        language: Tesseract language code (e.g., "eng")
        psm: Page Segmentation Mode (1-13)
        oem: OCR Engine Mode (0-3)
        extra_config: Additional Tesseract configuration

    Example:
        >>> with TesseractWorker() as worker:
        ...     result = worker.recognize(image)
        >>> print(f"{result.confidence:.2f}")
    """

    def __init__(self) -> None:
        """Initialize the worker with configuration. Nothing is acquired yet."""
        self.language = get_config("ocr.tesseract.lang", "eng")
        self.psm = get_config("ocr.tesseract.psm", 3)
        self.oem = get_config("ocr.tesseract.oem", 3)
        self.extra_config = get_config("ocr.tesseract.config", "")

        self._pytesseract = None
        self._scratch: Optional[tempfile.TemporaryDirectory] = None
        self._terminated = False
        self._pages = 0

    @property
    def is_active(self) -> bool:
        return self._scratch is not None and not self._terminated

    def __enter__(self) -> "TesseractWorker":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.terminate()

    def acquire(self) -> None:
        """
        Check that Tesseract is usable and create the scratch directory.

        Raises:
            OCREngineNotAvailableError: If pytesseract or the Tesseract
                binary cannot be found, or the worker was terminated.
        """
        if self._terminated:
            raise OCREngineNotAvailableError(ENGINE_NAME, "worker already terminated")

        try:
            import pytesseract
        except ImportError:
            raise OCREngineNotAvailableError(
                ENGINE_NAME, "pytesseract not installed (pip install pytesseract)"
            )

        try:
            version = pytesseract.get_tesseract_version()
        except Exception as e:
            raise OCREngineNotAvailableError(
                ENGINE_NAME, f"Tesseract binary not installed or not in PATH: {e}"
            )

        self._pytesseract = pytesseract
        self._scratch = tempfile.TemporaryDirectory(prefix="racecard-tesseract-")
        logger.debug(f"Tesseract worker acquired (version {version}, scratch={self._scratch.name})")

    def terminate(self) -> None:
        """Release the worker. Safe to call more than once."""
        if self._scratch is not None:
            self._scratch.cleanup()
            self._scratch = None
            logger.debug("Tesseract worker terminated")
        self._terminated = True

    def _build_config(self) -> str:
        """Build the Tesseract command-line configuration string."""
        config_parts = [
            f"--psm {self.psm}",
            f"--oem {self.oem}"
        ]

        if self.extra_config:
            config_parts.append(self.extra_config)

        return ' '.join(config_parts)

    def recognize(self, image: Image.Image) -> RecognitionResult:
        """
        Recognize text in an image.

        Args:
            image: PIL Image, already preprocessed.

        Returns:
            RecognitionResult whose confidence is the mean word
            confidence scaled to [0, 1].

        Raises:
            OCREngineNotAvailableError: If the worker is not acquired.
            OCRProcessingError: If Tesseract fails.
        """
        if not self.is_active:
            raise OCREngineNotAvailableError(ENGINE_NAME, "worker is not active")

        start_time = time.time()
        self._pages += 1
        page_path = Path(self._scratch.name) / f"page-{self._pages}.png"

        try:
            image.save(page_path)
            data = self._pytesseract.image_to_data(
                str(page_path),
                lang=self.language,
                config=self._build_config(),
                output_type=self._pytesseract.Output.DICT
            )
        except Exception as e:
            logger.error(f"Tesseract recognition failed: {e}")
            raise OCRProcessingError(str(page_path), str(e))

        words = self._parse_tesseract_output(data)
        lines = self._group_into_lines(words)

        confidences = [word.confidence for word in words]
        confidence = (sum(confidences) / len(confidences) / 100.0) if confidences else 0.0

        result = RecognitionResult(
            text='\n'.join(line.text for line in lines),
            confidence=confidence,
            engine=ENGINE_NAME,
            block_count=len(words),
            processing_time=time.time() - start_time
        )

        logger.info(
            f"Tesseract completed: {len(words)} words, {len(lines)} lines, "
            f"confidence {result.confidence:.2f} ({result.processing_time:.2f}s)"
        )
        return result

    def _parse_tesseract_output(self, data: Dict[str, List[Any]]) -> List[OCRWord]:
        """
        Parse image_to_data output into words.

        Entries without text or with a negative confidence (layout rows)
        are skipped.
        """
        words = []

        for i, text in enumerate(data.get('text', [])):
            if not text or not str(text).strip():
                continue

            conf = float(data['conf'][i])
            if conf < 0:
                continue

            words.append(OCRWord(
                text=str(text).strip(),
                confidence=conf,
                left=int(data['left'][i]),
                line_key=(
                    int(data['block_num'][i]),
                    int(data['par_num'][i]),
                    int(data['line_num'][i])
                )
            ))

        return words

    def _group_into_lines(self, words: List[OCRWord]) -> List[OCRLine]:
        """Group words by (block, paragraph, line), each sorted left to right."""
        line_groups: Dict[Tuple[int, int, int], List[OCRWord]] = {}

        for word in words:
            line_groups.setdefault(word.line_key, []).append(word)

        lines = []
        for key in sorted(line_groups):
            line_words = sorted(line_groups[key], key=lambda w: w.left)
            lines.append(OCRLine(words=line_words))

        return lines
