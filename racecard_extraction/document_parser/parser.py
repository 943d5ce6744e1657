"""
Document Parser Module.

This module provides the DocumentParser class, the orchestrator that
turns a race program file into an ExtractionResult:

    1. Validate the file and resolve its kind (InputHandler)
    2. Acquire text
         - PDF: embedded text layer (PDFProcessor)
         - Image: recognition engine (OCREngine)
    3. Parse the text into a race card (RaceCardParser)
    4. Package text, confidence and race card

Every failure is caught here and returned as a failed result; nothing
propagates to the caller.

Usage:
    from racecard_extraction.document_parser import DocumentParser

    parser = DocumentParser()
    result = parser.process_file("card.pdf")
    print(result.to_json())

Author: Railbird Engineering Team
"""

import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from config import get_config
from racecard_extraction.input_handler import (
    CATEGORY_DOCUMENT,
    InputDocument,
    InputHandler,
    PDFProcessor
)
from racecard_extraction.ocr_engine import OCREngine
from racecard_extraction.race_parser import RaceCardParser
from racecard_extraction.utils.logger import get_logger
from racecard_extraction.utils.exceptions import InputError, OCRError
from .extraction_result import ExtractionResult

# Initialize module logger
logger = get_logger(__name__)

TEXT_LAYER_ENGINE = "text_layer"


class DocumentParser:
    """
    Orchestrates validation, text acquisition and race card parsing.

    The recognition engine is created on first use, so PDF-only runs
    never touch recognition backends.

    Attributes:
        input_handler: File validation and kind resolution
        pdf_processor: PDF text layer reader
        race_parser: Text to race card parser
        reliable_text_threshold: Characters above which a text layer is trusted
        ocr_fallback_on_sparse_text: Recognize rendered pages of sparse PDFs

    Example:
        >>> parser = DocumentParser()
        >>> result = parser.process_file("card.pdf")
        >>> result.confidence
        0.9
    """

    def __init__(
        self,
        input_handler: Optional[InputHandler] = None,
        pdf_processor: Optional[PDFProcessor] = None,
        ocr_engine: Optional[OCREngine] = None,
        race_parser: Optional[RaceCardParser] = None
    ) -> None:
        self.input_handler = input_handler or InputHandler()
        self.pdf_processor = pdf_processor or PDFProcessor()
        self.race_parser = race_parser or RaceCardParser()
        self._ocr_engine = ocr_engine

        self.reliable_text_threshold = get_config("input.pdf.reliable_text_threshold", 100)
        self.ocr_fallback_on_sparse_text = get_config(
            "input.pdf.ocr_fallback_on_sparse_text", False
        )
        self.reliable_confidence = get_config("confidence.text_layer_reliable", 0.9)
        self.sparse_confidence = get_config("confidence.text_layer_sparse", 0.5)

        logger.debug("DocumentParser initialized")

    @property
    def ocr_engine(self) -> OCREngine:
        if self._ocr_engine is None:
            self._ocr_engine = OCREngine()
        return self._ocr_engine

    def process_file(
        self,
        filepath: Union[str, Path],
        file_kind: Optional[str] = None
    ) -> ExtractionResult:
        """
        Process one race program file.

        Args:
            filepath: Path to the PDF or image.
            file_kind: Declared kind ('pdf', 'jpg', 'jpeg', 'png'). When
                      omitted the file extension is used.

        Returns:
            ExtractionResult. On any failure: success False, empty text,
            confidence 0 and a single error message.
        """
        start_time = time.time()
        source = Path(filepath).name
        logger.info(f"Processing: {source}")

        try:
            document = self.input_handler.resolve(filepath, file_kind)
            text, confidence, engine = self._acquire_text(document)
            card = self.race_parser.parse(text)

        except Exception as e:
            logger.error(f"Failed to process {source}: {e}")
            result = ExtractionResult.failure(str(e), source_file=source)
            result.processing_time = time.time() - start_time
            return result

        result = ExtractionResult(
            success=True,
            text=text,
            confidence=confidence,
            extracted_data=card,
            source_file=source,
            engine=engine,
            processing_time=time.time() - start_time
        )
        logger.info(
            f"Processed {source}: {card.race_count} race(s), "
            f"confidence {confidence:.2f} via {engine}"
        )
        return result

    def _acquire_text(self, document: InputDocument) -> Tuple[str, float, str]:
        """Return (text, confidence, engine name) for a resolved document."""
        if document.category == CATEGORY_DOCUMENT:
            return self._acquire_pdf_text(document)

        recognition = self.ocr_engine.recognize(document.path)
        return recognition.text, recognition.confidence, recognition.engine

    def _acquire_pdf_text(self, document: InputDocument) -> Tuple[str, float, str]:
        text = self.pdf_processor.extract_text(document.path)

        if len(text) > self.reliable_text_threshold:
            return text, self.reliable_confidence, TEXT_LAYER_ENGINE

        logger.info(
            f"Sparse text layer in {document.filename} "
            f"({len(text)} chars <= {self.reliable_text_threshold})"
        )

        if self.ocr_fallback_on_sparse_text:
            try:
                pages = self.pdf_processor.render_pages(document.path)
                recognition = self.ocr_engine.recognize_images(pages)
            except (OCRError, InputError) as e:
                logger.warning(f"Recognition fallback failed, keeping text layer: {e}")
            else:
                if not recognition.is_empty:
                    return recognition.text, recognition.confidence, recognition.engine

        return text, self.sparse_confidence, TEXT_LAYER_ENGINE

    def process_batch(
        self,
        directory: Union[str, Path],
        recursive: bool = False
    ) -> List[ExtractionResult]:
        """
        Process every supported file in a directory.

        A failing file yields a failed result and does not stop the batch.

        Args:
            directory: Directory of race programs.
            recursive: Whether to search subdirectories.

        Returns:
            One ExtractionResult per file, in sorted path order.

        Raises:
            InputFileNotFoundError: If the directory doesn't exist.
            InputError: If the path is not a directory.
        """
        files = self.input_handler.collect(directory, recursive=recursive)
        results = [self.process_file(path) for path in files]

        succeeded = sum(1 for result in results if result.success)
        logger.info(f"Batch complete: {succeeded}/{len(results)} file(s) succeeded")
        return results
