"""
PDF Processor Module.

This module handles PDF race programs:
    - Text layer extraction (pdfplumber, PyMuPDF as fallback)
    - Page rendering to images for recognition (PyMuPDF or pdf2image)

Rendering is only used when the sparse-text recognition fallback is
switched on in configuration.

Author: Railbird Engineering Team
"""

import io
from pathlib import Path
from typing import List, Union
from PIL import Image

from config import get_config
from racecard_extraction.utils.logger import get_logger
from racecard_extraction.utils.exceptions import CorruptedFileError, InputError

# Initialize module logger
logger = get_logger(__name__)


class PDFProcessor:
    """
    Processor for PDF files.

    Attributes:
        dpi: Resolution for PDF to image conversion
        max_pages: Maximum number of pages to render (the text layer is read in full)

    Example:
        >>> processor = PDFProcessor()
        >>> text = processor.extract_text("card.pdf")
        >>> print(f"Read {len(text)} characters")
    """

    def __init__(self) -> None:
        """Initialize the PDF processor with configuration."""
        self.dpi = get_config("input.pdf.dpi", 300)
        self.max_pages = get_config("input.pdf.max_pages", 10)

        self._check_dependencies()

        logger.debug(f"PDFProcessor initialized (DPI={self.dpi}, max_pages={self.max_pages})")

    def _check_dependencies(self) -> None:
        """Look up the available PDF libraries."""
        try:
            import pdfplumber
            self._pdfplumber = pdfplumber
        except ImportError:
            logger.debug("pdfplumber not available. Using PyMuPDF for text extraction.")
            self._pdfplumber = None

        try:
            import fitz  # PyMuPDF
            self._pymupdf = fitz
        except ImportError:
            logger.debug("PyMuPDF not available.")
            self._pymupdf = None

        try:
            import pdf2image
            self._pdf2image = pdf2image
        except ImportError:
            logger.debug("pdf2image not available.")
            self._pdf2image = None

    def extract_text(self, filepath: Union[str, Path]) -> str:
        """
        Read the embedded text layer of a PDF.

        Args:
            filepath: Path to the PDF file.

        Returns:
            Text of all pages joined by newlines ("" for image-only PDFs).

        Raises:
            CorruptedFileError: If the PDF cannot be read.
            InputError: If no PDF text library is installed.
        """
        filepath = Path(filepath)
        logger.info(f"Reading PDF text layer: {filepath.name}")

        if self._pdfplumber is not None:
            text = self._extract_with_pdfplumber(filepath)
        elif self._pymupdf is not None:
            text = self._extract_with_pymupdf(filepath)
        else:
            raise InputError(
                "No PDF text library available. Install pdfplumber or PyMuPDF."
            )

        logger.info(f"Read {len(text)} characters from {filepath.name}")
        return text

    def _extract_with_pdfplumber(self, filepath: Path) -> str:
        try:
            with self._pdfplumber.open(filepath) as pdf:
                return '\n'.join((page.extract_text() or '') for page in pdf.pages)
        except Exception as e:
            logger.error(f"pdfplumber text extraction failed: {e}")
            raise CorruptedFileError(str(filepath), str(e))

    def _extract_with_pymupdf(self, filepath: Path) -> str:
        try:
            doc = self._pymupdf.open(filepath)
            try:
                return '\n'.join(doc.load_page(i).get_text() for i in range(len(doc)))
            finally:
                doc.close()
        except Exception as e:
            logger.error(f"PyMuPDF text extraction failed: {e}")
            raise CorruptedFileError(str(filepath), str(e))

    def render_pages(self, filepath: Union[str, Path]) -> List[Image.Image]:
        """
        Render PDF pages to RGB images for recognition.

        Args:
            filepath: Path to the PDF file.

        Returns:
            List of PIL Images, one per page (at most max_pages).

        Raises:
            CorruptedFileError: If the PDF cannot be rendered.
            InputError: If no rendering library is installed.
        """
        filepath = Path(filepath)

        if self._pymupdf is not None:
            images = self._convert_with_pymupdf(filepath)
        elif self._pdf2image is not None:
            images = self._convert_with_pdf2image(filepath)
        else:
            raise InputError(
                "No PDF rendering library available. Install PyMuPDF or pdf2image."
            )

        logger.info(f"Rendered {len(images)} page(s) from {filepath.name}")
        return images

    def _convert_with_pymupdf(self, filepath: Path) -> List[Image.Image]:
        """Render pages using PyMuPDF."""
        logger.debug("Using PyMuPDF for PDF rendering")
        images = []

        try:
            doc = self._pymupdf.open(filepath)
            try:
                # PDF user space is 72 DPI
                zoom = self.dpi / 72.0
                matrix = self._pymupdf.Matrix(zoom, zoom)

                if len(doc) > self.max_pages:
                    logger.warning(
                        f"PDF has {len(doc)} pages, rendering the first {self.max_pages}"
                    )

                for page_num in range(min(len(doc), self.max_pages)):
                    page = doc.load_page(page_num)
                    pix = page.get_pixmap(matrix=matrix)
                    image = Image.open(io.BytesIO(pix.tobytes("png")))

                    if image.mode != 'RGB':
                        image = image.convert('RGB')
                    images.append(image)
            finally:
                doc.close()

        except Exception as e:
            logger.error(f"PyMuPDF conversion failed: {e}")
            raise CorruptedFileError(str(filepath), str(e))

        return images

    def _convert_with_pdf2image(self, filepath: Path) -> List[Image.Image]:
        """Render pages using pdf2image (Poppler-based)."""
        logger.debug("Using pdf2image for PDF rendering")

        try:
            images = self._pdf2image.convert_from_path(
                filepath,
                dpi=self.dpi,
                first_page=1,
                last_page=self.max_pages,
                fmt='png'
            )
            return [
                img.convert('RGB') if img.mode != 'RGB' else img
                for img in images
            ]

        except Exception as e:
            logger.error(f"pdf2image conversion failed: {e}")
            raise CorruptedFileError(str(filepath), str(e))
