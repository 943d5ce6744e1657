"""
Input Handler Module for Race Card Extraction System.

This module provides functionality for:
    - Resolving file kinds (document vs image)
    - Validating input files (existence, size)
    - Reading PDF text layers and rendering PDF pages
    - Preparing images for recognition

Supported formats:
    - PDF
    - Images: JPG, JPEG, PNG

Author: Railbird Engineering Team
"""

from .handler import InputHandler, InputDocument, CATEGORY_DOCUMENT, CATEGORY_IMAGE
from .pdf_processor import PDFProcessor
from .image_processor import ImageProcessor

__all__ = [
    'InputHandler',
    'InputDocument',
    'CATEGORY_DOCUMENT',
    'CATEGORY_IMAGE',
    'PDFProcessor',
    'ImageProcessor'
]
