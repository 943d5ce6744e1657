"""
OCR Engine Module for Race Card Extraction System.

This module provides text recognition for program images:
    - Google Cloud Vision text detection (preferred when configured)
    - Local Tesseract recognition through a scoped worker
    - A common RecognitionResult format

Author: Railbird Engineering Team
"""

from .engine import OCREngine
from .cloud_vision_backend import CloudVisionBackend
from .tesseract_backend import TesseractWorker
from .ocr_result import RecognitionResult, OCRWord, OCRLine

__all__ = [
    'OCREngine',
    'CloudVisionBackend',
    'TesseractWorker',
    'RecognitionResult',
    'OCRWord',
    'OCRLine'
]
