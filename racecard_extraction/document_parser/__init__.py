"""
Document Parser Module for Race Card Extraction System.

Orchestrates a race program file from validation to a packaged
ExtractionResult.

Author: Railbird Engineering Team
"""

from .parser import DocumentParser
from .extraction_result import ExtractionResult

__all__ = ['DocumentParser', 'ExtractionResult']
