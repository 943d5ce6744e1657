"""
Race Card Extraction System - Source Package.

This package contains all core modules for turning photographed or
scanned race programs into structured race cards. Each module has a
single responsibility.

Modules:
    - input_handler: File validation, PDF text layer, image preprocessing
    - ocr_engine: Cloud and local text recognition
    - race_parser: Field extractors, line classifier, race assembler
    - document_parser: Per-file-kind orchestration and result packaging
    - utils: Logging, exceptions, helpers

Architecture:
    Input → Text acquisition → Line classification → Race assembly
                                                          ↓
                                                  ExtractionResult
"""

__version__ = "1.0.0"
__author__ = "Railbird Engineering Team"

__all__ = [
    'input_handler',
    'ocr_engine',
    'race_parser',
    'document_parser',
    'utils'
]
