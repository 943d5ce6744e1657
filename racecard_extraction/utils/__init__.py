"""
Utility Module for Race Card Extraction System.

This module provides common utilities used across all other modules:
    - Logging configuration
    - File operations
    - Exception hierarchy
"""

from .logger import setup_logger, get_logger
from .helpers import ensure_directory, get_file_extension, format_file_size

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'format_file_size'
]
