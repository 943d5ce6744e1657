"""
Main Input Handler Module.

This module provides the InputHandler class that validates race program
files and decides how their text should be obtained.

Usage:
    from racecard_extraction.input_handler import InputHandler

    handler = InputHandler()
    document = handler.resolve("card.pdf")
    print(document.category)   # 'document' or 'image'

    # Collect a directory of programs
    paths = handler.collect("./programs/")

Classes:
    InputDocument: A validated file and its processing category
    InputHandler: Validation and file kind resolution
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from config import get_config
from racecard_extraction.utils.logger import get_logger
from racecard_extraction.utils.helpers import (
    format_file_size,
    get_file_extension,
    normalize_file_kind
)
from racecard_extraction.utils.exceptions import (
    InputError,
    UnsupportedFileTypeError,
    InputFileNotFoundError,
    FileTooLargeError,
    CorruptedFileError
)

# Initialize module logger
logger = get_logger(__name__)

CATEGORY_DOCUMENT = 'document'
CATEGORY_IMAGE = 'image'


@dataclass
class InputDocument:
    """
    A validated input file.

    Attributes:
        path: Path to the file
        file_kind: Declared or inferred kind ('pdf', 'jpg', 'jpeg', 'png')
        category: 'document' for text-bearing files, 'image' otherwise
        size_bytes: File size in bytes
    """
    path: Path
    file_kind: str
    category: str
    size_bytes: int

    @property
    def filename(self) -> str:
        return self.path.name

    def __repr__(self) -> str:
        return (
            f"InputDocument(filename='{self.filename}', "
            f"kind='{self.file_kind}', category='{self.category}')"
        )


class InputHandler:
    """
    Validates race program files and resolves their kind.

    Attributes:
        supported_kinds: Set of supported file kinds
        max_file_size: Largest accepted file in bytes

    Example:
        >>> handler = InputHandler()
        >>> document = handler.resolve("program.jpg")
        >>> document.category
        'image'
    """

    KIND_CATEGORIES: Dict[str, str] = {
        'pdf': CATEGORY_DOCUMENT,
        'jpg': CATEGORY_IMAGE,
        'jpeg': CATEGORY_IMAGE,
        'png': CATEGORY_IMAGE,
    }

    DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

    def __init__(self) -> None:
        """Initialize the InputHandler from configuration."""
        configured = get_config("input.supported_kinds", list(self.KIND_CATEGORIES))
        self.supported_kinds = {
            normalize_file_kind(kind) for kind in configured
            if normalize_file_kind(kind) in self.KIND_CATEGORIES
        }
        self.max_file_size = int(get_config("input.max_file_size", self.DEFAULT_MAX_FILE_SIZE))

        logger.debug(f"InputHandler initialized with kinds: {sorted(self.supported_kinds)}")

    def detect_file_kind(
        self,
        filepath: Union[str, Path],
        declared_kind: Optional[str] = None
    ) -> str:
        """
        Resolve the file kind from the declaration or the extension.

        Args:
            filepath: Path to the file.
            declared_kind: Kind declared by the caller, if any.

        Returns:
            Normalized file kind.

        Raises:
            UnsupportedFileTypeError: If the kind is not supported.
        """
        kind = normalize_file_kind(declared_kind or get_file_extension(filepath))

        if kind not in self.supported_kinds:
            raise UnsupportedFileTypeError(kind or "unknown", sorted(self.supported_kinds))
        return kind

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists, is readable and within size limits.

        Args:
            filepath: Path to the file to validate.

        Returns:
            Path object pointing to the validated file.

        Raises:
            InputFileNotFoundError: If file doesn't exist.
            InputError: If the path is not a regular file.
            CorruptedFileError: If the file is empty.
            FileTooLargeError: If the file exceeds the size limit.
        """
        path = Path(filepath)

        if not path.exists():
            raise InputFileNotFoundError(str(filepath))

        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")

        size = path.stat().st_size
        if size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")

        if size > self.max_file_size:
            raise FileTooLargeError(
                str(filepath),
                format_file_size(size),
                format_file_size(self.max_file_size)
            )

        logger.debug(f"File validated: {filepath} ({format_file_size(size)})")
        return path

    def resolve(
        self,
        filepath: Union[str, Path],
        declared_kind: Optional[str] = None
    ) -> InputDocument:
        """
        Check the kind first, then validate the file itself.

        An unsupported kind fails before the file is touched.

        Raises:
            UnsupportedFileTypeError, InputFileNotFoundError, InputError,
            CorruptedFileError, FileTooLargeError
        """
        kind = self.detect_file_kind(filepath, declared_kind)
        path = self.validate_file(filepath)

        document = InputDocument(
            path=path,
            file_kind=kind,
            category=self.KIND_CATEGORIES[kind],
            size_bytes=path.stat().st_size
        )
        logger.info(f"Resolved input: {document}")
        return document

    def collect(self, directory: Union[str, Path], recursive: bool = False) -> List[Path]:
        """
        Find every supported file in a directory.

        Args:
            directory: Directory containing race programs.
            recursive: Whether to search subdirectories.

        Returns:
            Sorted list of file paths.

        Raises:
            InputFileNotFoundError: If the directory doesn't exist.
            InputError: If the path is not a directory.
        """
        directory = Path(directory)

        if not directory.exists():
            raise InputFileNotFoundError(str(directory))

        if not directory.is_dir():
            raise InputError(f"Path is not a directory: {directory}")

        pattern = "**/*" if recursive else "*"
        files = [
            path for path in directory.glob(pattern)
            if path.is_file() and normalize_file_kind(path.suffix) in self.supported_kinds
        ]
        files = sorted(set(files))

        logger.info(f"Found {len(files)} file(s) to process in {directory}")
        return files
