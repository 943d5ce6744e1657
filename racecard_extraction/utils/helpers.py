"""
Helper Utilities Module.

Small, generic functions shared across the race card extraction system.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - normalize_file_kind: Turn "PDF", ".jpg" etc. into a bare kind
    - format_file_size: Human-readable byte counts
"""

from pathlib import Path
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/cards")
        PosixPath('outputs/cards')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the file extension from a filepath.

    Returns the extension in lowercase, including the dot.
    Returns empty string if no extension exists.

    Example:
        >>> get_file_extension("card.PDF")
        ".pdf"
        >>> get_file_extension("noextension")
        ""
    """
    return Path(filepath).suffix.lower()


def normalize_file_kind(kind: str) -> str:
    """
    Normalize a declared file kind or extension to its bare lowercase form.

    Example:
        >>> normalize_file_kind(".JPG")
        "jpg"
    """
    return (kind or "").strip().lower().lstrip('.')


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Example:
        >>> format_file_size(1536)
        "1.5 KB"
        >>> format_file_size(1048576)
        "1.0 MB"
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"
