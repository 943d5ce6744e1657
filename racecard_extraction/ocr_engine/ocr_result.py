"""
Recognition Result Data Classes.

This module defines the data structures returned by the recognition
backends.

Classes:
    OCRWord: Individual word reported by Tesseract
    OCRLine: Line of words in reading order
    RecognitionResult: Text and confidence for a whole image

Author: Railbird Engineering Team
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class OCRWord:
    """
    A single word recognized by Tesseract.

    Attributes:
        text: The recognized text content
        confidence: Recognition confidence (0-100)
        left: Left pixel coordinate, used for ordering within a line
        line_key: (block, paragraph, line) numbers from Tesseract
    """
    text: str
    confidence: float = 0.0
    left: int = 0
    line_key: Tuple[int, int, int] = (0, 0, 0)

    def __repr__(self) -> str:
        return f"OCRWord('{self.text}', conf={self.confidence:.1f})"


@dataclass
class OCRLine:
    """
    A line of text made of words in left-to-right order.

    Example:
        >>> line = OCRLine(words=[OCRWord("RACE"), OCRWord("1")])
        >>> line.text
        'RACE 1'
    """
    words: List[OCRWord] = field(default_factory=list)

    @property
    def text(self) -> str:
        return ' '.join(word.text for word in self.words)


@dataclass
class RecognitionResult:
    """
    Output of a recognition backend for one image.

    Attributes:
        text: Recognized text, one document line per text line
        confidence: Confidence in [0, 1]
        engine: Backend name ('cloud_vision' or 'tesseract')
        block_count: Number of text blocks or words the backend reported
        processing_time: Seconds spent in the backend
    """
    text: str = ""
    confidence: float = 0.0
    engine: str = ""
    block_count: int = 0
    processing_time: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            'text': self.text,
            'confidence': self.confidence,
            'engine': self.engine,
            'block_count': self.block_count,
            'processing_time': round(self.processing_time, 3)
        }

    def __repr__(self) -> str:
        return (
            f"RecognitionResult(engine='{self.engine}', chars={len(self.text)}, "
            f"confidence={self.confidence:.2f})"
        )
