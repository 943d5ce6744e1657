"""
Extraction Result Data Class.

This module defines the result of processing one race program file,
the unit returned to callers of the document parser.

Author: Railbird Engineering Team
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import json

from racecard_extraction.race_parser.race_card import RaceCardDraft


@dataclass
class ExtractionResult:
    """
    Represents the outcome of processing one file.

    A card with zero races is still a success; ``success`` is False only
    when text could not be acquired or the input was rejected.

    Attributes:
        success: Whether text was acquired and parsed
        text: Acquired text ('' on failure)
        confidence: Confidence in [0, 1], set by the extraction path
        extracted_data: Parsed race card, None on failure
        errors: Error messages
        source_file: Source filename
        engine: Text source ('text_layer', 'cloud_vision', 'tesseract')
        processing_time: Seconds spent on the file
        extraction_timestamp: When processing finished

    Example:
        >>> result = parser.process_file("card.pdf")
        >>> if result.success:
        ...     print(result.extracted_data.race_count)
        >>> print(result.to_json())
    """
    success: bool = True
    text: str = ""
    confidence: float = 0.0
    extracted_data: Optional[RaceCardDraft] = None
    errors: List[str] = field(default_factory=list)

    # Metadata
    source_file: Optional[str] = None
    engine: Optional[str] = None
    processing_time: float = 0.0
    extraction_timestamp: Optional[str] = None

    def __post_init__(self):
        """Initialize timestamp if not provided."""
        if self.extraction_timestamp is None:
            self.extraction_timestamp = datetime.now().isoformat()

    @classmethod
    def failure(cls, message: str, source_file: Optional[str] = None) -> "ExtractionResult":
        """Build a failed result carrying a single error message."""
        return cls(
            success=False,
            text="",
            confidence=0.0,
            errors=[message],
            source_file=source_file
        )

    def to_dict(self, include_metadata: bool = False) -> Dict[str, Any]:
        """
        Convert to the camelCase wire format.

        ``extractedData`` and ``errors`` are omitted when absent.

        Args:
            include_metadata: Also emit sourceFile, engine, processingTime
                             and timestamp.
        """
        data: Dict[str, Any] = {
            'success': self.success,
            'text': self.text,
            'confidence': self.confidence,
        }

        if self.extracted_data is not None:
            data['extractedData'] = self.extracted_data.to_dict()

        if self.errors:
            data['errors'] = list(self.errors)

        if include_metadata:
            data['sourceFile'] = self.source_file
            data['engine'] = self.engine
            data['processingTime'] = round(self.processing_time, 3)
            data['timestamp'] = self.extraction_timestamp

        return data

    def to_json(self, indent: int = 2, include_metadata: bool = False) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(include_metadata), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        races = self.extracted_data.race_count if self.extracted_data else 0
        return (
            f"ExtractionResult(success={self.success}, "
            f"confidence={self.confidence:.2f}, races={races})"
        )
