"""
Line Classifier Module.

Decides, line by line, what role a line of recognized text plays:

    1. race boundary  - "RACE 3", "3rd RACE"
    2. horse entry    - "1. MIDNIGHT RUN (J. Smith) 5-1" (only while a race is open)
    3. noise          - everything else

The cascade is an explicit ordered list of matchers; the first one that
matches decides the line's kind. Race condition lines (distance, surface,
purse) are not classified here; the race assembler harvests them from
the lookahead window carried by each boundary event.

Author: Railbird Engineering Team
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from racecard_extraction.utils.logger import get_logger
from .field_extractors import FieldExtractor, HorseEntryExtractor

# Initialize module logger
logger = get_logger(__name__)


class LineKind:
    """Roles a line can play in a race program."""
    RACE_BOUNDARY = "race_boundary"
    HORSE = "horse"
    NOISE = "noise"
    END_OF_INPUT = "end_of_input"


@dataclass(frozen=True)
class ClassifiedLine:
    """
    A line together with its role and the value recognized in it.

    Attributes:
        kind: One of the LineKind values
        text: The original line ("" for end of input)
        value: Race number for boundaries, HorseFields for entries
        lookahead: Lines following a boundary, scanned for race conditions
    """
    kind: str
    text: str = ""
    value: Any = None
    lookahead: Tuple[str, ...] = ()


END_OF_INPUT = ClassifiedLine(kind=LineKind.END_OF_INPUT)


class RaceBoundaryMatcher(FieldExtractor):
    """
    Recognizes race headers such as "RACE 3" or "3rd RACE".

    Returns the race number.
    """

    field_name = "race_number"

    PATTERN = re.compile(r'(?:RACE\s+(\d+)|(\d+)(?:st|nd|rd|th)?\s+RACE)', re.IGNORECASE)

    def try_match(self, text: str) -> Optional[int]:
        if not text:
            return None
        match = self.PATTERN.search(text)
        if not match:
            return None
        number = int(match.group(1) or match.group(2))
        return number if number > 0 else None


def normalize_lines(text: str) -> List[str]:
    """
    Split recognized text into trimmed, non-blank lines.

    Example:
        >>> normalize_lines("  RACE 1 \\r\\n\\n 1. SOLAR FLARE ")
        ['RACE 1', '1. SOLAR FLARE']
    """
    if not text:
        return []
    lines = (line.strip() for line in text.splitlines())
    return [line for line in lines if line]


class LineClassifier:
    """
    Priority cascade over an ordered list of matchers.

    Attributes:
        matchers: (kind, matcher, requires_open_race) tuples in priority order
        lookahead_lines: Window size attached to boundary events

    Example:
        >>> classifier = LineClassifier()
        >>> classifier.classify("RACE 2", race_open=False).kind
        'race_boundary'
        >>> classifier.classify("1. SOLAR FLARE 3-1", race_open=False).kind
        'noise'
    """

    def __init__(
        self,
        boundary_matcher: Optional[RaceBoundaryMatcher] = None,
        horse_matcher: Optional[HorseEntryExtractor] = None
    ) -> None:
        self.matchers: List[Tuple[str, FieldExtractor, bool]] = [
            (LineKind.RACE_BOUNDARY, boundary_matcher or RaceBoundaryMatcher(), False),
            (LineKind.HORSE, horse_matcher or HorseEntryExtractor(), True),
        ]

    def classify(
        self,
        line: str,
        race_open: bool,
        lookahead: Sequence[str] = ()
    ) -> ClassifiedLine:
        """
        Classify a single normalized line.

        Args:
            line: Trimmed, non-blank line.
            race_open: Whether a race is currently being assembled.
            lookahead: Lines following this one, attached to boundary events.

        Returns:
            ClassifiedLine; kind NOISE when no matcher applies.
        """
        for kind, matcher, requires_open_race in self.matchers:
            if requires_open_race and not race_open:
                continue
            value = matcher.try_match(line)
            if value is None:
                continue
            if kind == LineKind.RACE_BOUNDARY:
                logger.debug(f"Race boundary {value}: '{line}'")
                return ClassifiedLine(kind=kind, text=line, value=value, lookahead=tuple(lookahead))
            return ClassifiedLine(kind=kind, text=line, value=value)

        return ClassifiedLine(kind=LineKind.NOISE, text=line)
