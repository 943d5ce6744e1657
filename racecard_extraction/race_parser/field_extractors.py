"""
Field Extractors Module.

Each extractor recognizes one semantic field in a line (or in the whole
document text for card-level fields) and exposes the same interface:

    extractor.try_match(text) -> value or None

Extractors are stateless after construction, never modify their input
and never raise on a non-matching line.

Extractors:
    - TrackExtractor: known track names (closed list)
    - DateExtractor: long, slash and ISO dates
    - DistanceExtractor: "6 Furlongs", "1 1/16 Miles" style distances
    - SurfaceExtractor: dirt / turf / synthetic keywords
    - PurseExtractor: purse amounts of at least 1000
    - HorseEntryExtractor: "1. HORSE NAME (Jockey) 5-1" lines

Author: Railbird Engineering Team
"""

import re
from typing import Any, List, Optional, Sequence, Tuple

from config import get_config
from racecard_extraction.utils.logger import get_logger
from .normalizers import DateNormalizer, PurseNormalizer
from .race_card import HorseFields

# Initialize module logger
logger = get_logger(__name__)

DEFAULT_TRACKS = [
    "SANTA ANITA",
    "GULFSTREAM",
    "CHURCHILL DOWNS",
    "BELMONT",
    "SARATOGA",
    "KEENELAND",
    "OAKLAWN",
    "FAIR GROUNDS",
    "AQUEDUCT",
    "WOODBINE",
]

MIN_HORSE_NUMBER = 1
MAX_HORSE_NUMBER = 20


class FieldExtractor:
    """
    Base class for all field extractors.

    Subclasses set ``field_name`` and implement ``try_match``.
    """

    field_name = "field"

    def try_match(self, text: str) -> Optional[Any]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(field='{self.field_name}')"


class TrackExtractor(FieldExtractor):
    """
    Finds a known track name anywhere in the text.

    The list is closed: tracks not in ``parsing.tracks`` are never
    recognized. The first listed track found wins, returned uppercased.

    Example:
        >>> TrackExtractor().try_match("Santa Anita Park - Program")
        "SANTA ANITA"
    """

    field_name = "track"

    def __init__(self, tracks: Optional[Sequence[str]] = None) -> None:
        tracks = tracks if tracks is not None else get_config("parsing.tracks", DEFAULT_TRACKS)
        self.tracks = [track.strip() for track in tracks if track and track.strip()]
        self._patterns = [
            re.compile(re.escape(track), re.IGNORECASE) for track in self.tracks
        ]

    def try_match(self, text: str) -> Optional[str]:
        if not text:
            return None
        for pattern in self._patterns:
            match = pattern.search(text)
            if match:
                return match.group(0).upper()
        return None


class DateExtractor(FieldExtractor):
    """
    Finds the first valid date and returns it in ISO form.

    Delegates to DateNormalizer, which tries long form, slash form and
    ISO form in that order.
    """

    field_name = "date"

    def __init__(self, normalizer: Optional[DateNormalizer] = None) -> None:
        self.normalizer = normalizer or DateNormalizer()

    def try_match(self, text: str) -> Optional[str]:
        return self.normalizer.extract_date(text)


class DistanceExtractor(FieldExtractor):
    """
    Finds a race distance: a number followed by a furlong or mile unit.

    Example:
        >>> DistanceExtractor().try_match("6 Furlongs Dirt Purse $40,000")
        "6 Furlongs"
        >>> DistanceExtractor().try_match("1.5 miles on the turf")
        "1.5 miles"
    """

    field_name = "distance"

    PATTERN = re.compile(r'(\d+(?:\.\d+)?\s*(?:furlongs?|miles?|f|m)\b)', re.IGNORECASE)

    def try_match(self, text: str) -> Optional[str]:
        if not text:
            return None
        match = self.PATTERN.search(text)
        return match.group(1) if match else None


class SurfaceExtractor(FieldExtractor):
    """
    Classifies the racing surface from keywords.

    Vocabularies are tested in order (turf, synthetic, dirt); the first
    one with a keyword on the line wins. No keyword means no surface,
    not a default.
    """

    field_name = "surface"

    VOCABULARIES: List[Tuple[str, re.Pattern]] = [
        ('turf', re.compile(r'turf|grass', re.IGNORECASE)),
        ('synthetic', re.compile(r'synthetic|poly', re.IGNORECASE)),
        ('dirt', re.compile(r'dirt|main', re.IGNORECASE)),
    ]

    def try_match(self, text: str) -> Optional[str]:
        if not text:
            return None
        for surface, pattern in self.VOCABULARIES:
            if pattern.search(text):
                return surface
        return None


class PurseExtractor(FieldExtractor):
    """Finds a purse amount of at least ``parsing.min_purse``."""

    field_name = "purse"

    def __init__(self, normalizer: Optional[PurseNormalizer] = None) -> None:
        self.normalizer = normalizer or PurseNormalizer()

    def try_match(self, text: str) -> Optional[int]:
        return self.normalizer.extract_purse(text)


class HorseEntryExtractor(FieldExtractor):
    """
    Recognizes a horse-entry line.

    Expected shape::

        <number>[.] <NAME> [(<jockey>)] [<odds>]

    where number has one or two digits, the name is letters, spaces and
    apostrophes, and odds look like "5-1" or "5/2". Numbers outside 1-20
    are rejected.

    Example:
        >>> HorseEntryExtractor().try_match("1. MIDNIGHT RUN (J. Smith) 5-1")
        HorseFields(number=1, name='MIDNIGHT RUN', jockey='J. Smith', odds='5-1')
    """

    field_name = "horse"

    PATTERN = re.compile(
        r"^(\d{1,2})\.?\s+([A-Z\s']+?)\s*(?:\(([^)]+)\))?\s*(\d+-\d+|\d+/\d+)?\s*$",
        re.IGNORECASE
    )

    def try_match(self, text: str) -> Optional[HorseFields]:
        if not text:
            return None
        match = self.PATTERN.match(text.strip())
        if not match:
            return None

        number_str, name, jockey, odds = match.groups()
        number = int(number_str)
        if not MIN_HORSE_NUMBER <= number <= MAX_HORSE_NUMBER:
            logger.debug(f"Ignoring entry-shaped line with number {number}: '{text}'")
            return None

        name = ' '.join(name.split())
        if not name:
            return None

        return HorseFields(
            number=number,
            name=name,
            jockey=jockey.strip() if jockey else None,
            odds=odds
        )


class ConditionExtractors:
    """
    The extractors applied to the lookahead window after a race marker.

    Bundled so the assembler can hold a single collaborator for
    distance, surface and purse.
    """

    def __init__(
        self,
        distance: Optional[DistanceExtractor] = None,
        surface: Optional[SurfaceExtractor] = None,
        purse: Optional[PurseExtractor] = None
    ) -> None:
        self.distance = distance or DistanceExtractor()
        self.surface = surface or SurfaceExtractor()
        self.purse = purse or PurseExtractor()

    def __iter__(self):
        return iter((self.distance, self.surface, self.purse))
