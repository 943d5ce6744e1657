"""
Race Card Parser Module.

Turns a blob of recognized text into a RaceCardDraft:

    1. Normalize text into trimmed, non-blank lines
    2. Find the card-level track and date in the whole text
    3. Assemble races with the RaceAssembler

Parsing is best effort: garbled text yields a card with no races,
never an exception from the matching logic.

Author: Railbird Engineering Team
"""

from datetime import date as calendar_date
from typing import Optional

from config import get_config
from racecard_extraction.utils.logger import get_logger
from .field_extractors import DateExtractor, TrackExtractor
from .line_classifier import normalize_lines
from .race_assembler import RaceAssembler
from .race_card import RaceCardDraft

# Initialize module logger
logger = get_logger(__name__)

UNKNOWN_TRACK = "Unknown Track"


class RaceCardParser:
    """
    Parses recognized program text into a race card.

    Attributes:
        track_extractor: Finds the track name
        date_extractor: Finds the race date
        assembler: Builds the races

    Example:
        >>> parser = RaceCardParser()
        >>> card = parser.parse(ocr_text)
        >>> for race in card.races:
        ...     print(race.number, race.distance, len(race.horses))
    """

    def __init__(
        self,
        track_extractor: Optional[TrackExtractor] = None,
        date_extractor: Optional[DateExtractor] = None,
        assembler: Optional[RaceAssembler] = None
    ) -> None:
        self.track_extractor = track_extractor or TrackExtractor()
        self.date_extractor = date_extractor or DateExtractor()
        self.assembler = assembler or RaceAssembler()
        self.unknown_track = get_config("parsing.unknown_track", UNKNOWN_TRACK)

    def parse(self, text: str, default_date: Optional[str] = None) -> RaceCardDraft:
        """
        Parse recognized text into a RaceCardDraft.

        Args:
            text: Raw recognized text, any line endings.
            default_date: ISO date used when no date is printed.
                         Defaults to today.

        Returns:
            RaceCardDraft; ``races`` may be empty.
        """
        text = text or ""
        lines = normalize_lines(text)

        track = self.track_extractor.try_match(text) or self.unknown_track
        race_date = (
            self.date_extractor.try_match(text)
            or default_date
            or calendar_date.today().isoformat()
        )

        races = self.assembler.assemble(lines, track=track, date=race_date)

        card = RaceCardDraft(track=track, date=race_date, races=races)
        logger.info(
            f"Parsed race card: track={card.track}, date={card.date}, "
            f"{card.race_count} race(s), {card.horse_count} horse(s)"
        )
        return card
