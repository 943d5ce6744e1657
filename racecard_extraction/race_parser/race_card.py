"""
Race Card Data Classes.

This module defines the structures produced by race assembly, along
with the single place where missing fields receive their defaults.

Classes:
    HorseFields: Raw fields recognized on a horse-entry line
    HorseDraft: A horse entry with defaults applied
    RaceDraft: A race and its ordered horse entries
    RaceCardDraft: All races recognized in one document

Functions:
    build_horse: Fill defaults for a recognized horse entry
    open_race: Create an empty race for a boundary marker

Drafts are frozen: assembly produces new drafts instead of mutating
existing ones, so a closed race cannot change after it is appended.

Author: Railbird Engineering Team
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple
import json

from config import get_config
from .normalizers import OddsNormalizer

SURFACES = ('dirt', 'turf', 'synthetic')

DEFAULT_JOCKEY = "Unknown"
DEFAULT_TRAINER = "Unknown"
DEFAULT_WEIGHT = 120


@dataclass(frozen=True)
class HorseFields:
    """
    Fields read from a horse-entry line before defaults are applied.

    Attributes:
        number: Saddle cloth number
        name: Horse name as printed
        jockey: Parenthesized jockey name, if present
        odds: Morning line odds token ("5-1" or "5/2"), if present
    """
    number: int
    name: str
    jockey: Optional[str] = None
    odds: Optional[str] = None


@dataclass(frozen=True)
class HorseDraft:
    """
    A horse entry inside a race.

    Attributes:
        id: Identifier derived from the saddle cloth number
        number: Saddle cloth number (1-20)
        name: Horse name
        jockey: Jockey name, "Unknown" when not printed
        trainer: Trainer name, "Unknown" (never present on entry lines)
        weight: Assigned weight in pounds, 120 when not printed
        odds: Morning line odds token, absent when not printed
        speed_figures: Always empty at extraction time
        past_performances: Always empty at extraction time
    """
    id: str
    number: int
    name: str
    jockey: str = DEFAULT_JOCKEY
    trainer: str = DEFAULT_TRAINER
    weight: int = DEFAULT_WEIGHT
    odds: Optional[str] = None
    speed_figures: Dict[str, Any] = field(default_factory=dict)
    past_performances: Tuple[Any, ...] = ()

    @property
    def odds_value(self) -> Optional[float]:
        """Fractional odds as a number (5-1 -> 5.0), None when absent."""
        return OddsNormalizer.to_fraction(self.odds)

    @property
    def implied_probability(self) -> Optional[float]:
        """Win probability implied by the odds, None when absent."""
        return OddsNormalizer.implied_probability(self.odds)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire format, omitting absent odds."""
        data = {
            'id': self.id,
            'number': self.number,
            'name': self.name,
            'jockey': self.jockey,
            'trainer': self.trainer,
            'weight': self.weight,
        }
        if self.odds is not None:
            data['odds'] = self.odds
        data['speedFigures'] = dict(self.speed_figures)
        data['pastPerformances'] = list(self.past_performances)
        return data


@dataclass(frozen=True)
class RaceDraft:
    """
    A single race with its condition fields and entries.

    Attributes:
        id: Identifier derived from the race number
        number: Race number as printed on the card
        track: Track name (inherited from the card)
        date: ISO race date (inherited from the card)
        distance: Distance text, e.g. "6 Furlongs"
        surface: One of dirt, turf, synthetic
        purse: Purse in whole currency units
        horses: Entries in document order
    """
    id: str
    number: int
    track: str
    date: str
    distance: Optional[str] = None
    surface: Optional[str] = None
    purse: Optional[int] = None
    horses: Tuple[HorseDraft, ...] = ()

    @property
    def horse_count(self) -> int:
        """Number of entries recognized so far."""
        return len(self.horses)

    def with_horse(self, horse: HorseDraft) -> 'RaceDraft':
        """Return a copy of this race with ``horse`` appended."""
        return replace(self, horses=self.horses + (horse,))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire format, omitting absent fields."""
        data = {
            'id': self.id,
            'number': self.number,
            'track': self.track,
            'date': self.date,
        }
        if self.distance is not None:
            data['distance'] = self.distance
        if self.surface is not None:
            data['surface'] = self.surface
        if self.purse is not None:
            data['purse'] = self.purse
        data['horses'] = [horse.to_dict() for horse in self.horses]
        return data


@dataclass(frozen=True)
class RaceCardDraft:
    """
    All races recognized in a single document.

    Example:
        >>> card = parser.parse(text)
        >>> print(card.track, card.date, card.race_count)
    """
    track: str
    date: str
    races: Tuple[RaceDraft, ...] = ()

    @property
    def race_count(self) -> int:
        return len(self.races)

    @property
    def horse_count(self) -> int:
        return sum(race.horse_count for race in self.races)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'track': self.track,
            'date': self.date,
            'races': [race.to_dict() for race in self.races]
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def build_horse(fields: HorseFields) -> HorseDraft:
    """
    Apply the defaulting policy to a recognized horse entry.

    Jockey, trainer and weight fall back to configured defaults
    (``parsing.horse_defaults``); odds stay absent when not printed.

    Args:
        fields: Raw fields from a horse-entry line.

    Returns:
        HorseDraft with every required field populated.
    """
    defaults = get_config("parsing.horse_defaults", {}) or {}
    jockey = (fields.jockey or "").strip() or defaults.get('jockey', DEFAULT_JOCKEY)
    odds = (fields.odds or "").strip() or None

    return HorseDraft(
        id=f"horse-{fields.number}",
        number=fields.number,
        name=fields.name.strip(),
        jockey=jockey,
        trainer=defaults.get('trainer', DEFAULT_TRAINER),
        weight=int(defaults.get('weight', DEFAULT_WEIGHT)),
        odds=odds
    )


def open_race(number: int, track: str, date: str) -> RaceDraft:
    """
    Create an empty race for a newly found boundary marker.

    Args:
        number: Race number from the marker.
        track: Card-level track name.
        date: Card-level ISO date.

    Returns:
        RaceDraft with no horses and no condition fields.
    """
    return RaceDraft(
        id=f"race-{number}",
        number=number,
        track=track,
        date=date
    )
