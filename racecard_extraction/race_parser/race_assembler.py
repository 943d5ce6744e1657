"""
Race Assembler Module.

Builds races from the classified line stream with a single-pass state
machine:

    Idle ──boundary──▶ Open ──boundary──▶ Open (previous race closed)
                        │
                        └──end of input──▶ Done

The machine is a fold of a pure transition function over the lines::

    state = fold(lines, initial_state, step)

``transition(state, classified_line)`` never mutates ``state``; it
returns a new AssemblerState. This keeps each rule testable on its own:

    - boundary with an open race that has horses: close it, open a new one
    - boundary with an open race without horses: drop it, open a new one
    - a newly opened race harvests distance, surface and purse from the
      boundary's lookahead window (last match in the window wins)
    - horse while open: append it in document order
    - horse while idle: dropped
    - end of input: close the open race if it has horses

Malformed lines never raise; they are noise.

Author: Railbird Engineering Team
"""

from dataclasses import dataclass, replace
from functools import reduce
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple, TypeVar

from config import get_config
from racecard_extraction.utils.logger import get_logger
from .field_extractors import ConditionExtractors
from .line_classifier import END_OF_INPUT, ClassifiedLine, LineClassifier, LineKind
from .race_card import RaceDraft, build_horse, open_race

# Initialize module logger
logger = get_logger(__name__)

T = TypeVar('T')
S = TypeVar('S')

DEFAULT_LOOKAHEAD_LINES = 4


def fold(items: Iterable[T], initial_state: S, step: Callable[[S, T], S]) -> S:
    """Left fold of ``step`` over ``items`` starting from ``initial_state``."""
    return reduce(step, items, initial_state)


@dataclass(frozen=True)
class AssemblerState:
    """
    Snapshot of the assembler between two lines.

    Attributes:
        track: Card-level track inherited by every new race
        date: Card-level ISO date inherited by every new race
        races: Closed races in document order
        open_race: Race currently being assembled, if any
        done: True once end of input has been processed
    """
    track: str
    date: str
    races: Tuple[RaceDraft, ...] = ()
    open_race: Optional[RaceDraft] = None
    done: bool = False

    @property
    def is_open(self) -> bool:
        return self.open_race is not None

    @property
    def phase(self) -> str:
        """Current state name: 'idle', 'open' or 'done'."""
        if self.done:
            return 'done'
        return 'open' if self.is_open else 'idle'


class RaceAssembler:
    """
    Assembles RaceDrafts from normalized lines.

    Attributes:
        classifier: LineClassifier deciding each line's role
        conditions: Distance, surface and purse extractors
        lookahead_lines: Lines scanned for race conditions after a boundary

    Example:
        >>> assembler = RaceAssembler()
        >>> races = assembler.assemble(lines, track="SANTA ANITA", date="2024-03-15")
        >>> [race.number for race in races]
        [1, 2]
    """

    def __init__(
        self,
        classifier: Optional[LineClassifier] = None,
        conditions: Optional[ConditionExtractors] = None,
        lookahead_lines: Optional[int] = None
    ) -> None:
        self.classifier = classifier or LineClassifier()
        self.conditions = conditions or ConditionExtractors()
        self.lookahead_lines = (
            lookahead_lines if lookahead_lines is not None
            else get_config("parsing.lookahead_lines", DEFAULT_LOOKAHEAD_LINES)
        )

    def initial_state(self, track: str, date: str) -> AssemblerState:
        """Idle state carrying the card-level defaults."""
        return AssemblerState(track=track, date=date)

    def assemble(self, lines: Sequence[str], track: str, date: str) -> Tuple[RaceDraft, ...]:
        """
        Run the state machine over all lines.

        Args:
            lines: Normalized (trimmed, non-blank) lines in document order.
            track: Card-level track name for new races.
            date: Card-level ISO date for new races.

        Returns:
            Closed races in document order.
        """
        lines = list(lines)

        def step(state: AssemblerState, index: int) -> AssemblerState:
            window = lines[index + 1:index + 1 + self.lookahead_lines]
            classified = self.classifier.classify(lines[index], state.is_open, window)
            return self.transition(state, classified)

        state = fold(range(len(lines)), self.initial_state(track, date), step)
        state = self.transition(state, END_OF_INPUT)

        logger.debug(f"Assembled {len(state.races)} race(s) from {len(lines)} line(s)")
        return state.races

    def transition(self, state: AssemblerState, line: ClassifiedLine) -> AssemblerState:
        """
        Apply one classified line to a state.

        Args:
            state: Current assembler state (not modified).
            line: Classified line or END_OF_INPUT.

        Returns:
            The next state.
        """
        if state.done:
            return state

        if line.kind == LineKind.RACE_BOUNDARY:
            closed = self._close_open_race(state)
            race = open_race(line.value, state.track, state.date)
            race = self._harvest_conditions(race, line.lookahead)
            return replace(closed, open_race=race)

        if line.kind == LineKind.HORSE:
            if not state.is_open:
                logger.debug(f"Dropping horse outside any race: '{line.text}'")
                return state
            horse = build_horse(line.value)
            return replace(state, open_race=state.open_race.with_horse(horse))

        if line.kind == LineKind.END_OF_INPUT:
            closed = self._close_open_race(state)
            return replace(closed, done=True)

        return state

    def _close_open_race(self, state: AssemblerState) -> AssemblerState:
        """Append the open race if it has horses, then go idle."""
        race = state.open_race
        if race is None:
            return state

        if race.horses:
            return replace(state, races=state.races + (race,), open_race=None)

        logger.debug(f"Discarding race {race.number}: no horses found")
        return replace(state, open_race=None)

    def _harvest_conditions(self, race: RaceDraft, window: Sequence[str]) -> RaceDraft:
        """
        Scan the lookahead window for distance, surface and purse.

        The whole window is always scanned; a later line overwrites an
        earlier one for the same field.
        """
        updates: dict = {}
        for text in window:
            for extractor in self.conditions:
                value: Any = extractor.try_match(text)
                if value is not None:
                    updates[extractor.field_name] = value

        if not updates:
            return race
        return replace(race, **updates)
