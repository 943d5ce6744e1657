"""
Race Parser Module for Race Card Extraction System.

This module turns recognized program text into structured races:
    - Field extractors for track, date, distance, surface, purse, entries
    - Line classifier (race boundary / horse entry / noise)
    - Race assembler (single-pass state machine)
    - Race card data classes with centralized defaulting

Author: Railbird Engineering Team
"""

from .parser import RaceCardParser
from .race_assembler import RaceAssembler, AssemblerState, fold
from .line_classifier import LineClassifier, LineKind, ClassifiedLine, normalize_lines
from .race_card import RaceCardDraft, RaceDraft, HorseDraft, HorseFields, build_horse, open_race

__all__ = [
    'RaceCardParser',
    'RaceAssembler',
    'AssemblerState',
    'fold',
    'LineClassifier',
    'LineKind',
    'ClassifiedLine',
    'normalize_lines',
    'RaceCardDraft',
    'RaceDraft',
    'HorseDraft',
    'HorseFields',
    'build_horse',
    'open_race'
]
