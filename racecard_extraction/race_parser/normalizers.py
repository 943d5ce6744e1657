"""
Value Normalizers Module.

This module provides normalization functions for:
    - Race dates (three printed shapes, normalized to ISO)
    - Purse amounts (currency symbols and thousands separators)
    - Morning line odds (fractional value and implied probability)

Normalizers never raise on bad input; they return None instead.

Author: Railbird Engineering Team
"""

import re
from datetime import datetime
from typing import Callable, List, Optional, Tuple
from dateutil import parser as date_parser

from config import get_config
from racecard_extraction.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

_MONTH = (
    r'(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|'
    r'Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)'
)


class DateNormalizer:
    """
    Finds and normalizes race dates to ISO format (YYYY-MM-DD).

    Three printed shapes are tried in a fixed order:
        1. Long form:  "March 15, 2024"
        2. Slash form: "3/15/2024"
        3. ISO form:   "2024-03-15"

    Long form goes first because the shorter numeric patterns can match
    fragments of longer strings.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.extract_date("SANTA ANITA  March 15, 2024")
        "2024-03-15"
        >>> normalizer.extract_date("Post time 1:00 PM")
        None
    """

    LONG_FORM = re.compile(rf'\b({_MONTH}\.?\s+\d{{1,2}},\s+\d{{4}})\b', re.IGNORECASE)
    SLASH_FORM = re.compile(r'(?<!\d)(\d{1,2}/\d{1,2}/\d{4})(?!\d)')
    ISO_FORM = re.compile(r'(?<!\d)(\d{4}-\d{2}-\d{2})(?!\d)')

    def __init__(self) -> None:
        """Initialize the date normalizer."""
        self.output_format = get_config("parsing.date_output_format", "%Y-%m-%d")
        self.shapes: List[Tuple[re.Pattern, Callable[[str], Optional[datetime]]]] = [
            (self.LONG_FORM, self._parse_long_form),
            (self.SLASH_FORM, self._parse_slash_form),
            (self.ISO_FORM, self._parse_iso_form),
        ]

    def extract_date(self, text: str) -> Optional[str]:
        """
        Find the first valid date in text.

        Args:
            text: Text that may contain a date.

        Returns:
            ISO date string or None.
        """
        if not text:
            return None

        for pattern, parse in self.shapes:
            for match in pattern.finditer(text):
                parsed = parse(match.group(1))
                if parsed is not None:
                    return parsed.strftime(self.output_format)
                logger.debug(f"Rejected date candidate: '{match.group(1)}'")

        return None

    def normalize(self, date_str: str) -> Optional[str]:
        """
        Normalize a single date string in any supported shape.

        Example:
            >>> normalizer.normalize("03/15/2024")
            "2024-03-15"
        """
        if not date_str:
            return None
        date_str = ' '.join(date_str.split())

        for pattern, parse in self.shapes:
            if pattern.fullmatch(date_str):
                parsed = parse(date_str)
                if parsed is not None:
                    return parsed.strftime(self.output_format)
        return None

    def _parse_long_form(self, date_str: str) -> Optional[datetime]:
        try:
            return date_parser.parse(date_str, fuzzy=False)
        except (ValueError, OverflowError):
            return None

    def _parse_slash_form(self, date_str: str) -> Optional[datetime]:
        try:
            return datetime.strptime(date_str, "%m/%d/%Y")
        except ValueError:
            return None

    def _parse_iso_form(self, date_str: str) -> Optional[datetime]:
        try:
            return datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            return None


class PurseNormalizer:
    """
    Parses purse amounts such as "$40,000" or "Purse 25000".

    Values below the configured minimum (default 1000) are treated as
    something else on the line, e.g. a horse number or a weight.

    Example:
        >>> normalizer = PurseNormalizer()
        >>> normalizer.extract_purse("6 Furlongs Dirt Purse $40,000")
        40000
        >>> normalizer.extract_purse("Weight 122")
        None
    """

    CURRENCY_SYMBOLS = ['$', '€', '£']

    AMOUNT_PATTERN = re.compile(
        r'(?P<currency>[$€£])?\s?(?P<amount>\d{1,3}(?:,\d{3})+|\d+)'
    )

    def __init__(self, minimum: Optional[int] = None) -> None:
        """
        Initialize the purse normalizer.

        Args:
            minimum: Smallest accepted purse. Defaults to
                    ``parsing.min_purse`` from configuration.
        """
        self.minimum = minimum if minimum is not None else get_config("parsing.min_purse", 1000)

    def normalize(self, amount_str: str) -> Optional[int]:
        """
        Convert an amount string to an integer, ignoring currency and commas.

        Returns:
            Integer amount, or None if the string holds no amount.
        """
        if not amount_str:
            return None

        for symbol in self.CURRENCY_SYMBOLS:
            amount_str = amount_str.replace(symbol, '')
        amount_str = amount_str.replace(',', '').strip()

        if not amount_str.isdigit():
            return None
        return int(amount_str)

    def extract_purse(self, text: str) -> Optional[int]:
        """
        Find the purse on a line.

        Every amount on the line is examined in order; the first one at or
        above the minimum is taken, currency symbol or not.

        Args:
            text: A single line of text.

        Returns:
            Purse amount or None.
        """
        if not text:
            return None

        for match in self.AMOUNT_PATTERN.finditer(text):
            amount = self.normalize(match.group('amount'))
            if amount is not None and amount >= self.minimum:
                return amount

        return None


class OddsNormalizer:
    """
    Converts morning line odds strings to numbers.

    Handles "5-1", "5/2" and plain decimal forms.

    Example:
        >>> OddsNormalizer.to_fraction("7-2")
        3.5
        >>> OddsNormalizer.implied_probability("3-1")
        0.25
    """

    @staticmethod
    def to_fraction(odds: Optional[str]) -> Optional[float]:
        """Return odds as a single number (numerator / denominator)."""
        if not odds:
            return None
        odds = odds.strip()

        for separator in ('-', '/'):
            if separator in odds:
                numerator, _, denominator = odds.partition(separator)
                try:
                    numerator_value = float(numerator)
                    denominator_value = float(denominator)
                except ValueError:
                    return None
                if denominator_value == 0:
                    return None
                return numerator_value / denominator_value

        try:
            return float(odds)
        except ValueError:
            return None

    @staticmethod
    def implied_probability(odds: Optional[str]) -> Optional[float]:
        """Return the win probability implied by the odds, 1 / (odds + 1)."""
        value = OddsNormalizer.to_fraction(odds)
        if value is None or value < 0:
            return None
        return 1 / (value + 1)
