"""
Date parsing for time axes.

Patterns use `strftime` directives, e.g. "%d-%b-%y" for "12-Mar-21". Parsers
are memoized per pattern in a `DateParserCache` owned by a chart handle rather
than in module state.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Callable

import numpy as np

from .errors import DateParseError

DateParser = Callable[[Any], datetime]


def pattern_parser(pattern: str) -> DateParser:
    """
    Build a parser for `pattern`. Values that are already dates pass through.
    """

    def parse(value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        if isinstance(value, np.datetime64):
            return value.astype("datetime64[us]").astype(datetime)
        if not isinstance(value, str):
            raise DateParseError(value, pattern)
        try:
            return datetime.strptime(value, pattern)
        except ValueError as e:
            raise DateParseError(value, pattern) from e

    return parse


class DateParserCache:
    """
    Bounded, thread-safe memo of pattern parsers, evicting the least recently
    used pattern once `maxsize` distinct patterns have been seen.
    """

    maxsize: int
    _parsers: OrderedDict[str, DateParser]
    _lock: threading.Lock

    def __init__(self, maxsize: int = 32):
        if maxsize < 1:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self.maxsize = maxsize
        self._parsers = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._parsers)

    def __contains__(self, pattern: str) -> bool:
        return pattern in self._parsers

    def parser(self, pattern: str) -> DateParser:
        with self._lock:
            parser = self._parsers.get(pattern)
            if parser is not None:
                self._parsers.move_to_end(pattern)
                return parser

            parser = pattern_parser(pattern)
            self._parsers[pattern] = parser
            if len(self._parsers) > self.maxsize:
                self._parsers.popitem(last=False)
            return parser

    def parse(self, value: Any, pattern: str) -> datetime:
        return self.parser(pattern)(value)
