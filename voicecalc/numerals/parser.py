"""Numeral parser for Arabic, Chinese and mixed-script amount tokens.

A token is either a plain decimal literal ("150", "12.5") or a positional
numeral built from basic numerals (零..九, 兩), multipliers (十 百 千 萬) and
optionally runs of Arabic digits ("3萬", "兩萬3千").

The scan keeps three accumulators:

* ``value``: the total folded so far
* ``bucket``: the digit group waiting for its multiplier
* ``digit_run``: literal digit characters not yet folded into ``bucket``

十 with an empty bucket counts as 一十 ("十五" = 15). 萬 rescales everything
accumulated so far, since it starts a new positional group. A basic numeral
right after 百/千/萬 at the end of the token takes the next-lower unit
("一百五" = 150, "兩萬三" = 23000).

A result of exactly zero is reported as no value, so spoken zero amounts
are never recorded.
"""

import logging
import math
import re
from typing import Optional, Union

from .alphabet import BASIC_NUMERALS, MULTIPLIERS, has_chinese_numeral, is_literal_char

logger = logging.getLogger(__name__)

Number = Union[int, float]

_DECIMAL_LITERAL = re.compile(r"\d+\.?\d*|\.\d+")
_LITERAL_PREFIX = re.compile(r"\d*\.?\d*")

# Multipliers after which a trailing basic numeral implies the next-lower unit.
_ELIDING_MULTIPLIERS = ("百", "千", "萬")


def _parse_literal(run: str) -> float:
    """Parse the longest decimal prefix of run; 0 when there is none."""
    prefix = _LITERAL_PREFIX.match(run).group(0)
    if not prefix or prefix == ".":
        return 0.0
    return float(prefix)


def _normalize(value: float) -> Number:
    return int(value) if value.is_integer() else value


class NumeralParser:
    """Converts one token into a number, or None when it has no value."""

    def parse(self, token: str) -> Optional[Number]:
        if not token:
            return None

        if not has_chinese_numeral(token) and _DECIMAL_LITERAL.fullmatch(token):
            value = float(token)
        else:
            value = self._scan(token)

        if value == 0 or not math.isfinite(value):
            logger.debug(f"Token '{token}' has no usable value ({value})")
            return None
        return _normalize(value)

    def _scan(self, token: str) -> float:
        value = 0.0
        bucket = 0.0
        digit_run = ""
        previous = None
        elided_unit = None

        for char in token:
            if is_literal_char(char):
                digit_run += char
                elided_unit = None
                previous = char
                continue

            if digit_run:
                bucket = _parse_literal(digit_run)
                digit_run = ""

            if char in BASIC_NUMERALS:
                bucket = BASIC_NUMERALS[char]
                if previous in _ELIDING_MULTIPLIERS and char != "零":
                    elided_unit = MULTIPLIERS[previous] // 10
                else:
                    elided_unit = None
            elif char in MULTIPLIERS:
                multiplier = MULTIPLIERS[char]
                if char == "十" and bucket == 0:
                    bucket = 1
                if char == "萬":
                    value = (value + bucket) * multiplier
                else:
                    value += bucket * multiplier
                bucket = 0.0
                elided_unit = None
            else:
                # Not part of a numeral; skipped without affecting position.
                continue
            previous = char

        if digit_run:
            bucket = _parse_literal(digit_run)
        elif elided_unit:
            bucket *= elided_unit
        return value + bucket


_default_parser = NumeralParser()


def parse_numeral(token: str) -> Optional[Number]:
    """Parse token with a shared :class:`NumeralParser`."""
    return _default_parser.parse(token)
