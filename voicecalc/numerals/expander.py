"""Expansion of "quantity 個 amount" shorthand into repeated amounts."""

import logging
import re
from typing import Optional

from .alphabet import NUMERAL_CHARS, UNIT_WORDS
from .parser import NumeralParser

logger = logging.getLogger(__name__)

DEFAULT_MAX_QUANTITY = 50

_NUMERAL_RUN = "[" + re.escape("".join(sorted(NUMERAL_CHARS))) + "]+"
_UNIT = "(?:" + "|".join(re.escape(word) for word in UNIT_WORDS) + ")"
_MULTIPLIER_PHRASE = re.compile(
    rf"(?P<quantity>{_NUMERAL_RUN})\s*{_UNIT}\s*(?P<amount>{_NUMERAL_RUN})"
)


class MultiplierExpander:
    """Rewrites "3個300" as "300 300 300" before tokenization.

    Phrases are matched left to right over the original text without
    overlap. A phrase whose quantity is not a whole number in
    ``[1, max_quantity]`` is left untouched.
    """

    def __init__(self, parser: Optional[NumeralParser] = None,
                 max_quantity: int = DEFAULT_MAX_QUANTITY):
        self.parser = parser or NumeralParser()
        self.max_quantity = max_quantity

    def expand(self, text: str) -> str:
        return _MULTIPLIER_PHRASE.sub(self._expand_match, text)

    def _expand_match(self, match: "re.Match") -> str:
        quantity_text = match.group("quantity")
        amount = match.group("amount")
        quantity = self.parser.parse(quantity_text)

        if quantity is None or quantity != int(quantity) or not 1 <= quantity <= self.max_quantity:
            logger.debug(f"Leaving multiplier phrase '{match.group(0)}' unexpanded "
                         f"(quantity={quantity})")
            return match.group(0)

        logger.debug(f"Expanding '{match.group(0)}' into {int(quantity)} x {amount}")
        return " " + " ".join([amount] * int(quantity)) + " "
