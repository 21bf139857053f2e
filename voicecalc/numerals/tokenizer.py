"""Split cleaned transcript text into numeral-candidate tokens."""

from typing import List

from .alphabet import LIST_SEPARATOR, NUMERAL_ALPHABET


class Tokenizer:
    """Two-state scanner over the numeral alphabet.

    Characters inside ``NUMERAL_ALPHABET`` (Arabic digits, the decimal
    point, Chinese basic numerals and multipliers, and the list separator
    、) form runs; any run of other characters is a boundary. Inside a run,
    、 separates list items ("一百、兩百" gives two tokens). Empty tokens
    are dropped. Tokens are not validated here.
    """

    def __init__(self, alphabet=NUMERAL_ALPHABET, separator: str = LIST_SEPARATOR):
        self.alphabet = alphabet
        self.separator = separator

    def tokenize(self, text: str) -> List[str]:
        tokens = []
        current = []

        for char in text:
            if char in self.alphabet and char != self.separator:
                current.append(char)
                continue
            # Boundary: either a non-numeral character or a list separator.
            if current:
                tokens.append("".join(current))
                current = []

        if current:
            tokens.append("".join(current))
        return tokens


_default_tokenizer = Tokenizer()


def tokenize(text: str) -> List[str]:
    """Tokenize text with the default numeral alphabet."""
    return _default_tokenizer.tokenize(text)
