"""Character classes shared by the numeral parser, tokenizer and expander."""

# Basic numerals and their digit values. 兩 is the spoken form of two used
# before units and maps to the same digit as 二.
BASIC_NUMERALS = {
    "零": 0,
    "一": 1,
    "二": 2,
    "兩": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
}

# Positional multipliers. 萬 opens a new positional group.
MULTIPLIERS = {
    "十": 10,
    "百": 100,
    "千": 1000,
    "萬": 10000,
}

ARABIC_DIGITS = frozenset("0123456789")
DECIMAL_POINT = "."
LIST_SEPARATOR = "、"

# Characters of a single numeral (what can appear between separators).
CHINESE_NUMERAL_CHARS = frozenset(BASIC_NUMERALS) | frozenset(MULTIPLIERS)
NUMERAL_CHARS = ARABIC_DIGITS | {DECIMAL_POINT} | CHINESE_NUMERAL_CHARS

# Tokenizer alphabet: numeral characters plus the list separator.
NUMERAL_ALPHABET = NUMERAL_CHARS | {LIST_SEPARATOR}

# Unit words for "quantity + 個 + amount" shorthand.
UNIT_WORDS = ("個", "个")


def is_literal_char(char: str) -> bool:
    """True for characters of an Arabic literal (digits and decimal point)."""
    return char in ARABIC_DIGITS or char == DECIMAL_POINT


def has_chinese_numeral(text: str) -> bool:
    return any(char in CHINESE_NUMERAL_CHARS for char in text)
