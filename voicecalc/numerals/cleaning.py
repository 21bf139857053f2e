"""Normalization of raw recognizer output before extraction.

Conservative by intent: only patterns known to break tokenization are
rewritten.
"""

import re
import unicodedata

# Full-width commas separate listed amounts: 100，200，300
_LIST_COMMA = "，"

# 1,000 / 12,500 / 1,000,000 -> one well-formed grouped number at a time
_GROUPED_NUMBER = re.compile(r"(?<![\d,])\d{1,3}(?:,\d{3})+(?![\d,])")


def clean_transcript(text: str) -> str:
    s = text or ""

    # 1) List commas become boundaries before NFKC folds them into ","
    s = s.replace(_LIST_COMMA, " ")

    # 2) Full-width digits and punctuation to ASCII: １００ -> 100
    s = unicodedata.normalize("NFKC", s)

    # 3) Drop thousands separators so one amount stays one token
    s = _GROUPED_NUMBER.sub(lambda m: m.group(0).replace(",", ""), s)

    # 4) Collapse whitespace
    s = re.sub(r"\s+", " ", s)

    return s.strip()
