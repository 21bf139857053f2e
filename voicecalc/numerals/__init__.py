"""Numeral extraction: parsing, tokenization, multiplier expansion, commands."""

from .parser import NumeralParser, parse_numeral
from .tokenizer import Tokenizer, tokenize
from .expander import MultiplierExpander
from .commands import Command, CommandDetector
from .cleaning import clean_transcript
from .pipeline import ExtractionPipeline, ExtractionOutcome

__all__ = [
    "NumeralParser",
    "parse_numeral",
    "Tokenizer",
    "tokenize",
    "MultiplierExpander",
    "Command",
    "CommandDetector",
    "clean_transcript",
    "ExtractionPipeline",
    "ExtractionOutcome",
]
