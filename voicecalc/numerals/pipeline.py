"""Extraction pipeline for one committed transcript."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .cleaning import clean_transcript
from .commands import Command, CommandDetector
from .expander import MultiplierExpander
from .parser import Number, NumeralParser
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)


@dataclass
class ExtractionOutcome:
    """Result of processing one committed text.

    A command and values are mutually exclusive: when ``command`` is set,
    ``values`` is empty.
    """
    text: str
    command: Optional[Command] = None
    values: List[Number] = field(default_factory=list)
    skipped_tokens: List[str] = field(default_factory=list)


class ExtractionPipeline:
    """clean -> detect command -> expand multipliers -> tokenize -> parse."""

    def __init__(self,
                 detector: Optional[CommandDetector] = None,
                 expander: Optional[MultiplierExpander] = None,
                 tokenizer: Optional[Tokenizer] = None,
                 parser: Optional[NumeralParser] = None):
        self.parser = parser or NumeralParser()
        self.detector = detector or CommandDetector()
        self.expander = expander or MultiplierExpander(self.parser)
        self.tokenizer = tokenizer or Tokenizer()

    def process(self, text: str) -> ExtractionOutcome:
        cleaned = clean_transcript(text)
        outcome = ExtractionOutcome(text=cleaned)
        if not cleaned:
            return outcome

        outcome.command = self.detector.detect(cleaned)
        if outcome.command is not None:
            logger.info(f"Command {outcome.command.name} in '{cleaned}'")
            return outcome

        expanded = self.expander.expand(cleaned)
        for token in self.tokenizer.tokenize(expanded):
            value = self.parser.parse(token)
            if value is None:
                outcome.skipped_tokens.append(token)
            else:
                outcome.values.append(value)

        logger.info(f"Extracted {len(outcome.values)} value(s) from '{cleaned}': {outcome.values}")
        if outcome.skipped_tokens:
            logger.debug(f"Skipped tokens: {outcome.skipped_tokens}")
        return outcome
