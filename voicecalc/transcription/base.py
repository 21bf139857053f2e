"""Abstract base classes for speech recognition backends."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
import logging

from ..models.transcription import TranscriptSegment

logger = logging.getLogger(__name__)

# Error codes reported through SpeechEventHandler.on_error
ERROR_NO_SPEECH = "no-speech"
ERROR_ABORTED = "aborted"
ERROR_NETWORK = "network"
ERROR_NOT_ALLOWED = "not-allowed"
ERROR_SERVICE_NOT_ALLOWED = "service-not-allowed"

BENIGN_ERRORS = frozenset({ERROR_NO_SPEECH, ERROR_ABORTED, ERROR_NETWORK})
FATAL_ERRORS = frozenset({ERROR_NOT_ALLOWED, ERROR_SERVICE_NOT_ALLOWED})


class SpeechBackendError(Exception):
    """Raised when a backend operation cannot be carried out."""


class SpeechEventHandler(ABC):
    """Receives the backend's event stream."""

    @abstractmethod
    def on_start(self) -> None:
        pass

    @abstractmethod
    def on_end(self) -> None:
        pass

    @abstractmethod
    def on_result(self, segments: Sequence[TranscriptSegment], result_index: int) -> None:
        """Handle recognition results.

        Args:
            segments: All results of the current recognition window
            result_index: Index of the first result that changed
        """
        pass

    @abstractmethod
    def on_error(self, code: str) -> None:
        pass


class AbstractSpeechBackend(ABC):
    """Abstract base class for callback-based speech backends."""

    def __init__(self, language: str = "cmn-Hant-TW",
                 continuous: bool = True,
                 interim_results: bool = True):
        """Initialize backend with recognition preferences."""
        self.language = language
        self.continuous = continuous
        self.interim_results = interim_results
        self.handler: Optional[SpeechEventHandler] = None

    def bind(self, handler: SpeechEventHandler) -> None:
        """Route this backend's events to handler."""
        self.handler = handler

    @abstractmethod
    def start(self) -> None:
        """Begin recognition; confirmed later through on_start.

        Raises:
            SpeechBackendError: If recognition cannot be started
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop recognition, delivering results for audio already heard."""
        pass

    @abstractmethod
    def abort(self) -> None:
        """Stop recognition and discard the current utterance."""
        pass

    def _emit_start(self) -> None:
        if self.handler:
            self.handler.on_start()

    def _emit_end(self) -> None:
        if self.handler:
            self.handler.on_end()

    def _emit_result(self, segments: Sequence[TranscriptSegment], result_index: int = 0) -> None:
        if self.handler:
            self.handler.on_result(segments, result_index)

    def _emit_error(self, code: str) -> None:
        if self.handler:
            self.handler.on_error(code)
