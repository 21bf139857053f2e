"""Transcription module for voicecalc."""

from .base import (
    AbstractSpeechBackend,
    SpeechEventHandler,
    SpeechBackendError,
    BENIGN_ERRORS,
    FATAL_ERRORS,
)
from .accumulator import TranscriptAccumulator
from .script_backend import ScriptedSpeechBackend, load_script

__all__ = [
    "AbstractSpeechBackend",
    "SpeechEventHandler",
    "SpeechBackendError",
    "BENIGN_ERRORS",
    "FATAL_ERRORS",
    "TranscriptAccumulator",
    "ScriptedSpeechBackend",
    "load_script",
]
