"""Transcription-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TranscriptSegment:
    """One unit of recognized text emitted by a speech backend."""
    text: str
    is_final: bool = False
