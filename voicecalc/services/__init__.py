"""Services layer for voicecalc application logic."""

from .session_controller import SessionController
from .calculator_service import VoiceCalculatorService

__all__ = [
    "SessionController",
    "VoiceCalculatorService",
]
