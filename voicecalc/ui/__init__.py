"""Console presentation for voicecalc."""

from .console_presenter import ConsolePresenter

__all__ = ["ConsolePresenter"]
