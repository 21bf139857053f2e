"""Speech backend that replays a scripted event stream.

Scripts are YAML lists (optionally under an ``events`` key). Each step is
one of::

    - "一百五 200 300"        # final segment
    - final: "結算"
    - interim: "3個30"        # interim segment, superseded by the next one
    - pause: 1.5              # seconds of silence
    - error: no-speech        # backend error, followed by session end
    - end: true               # backend ends the session on its own

Steps are played on the session's scheduler, one every ``step_delay``
seconds. ``abort()`` drops the current utterance and reports ``aborted``
followed by ``end``; a later ``start()`` resumes from the next step.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..models.transcription import TranscriptSegment
from ..scheduling import NamedTimer, Scheduler
from .base import ERROR_ABORTED, AbstractSpeechBackend, SpeechBackendError

logger = logging.getLogger(__name__)

Step = Dict[str, Any]

_STEP_KINDS = ("final", "interim", "pause", "error", "end")


def load_script(path: Union[str, Path]) -> List[Step]:
    """Load and validate a script file.

    Raises:
        FileNotFoundError: If the script does not exist
        ValueError: If the script is not a list of known steps
    """
    script_file = Path(path)
    if not script_file.exists():
        raise FileNotFoundError(f"Script file not found: {script_file}")

    try:
        with open(script_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in script file: {e}")

    if isinstance(data, dict):
        data = data.get("events")
    if not isinstance(data, list):
        raise ValueError(f"Script must be a list of events: {script_file}")
    return [normalize_step(step) for step in data]


def normalize_step(step: Union[str, Step]) -> Step:
    if isinstance(step, str):
        return {"final": step}
    if not isinstance(step, dict) or len(step) != 1:
        raise ValueError(f"Script step must be a string or a single-key mapping: {step!r}")
    kind = next(iter(step))
    if kind not in _STEP_KINDS:
        raise ValueError(f"Unknown script step '{kind}', expected one of {_STEP_KINDS}")
    return dict(step)


class ScriptedSpeechBackend(AbstractSpeechBackend):
    """Replays scripted results, errors and session ends."""

    def __init__(self,
                 steps: List[Union[str, Step]],
                 scheduler: Scheduler,
                 step_delay: float = 0.2,
                 **kwargs):
        super().__init__(**kwargs)
        self.steps = [normalize_step(step) for step in steps]
        self.step_delay = step_delay
        self.cursor = 0
        self.running = False
        self.start_count = 0

        # Finals of the current recognition window, as a browser reports them
        self.window: List[TranscriptSegment] = []
        self.pending_interim: Optional[str] = None

        self._step_timer = NamedTimer("script-step", scheduler)
        self._lifecycle_timer = NamedTimer("script-lifecycle", scheduler)

    @classmethod
    def from_file(cls, path: Union[str, Path], scheduler: Scheduler, **kwargs) -> "ScriptedSpeechBackend":
        return cls(load_script(path), scheduler, **kwargs)

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.steps)

    def start(self) -> None:
        if self.running:
            raise SpeechBackendError("Recognition already started")
        self.running = True
        self.start_count += 1
        logger.debug(f"Scripted backend starting (attempt {self.start_count}, step {self.cursor})")
        self._lifecycle_timer.arm(0, self._on_started)

    def stop(self) -> None:
        if not self.running:
            return
        self._step_timer.cancel()
        if self.pending_interim:
            # Stopping delivers what was already heard as final.
            self._emit_final(self.pending_interim)
        self._schedule_end()

    def abort(self) -> None:
        if not self.running:
            return
        self._step_timer.cancel()
        self.pending_interim = None
        self._schedule_end(error=ERROR_ABORTED)

    def _on_started(self) -> None:
        self._emit_start()
        self._step_timer.arm(self.step_delay, self._play_next)

    def _play_next(self) -> None:
        if self.exhausted:
            logger.debug("Script exhausted")
            return

        step = self.steps[self.cursor]
        self.cursor += 1
        kind, payload = next(iter(step.items()))
        logger.debug(f"Script step {self.cursor}/{len(self.steps)}: {kind}={payload!r}")

        delay = self.step_delay
        if kind == "final":
            self.pending_interim = None
            self._emit_final(str(payload))
        elif kind == "interim":
            self.pending_interim = str(payload)
            interim = TranscriptSegment(text=self.pending_interim, is_final=False)
            self._emit_result(self.window + [interim], len(self.window))
        elif kind == "pause":
            delay = float(payload)
        elif kind == "error":
            self._emit_error(str(payload))
            self._schedule_end()
            return
        elif kind == "end":
            self._schedule_end()
            return

        self._step_timer.arm(delay, self._play_next)

    def _emit_final(self, text: str) -> None:
        self.pending_interim = None
        self.window.append(TranscriptSegment(text=text, is_final=True))
        self._emit_result(list(self.window), len(self.window) - 1)

    def _schedule_end(self, error: Optional[str] = None) -> None:
        def finish():
            if error:
                self._emit_error(error)
            self.running = False
            self.window = []
            self.pending_interim = None
            self._emit_end()

        self._step_timer.cancel()
        self._lifecycle_timer.arm(0, finish)
