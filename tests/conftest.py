"""Pytest configuration and fixtures for voicecalc tests."""

import itertools
import logging
import tempfile
from pathlib import Path

import pytest
import yaml
from pubsub import pub

from voicecalc.models.events import define_topics
from voicecalc.scheduling import Scheduler
from voicecalc.transcription.base import AbstractSpeechBackend, SpeechBackendError
from voicecalc.models.transcription import TranscriptSegment


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests spanning several components")


class FakeTimerHandle:
    """Handle returned by FakeScheduler.call_later."""

    def __init__(self, when, seq, callback):
        self.when = when
        self.seq = seq
        self.callback = callback
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled


class FakeScheduler(Scheduler):
    """Scheduler driven by a manual clock."""

    def __init__(self):
        self.now = 0.0
        self._handles = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        handle = FakeTimerHandle(self.now + delay, next(self._seq), callback)
        self._handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self._handles if not h.cancelled()]

    def advance(self, seconds=0.0):
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + seconds
        while True:
            due = [h for h in self.pending() if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self._handles = self.pending()
        self.now = target


class FakeSpeechBackend(AbstractSpeechBackend):
    """Backend that records calls; tests emit its events by hand."""

    def __init__(self, fail_starts=0):
        super().__init__()
        self.calls = []
        self.fail_starts = fail_starts

    def start(self):
        self.calls.append("start")
        if self.fail_starts > 0:
            self.fail_starts -= 1
            raise SpeechBackendError("recognition already started")

    def stop(self):
        self.calls.append("stop")

    def abort(self):
        self.calls.append("abort")

    def emit_start(self):
        self._emit_start()

    def emit_end(self):
        self._emit_end()

    def emit_error(self, code):
        self._emit_error(code)

    def emit_final(self, text):
        self._emit_result([TranscriptSegment(text=text, is_final=True)], 0)

    def emit_interim(self, text):
        self._emit_result([TranscriptSegment(text=text, is_final=False)], 0)


class EventRecorder:
    """Collects the ``event`` payloads published on one topic."""

    def __init__(self, topic):
        self.topic = topic
        self.events = []
        pub.subscribe(self.on_event, topic)

    def on_event(self, event):
        self.events.append(event)


@pytest.fixture(autouse=True)
def clean_pubsub():
    """Declare topics and drop all subscriptions after each test."""
    define_topics()
    yield
    pub.unsubAll()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def fake_backend():
    return FakeSpeechBackend()


@pytest.fixture
def recorder():
    """Factory for EventRecorder instances kept alive for the test."""
    recorders = []

    def make(topic):
        rec = EventRecorder(topic)
        recorders.append(rec)
        return rec

    return make


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def write_yaml(temp_data_dir):
    """Write a YAML document into the temp dir and return its path."""
    def write(name, data):
        path = Path(temp_data_dir) / name
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, allow_unicode=True)
        return str(path)

    return write
