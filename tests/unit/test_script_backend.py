"""Unit tests for ScriptedSpeechBackend."""

import pytest

from voicecalc.transcription.base import SpeechBackendError, SpeechEventHandler
from voicecalc.transcription.script_backend import ScriptedSpeechBackend, load_script, normalize_step


class RecordingHandler(SpeechEventHandler):
    """Handler that records backend events as tuples."""

    def __init__(self):
        self.events = []

    def on_start(self):
        self.events.append(("start",))

    def on_end(self):
        self.events.append(("end",))

    def on_result(self, segments, result_index):
        changed = segments[result_index:]
        self.events.append(("result", [(s.text, s.is_final) for s in changed]))

    def on_error(self, code):
        self.events.append(("error", code))


@pytest.fixture
def handler():
    return RecordingHandler()


def make_backend(steps, scheduler, handler):
    backend = ScriptedSpeechBackend(steps, scheduler, step_delay=0.2)
    backend.bind(handler)
    return backend


@pytest.mark.unit
class TestScriptedSpeechBackend:
    """Test cases for ScriptedSpeechBackend."""

    def test_plays_steps_after_start(self, scheduler, handler):
        backend = make_backend(["100", {"interim": "2"}, {"final": "200"}], scheduler, handler)
        backend.start()
        scheduler.advance(1.0)

        assert handler.events == [
            ("start",),
            ("result", [("100", True)]),
            ("result", [("2", False)]),
            ("result", [("200", True)]),
        ]
        assert backend.exhausted

    def test_pause_step_delays_next_step(self, scheduler, handler):
        backend = make_backend([{"pause": 2.0}, "100"], scheduler, handler)
        backend.start()
        scheduler.advance(2.0)
        assert handler.events == [("start",)]
        scheduler.advance(0.5)
        assert handler.events[-1] == ("result", [("100", True)])

    def test_error_step_ends_session(self, scheduler, handler):
        backend = make_backend([{"error": "no-speech"}, "100"], scheduler, handler)
        backend.start()
        scheduler.advance(1.0)

        assert handler.events == [("start",), ("error", "no-speech"), ("end",)]
        assert not backend.running
        assert not backend.exhausted

    def test_restart_resumes_from_cursor(self, scheduler, handler):
        backend = make_backend([{"end": True}, "100"], scheduler, handler)
        backend.start()
        scheduler.advance(1.0)
        backend.start()
        scheduler.advance(1.0)

        assert handler.events == [("start",), ("end",), ("start",), ("result", [("100", True)])]
        assert backend.start_count == 2

    def test_start_while_running_raises(self, scheduler, handler):
        backend = make_backend(["100"], scheduler, handler)
        backend.start()
        with pytest.raises(SpeechBackendError):
            backend.start()

    def test_abort_discards_utterance(self, scheduler, handler):
        backend = make_backend([{"interim": "3個"}, "later"], scheduler, handler)
        backend.start()
        scheduler.advance(0.2)
        backend.abort()
        scheduler.advance(0)

        assert handler.events[-2:] == [("error", "aborted"), ("end",)]
        assert backend.pending_interim is None
        assert backend.cursor == 1

    def test_stop_finalizes_pending_interim(self, scheduler, handler):
        backend = make_backend([{"interim": "100"}, "later"], scheduler, handler)
        backend.start()
        scheduler.advance(0.2)
        backend.stop()
        scheduler.advance(0)

        assert handler.events[-2:] == [("result", [("100", True)]), ("end",)]
        assert not backend.running

    def test_stop_and_abort_when_idle_are_noops(self, scheduler, handler):
        backend = make_backend(["100"], scheduler, handler)
        backend.stop()
        backend.abort()
        scheduler.advance(1.0)
        assert handler.events == []

    def test_results_accumulate_within_window(self, scheduler, handler):
        backend = make_backend(["1", "2"], scheduler, handler)
        backend.start()
        scheduler.advance(1.0)
        assert [s.text for s in backend.window] == ["1", "2"]


@pytest.mark.unit
class TestScriptLoading:
    """Test cases for script files."""

    def test_load_list(self, write_yaml):
        path = write_yaml("script.yaml", ["100", {"interim": "2"}])
        assert load_script(path) == [{"final": "100"}, {"interim": "2"}]

    def test_load_events_mapping(self, write_yaml):
        path = write_yaml("script.yaml", {"events": [{"error": "network"}]})
        assert load_script(path) == [{"error": "network"}]

    def test_missing_file(self, temp_data_dir):
        with pytest.raises(FileNotFoundError):
            load_script(f"{temp_data_dir}/nope.yaml")

    def test_not_a_list(self, write_yaml):
        path = write_yaml("script.yaml", {"foo": 1})
        with pytest.raises(ValueError):
            load_script(path)

    @pytest.mark.parametrize("step", [{"shout": "x"}, {"final": "1", "interim": "2"}, 42])
    def test_invalid_steps(self, step):
        with pytest.raises(ValueError):
            normalize_step(step)

    def test_from_file(self, write_yaml, scheduler):
        path = write_yaml("script.yaml", ["100"])
        backend = ScriptedSpeechBackend.from_file(path, scheduler, language="en-US")
        assert backend.steps == [{"final": "100"}]
        assert backend.language == "en-US"
