"""Unit tests for TranscriptAccumulator."""

import pytest
from unittest.mock import MagicMock

from voicecalc.models.transcription import TranscriptSegment
from voicecalc.transcription.accumulator import TranscriptAccumulator


def interim(text):
    return TranscriptSegment(text=text, is_final=False)


def final(text):
    return TranscriptSegment(text=text, is_final=True)


@pytest.fixture
def commits():
    return []


@pytest.fixture
def discard():
    return MagicMock()


@pytest.fixture
def accumulator(scheduler, commits, discard):
    return TranscriptAccumulator(scheduler, commits.append, discard_callback=discard, commit_delay=0.6)


@pytest.mark.unit
class TestTranscriptAccumulator:
    """Test cases for TranscriptAccumulator."""

    def test_final_commits_immediately(self, accumulator, commits, discard):
        accumulator.on_segment(final("一百五 200 300"))
        assert commits == ["一百五 200 300"]
        discard.assert_not_called()

    def test_interim_commits_after_quiet_period(self, accumulator, scheduler, commits, discard):
        accumulator.on_segment(interim("100"))
        scheduler.advance(0.5)
        assert commits == []

        scheduler.advance(0.11)
        assert commits == ["100"]
        discard.assert_called_once()
        assert accumulator.pending_interim_text == ""

    def test_interim_updates_supersede_and_debounce(self, accumulator, scheduler, commits):
        accumulator.on_segment(interim("1"))
        scheduler.advance(0.4)
        accumulator.on_segment(interim("100"))
        scheduler.advance(0.4)
        accumulator.on_segment(interim("100 200"))
        scheduler.advance(0.59)
        assert commits == []

        scheduler.advance(0.02)
        assert commits == ["100 200"]
        assert len(scheduler.pending()) == 0

    def test_final_cancels_pending_forced_commit(self, accumulator, scheduler, commits, discard):
        accumulator.on_segment(interim("100 200"))
        accumulator.on_segment(final("100 200"))
        scheduler.advance(5.0)

        assert commits == ["100 200"]
        discard.assert_not_called()

    def test_late_final_after_forced_commit_is_not_reprocessed(self, accumulator, scheduler, commits):
        accumulator.on_segment(interim("300"))
        scheduler.advance(0.6)
        accumulator.on_segment(final("300"))

        assert commits == ["300"]

    def test_late_interim_after_forced_commit_is_not_recommitted(self, accumulator, scheduler, commits):
        accumulator.on_segment(interim("300"))
        scheduler.advance(0.6)
        accumulator.on_segment(interim("300"))
        scheduler.advance(0.6)

        assert commits == ["300"]
        assert not accumulator.has_pending

    def test_late_interim_then_final_after_forced_commit(self, accumulator, scheduler, commits):
        accumulator.on_segment(interim("300"))
        scheduler.advance(0.6)
        accumulator.on_segment(interim("300"))
        accumulator.on_segment(final("300"))
        scheduler.advance(1.0)

        assert commits == ["300"]

    def test_new_final_after_forced_commit_is_processed(self, accumulator, scheduler, commits):
        accumulator.on_segment(interim("300"))
        scheduler.advance(0.6)
        accumulator.on_segment(interim("400"))
        accumulator.on_segment(final("400"))

        assert commits == ["300", "400"]

    def test_at_most_one_pending_timer(self, accumulator, scheduler):
        for text in ("1", "12", "123", "1234"):
            accumulator.on_segment(interim(text))
        assert len(scheduler.pending()) == 1

    def test_empty_segments_are_ignored(self, accumulator, scheduler, commits):
        accumulator.on_segment(interim("   "))
        accumulator.on_segment(final(""))
        scheduler.advance(1.0)
        assert commits == []
        assert not accumulator.has_pending

    def test_on_result_splits_finals_and_interim(self, accumulator, scheduler, commits):
        segments = [final("old"), final("100"), interim("20"), interim("0")]
        accumulator.on_result(segments, result_index=1)

        assert commits == ["100"]
        assert accumulator.pending_interim_text == "200"
        scheduler.advance(0.6)
        assert commits == ["100", "200"]

    def test_flush_commits_pending_text(self, accumulator, scheduler, commits, discard):
        accumulator.on_segment(interim("50"))
        accumulator.flush()
        assert commits == ["50"]
        discard.assert_not_called()

        # Backend delivers the same text as final when it stops.
        accumulator.on_segment(final("50"))
        scheduler.advance(1.0)
        assert commits == ["50"]

    def test_flush_without_pending_is_noop(self, accumulator, commits):
        accumulator.flush()
        assert commits == []

    def test_reset_drops_pending_text(self, accumulator, scheduler, commits):
        accumulator.on_segment(interim("50"))
        accumulator.reset()
        scheduler.advance(1.0)
        assert commits == []

    def test_invalid_commit_delay(self, scheduler):
        with pytest.raises(ValueError):
            TranscriptAccumulator(scheduler, lambda text: None, commit_delay=0)
