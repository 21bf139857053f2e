"""Unit tests for CommandDetector and transcript cleaning."""

import pytest

from voicecalc.numerals.cleaning import clean_transcript
from voicecalc.numerals.commands import Command, CommandDetector
from voicecalc.numerals.pipeline import ExtractionPipeline


@pytest.mark.unit
class TestCommandDetector:
    """Test cases for CommandDetector."""

    @pytest.mark.parametrize("text", ["刪除", "刪除上一筆", "請刪除 300", "delete", "Delete that", "DELETE"])
    def test_delete_last(self, text):
        assert CommandDetector().detect(text) is Command.DELETE_LAST

    @pytest.mark.parametrize("text", ["總共多少", "多少錢", "結算", "買單", "現在總共"])
    def test_show_summary(self, text):
        assert CommandDetector().detect(text) is Command.SHOW_SUMMARY

    @pytest.mark.parametrize("text", ["一百五 200", "", "午餐 150"])
    def test_no_command(self, text):
        assert CommandDetector().detect(text) is None

    def test_delete_wins_over_summary(self):
        assert CommandDetector().detect("刪除 結算") is Command.DELETE_LAST

    def test_custom_vocabulary(self):
        detector = CommandDetector(delete_keywords=["undo"], summary_keywords=["total"])
        assert detector.detect("UNDO") is Command.DELETE_LAST
        assert detector.detect("Total please") is Command.SHOW_SUMMARY
        assert detector.detect("刪除") is None


@pytest.mark.unit
class TestCleanTranscript:
    """Test cases for clean_transcript."""

    def test_strips_and_collapses_whitespace(self):
        assert clean_transcript("  100   200 \n") == "100 200"

    def test_full_width_digits(self):
        assert clean_transcript("１００ ２．５") == "100 2.5"

    def test_thousands_separators(self):
        assert clean_transcript("1,000 和 12,500 和 1,000,000") == "1000 和 12500 和 1000000"

    def test_list_commas_are_kept(self):
        assert clean_transcript("100,20") == "100,20"

    def test_full_width_list_commas_become_boundaries(self):
        assert clean_transcript("100，200，300") == "100 200 300"

    def test_malformed_groups_are_not_merged(self):
        assert clean_transcript("1234,567 和 12,34") == "1234,567 和 12,34"

    @pytest.mark.parametrize("text, expected", [
        ("100，200，300", [100, 200, 300]),
        ("一百，兩百", [100, 200]),
        ("1,500 和 2,000", [1500, 2000]),
    ])
    def test_pipeline_keeps_listed_amounts_apart(self, text, expected):
        assert ExtractionPipeline().process(text).values == expected

    def test_none_is_empty(self):
        assert clean_transcript(None) == ""
