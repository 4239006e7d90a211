"""Tests for mapping model line numbers onto document lines."""

import pytest

from models.document import TextDocument
from models.review import RawIssue
from services.coordinate_mapper import map_issue, resolve_line


class TestResolveLine:
    def test_relative_line_is_offset_by_excerpt_start(self):
        assert resolve_line(3, excerpt_start=10, line_count=50) == 12

    def test_whole_file_excerpt(self):
        assert resolve_line(1, excerpt_start=0, line_count=5) == 0

    @pytest.mark.parametrize("line", [None, "7", 2.5, True])
    def test_missing_or_non_numeric_defaults_to_first_excerpt_line(self, line):
        assert resolve_line(line, excerpt_start=4, line_count=20) == 4

    @pytest.mark.parametrize("line", [0, -1, -500])
    def test_non_positive_lines_clamp_to_zero(self, line):
        assert resolve_line(line, excerpt_start=0, line_count=10) == 0

    def test_hallucinated_line_clamps_to_last_line(self):
        assert resolve_line(9999, excerpt_start=3, line_count=10) == 9

    def test_always_in_bounds(self):
        for line_count in (1, 2, 17):
            for excerpt_start in (0, line_count - 1):
                for line in (None, -10, 0, 1, line_count, line_count * 3):
                    absolute = resolve_line(line, excerpt_start, line_count)
                    assert 0 <= absolute < line_count


class TestMapIssue:
    def test_range_spans_the_whole_line(self):
        document = TextDocument(document_id="d", content="a = 1\n    return value\nz")
        line_range = map_issue(RawIssue(line=2, message="m"), document, excerpt_start=0)
        assert (line_range.line, line_range.start_character, line_range.end_character) == (1, 0, 16)

    def test_carriage_returns_are_not_part_of_the_line(self):
        document = TextDocument(document_id="d", content="abc\r\ndef\r\n")
        assert map_issue(RawIssue(line=1), document, 0).end_character == 3

    def test_out_of_range_issue_attaches_to_last_line(self):
        document = TextDocument(document_id="d", content="one\ntwo\nthree")
        line_range = map_issue(RawIssue(line=40), document, excerpt_start=1)
        assert line_range.line == 2
        assert line_range.end_character == 5
