"""
Tests for the match extractor.

Tests match location, overlapping matches, snippets, and addresses.
"""

import pytest

from library_search.search.match_extractor import MatchExtractor
from library_search.search.models import SearchResult


@pytest.fixture
def extractor():
    """Create an extractor with a small snippet window."""
    return MatchExtractor(snippet_context_chars=5, strip_markup=True)


class TestFindMatches:
    """Tests for find_matches."""

    def test_single_match_location(self, extractor, sample_books):
        """Test that a match is attributed to its line."""
        results = list(extractor.find_matches("BookA.txt", sample_books["BookA.txt"], "shalom"))

        assert len(results) == 1
        assert results[0].book_path == "BookA.txt"
        assert results[0].book_index == 3
        assert results[0].query == "shalom"
        assert isinstance(results[0], SearchResult)

    def test_no_match(self, extractor, sample_books):
        """Test that a book without the query yields nothing."""
        assert list(extractor.find_matches("BookB.txt", sample_books["BookB.txt"], "shalom")) == []

    def test_case_sensitive(self, extractor):
        """Test that matching is case sensitive."""
        assert list(extractor.find_matches("b", "Shalom", "shalom")) == []

    def test_overlapping_matches_reported(self, extractor):
        """Test that overlapping occurrences are each reported."""
        results = list(extractor.find_matches("b", "aaaa", "aa"))

        assert [r.offset for r in results] == [0, 1, 2]

    def test_match_spanning_lines_uses_start_line(self, extractor):
        """Test that a match across a line break belongs to its first line."""
        results = list(extractor.find_matches("b", "xx\nab\ncd", "b\nc"))

        assert len(results) == 1
        assert results[0].book_index == 1

    def test_results_in_offset_order(self, extractor, sample_books):
        """Test that results come in text order."""
        results = list(extractor.find_matches("BookC.txt", sample_books["BookC.txt"], "shalom"))

        assert [r.book_index for r in results] == [2, 5, 5]
        assert [r.offset for r in results] == sorted(r.offset for r in results)

    def test_empty_text_yields_nothing(self, extractor):
        """Test that empty book text yields an empty sequence."""
        assert list(extractor.find_matches("b", "", "shalom")) == []

    def test_empty_query_yields_nothing(self, extractor):
        """Test that an empty query yields nothing."""
        assert list(extractor.find_matches("b", "text", "")) == []

    def test_each_call_is_independent(self, extractor, sample_books):
        """Test that repeated calls give the same fresh sequence."""
        text = sample_books["BookC.txt"]

        first = extractor.find_matches("BookC.txt", text, "shalom")
        second = extractor.find_matches("BookC.txt", text, "shalom")

        assert first is not second
        assert list(first) == list(second)
        assert list(first) == []  # exhausted generator
        assert len(list(extractor.find_matches("BookC.txt", text, "shalom"))) == 3

    def test_path_object_recorded_as_string(self, extractor, temp_dir):
        """Test that book paths are stored as strings."""
        results = list(extractor.find_matches(temp_dir / "Book.txt", "shalom", "shalom"))

        assert results[0].book_path == str(temp_dir / "Book.txt")


class TestAddress:
    """Tests for display addresses."""

    def test_address_uses_open_headings(self, extractor, sample_books):
        """Test that the address lists the headings open at the match."""
        results = list(extractor.find_matches("/lib/BookC.txt", sample_books["BookC.txt"], "shalom"))

        assert results[0].address == "BookC, Part One"
        assert results[1].address == "BookC, Part Two, Section A"
        assert results[2].address == "BookC, Part Two, Section A"

    def test_address_without_headings_is_title(self, extractor):
        """Test a book with no headings."""
        results = list(extractor.find_matches("/lib/Plain.txt", "one\nshalom", "shalom"))

        assert results[0].address == "Plain"

    def test_heading_line_itself_counts(self, extractor):
        """Test that a match inside a heading sees that heading."""
        results = list(extractor.find_matches("/lib/B.txt", "<h2>shalom chapter</h2>", "shalom"))

        assert results[0].address == "B, shalom chapter"

    def test_same_level_heading_replaces_deeper(self, extractor):
        """Test that a new level 2 heading closes open level 3 headings."""
        text = "<h2>One</h2>\n<h3>Deep</h3>\n<h2>Two</h2>\nshalom"

        results = list(extractor.find_matches("/lib/B.txt", text, "shalom"))

        assert results[0].address == "B, Two"


class TestSnippet:
    """Tests for snippet construction."""

    def test_window_with_ellipses(self, extractor):
        """Test a window cut on both sides."""
        text = "0123456789shalom0123456789"

        results = list(extractor.find_matches("b", text, "shalom"))

        assert results[0].snippet == "...56789shalom01234..."

    def test_window_at_text_edges(self, extractor):
        """Test that no ellipsis is added at the text edges."""
        results = list(extractor.find_matches("b", "ab shalom", "shalom"))

        assert results[0].snippet == "ab shalom"

    def test_snippet_crosses_lines_and_strips_markup(self):
        """Test that the window ignores line boundaries and removes tags."""
        extractor = MatchExtractor(snippet_context_chars=40, strip_markup=True)
        text = "<h2>Head</h2>\nsay <b>shalom</b>\nnext line"

        results = list(extractor.find_matches("b", text, "shalom"))

        assert results[0].snippet == "Head say shalom next line"

    def test_angle_bracket_before_match_keeps_match(self):
        """Test that a bare '<' in prose does not swallow the match."""
        results = list(MatchExtractor(snippet_context_chars=40).find_matches(
            "BookA", "if a<b then shalom to all", "shalom"
        ))

        assert results[0].snippet == "if a<b then shalom to all"

    def test_untruncated_start_keeps_leading_word(self):
        """Test that 'word>' at the true start of the text is kept."""
        results = list(MatchExtractor(snippet_context_chars=40).find_matches(
            "BookA", "x>y shalom", "shalom"
        ))

        assert results[0].snippet == "x>y shalom"

    def test_cut_tags_removed_only_at_cut_edges(self):
        """Test that tag fragments left by the window cut are removed."""
        extractor = MatchExtractor(snippet_context_chars=6, strip_markup=True)
        text = '<p class="intro">ok shalom ok <h2>Next</h2>'

        results = list(extractor.find_matches("b", text, "shalom"))

        assert results[0].snippet == "...ok shalom ok..."

    def test_match_inside_markup_is_kept(self):
        """Test that a query containing markup survives stripping."""
        results = list(MatchExtractor(snippet_context_chars=5).find_matches(
            "b", "say <b>shalom</b> now", "<b>shalom</b>"
        ))

        assert "<b>shalom</b>" in results[0].snippet

    def test_markup_kept_when_disabled(self):
        """Test that tags survive when stripping is disabled."""
        extractor = MatchExtractor(snippet_context_chars=10, strip_markup=False)

        results = list(extractor.find_matches("b", "<b>shalom</b>", "shalom"))

        assert results[0].snippet == "<b>shalom</b>"

    def test_uses_config_default_width(self, configured):
        """Test that the configured context width is used by default."""
        extractor = MatchExtractor()

        assert extractor.snippet_context_chars == 20
        assert extractor.strip_markup is True
