"""Tests for the JotChord line tokenizer."""

import pytest

from jotchord.jot_parser.tokenizer import (
    has_whitespace,
    scan_tokens,
    split_compact,
    split_interior,
    split_trailing_comment,
)


class TestScanTokens:
    """Depth-aware whitespace splitting."""

    def test_plain_tokens(self) -> None:
        """Test simple whitespace separated chords."""
        assert scan_tokens("1 4 5 1") == ["1", "4", "5", "1"]

    def test_groups_stay_whole(self) -> None:
        """Whitespace inside parentheses and brackets does not split."""
        assert scan_tokens("1 (1 4) 5") == ["1", "(1 4)", "5"]
        assert scan_tokens("2[1 2 3] [5 6]") == ["2[1 2 3]", "[5 6]"]

    def test_inline_comment_is_opaque(self) -> None:
        """Spaces inside a closed comment do not split the token."""
        assert scan_tokens("1/*a b*/ 4") == ["1/*a b*/", "4"]

    def test_repeated_whitespace(self) -> None:
        """Runs of spaces and tabs count as one separator."""
        assert scan_tokens("  1 \t  4  ") == ["1", "4"]

    def test_unbalanced_group_swallows_rest(self) -> None:
        """An unclosed parenthesis keeps the rest of the text together."""
        assert scan_tokens("1 (1 4") == ["1", "(1 4"]

    def test_empty(self) -> None:
        """Test empty text has no tokens."""
        assert scan_tokens("") == []


class TestSplitCompact:
    """Splitting whitespace-free runs of chords."""

    @pytest.mark.parametrize(
        "run,expected",
        [
            ("3444", ["3", "4", "4", "4"]),
            ("1e2q", ["1e", "2q"]),
            ("#4-5", ["#4-", "5"]),
            ("1..b7-", ["1..", "b7-"]),
            ("<1><2>", ["<1>", "<2>"]),
            ("1..b7-<1><", ["1..", "b7-", "<1><"]),
            ("1mod+2b7", ["1mod+2", "b7"]),
            ("1/*x*/4", ["1/*x*/", "4"]),
            ("X5", ["X", "5"]),
        ],
    )
    def test_split(self, run: str, expected: list[str]) -> None:
        """Test chord boundaries in compact runs."""
        assert split_compact(run) == expected

    def test_empty(self) -> None:
        """Test an empty run has no tokens."""
        assert split_compact("") == []


class TestSplitInterior:
    """Group interiors choose whitespace or compact splitting."""

    def test_whitespace_interior(self) -> None:
        """Interiors with spaces split on the spaces."""
        assert split_interior("1e 2q") == ["1e", "2q"]

    def test_compact_interior(self) -> None:
        """Interiors without spaces split at chord heads."""
        assert split_interior("1234") == ["1", "2", "3", "4"]

    def test_trailing_space_keeps_single_chord(self) -> None:
        """A trailing space stops "1sus4" from splitting."""
        assert split_interior("1sus4 ") == ["1sus4"]

    def test_has_whitespace(self) -> None:
        """Test whitespace detection."""
        assert has_whitespace("1 4")
        assert not has_whitespace("14")


class TestSplitTrailingComment:
    """Trailing comment extraction."""

    def test_line_comment(self) -> None:
        """Test "//" comments are split off and stripped."""
        assert split_trailing_comment("1 4 5 //build up") == ("1 4 5", "build up")

    def test_unterminated_block_comment(self) -> None:
        """Test an unclosed "/*" runs to the end of the line."""
        assert split_trailing_comment("1/*soft*/ 4 /* tacet after") == (
            "1/*soft*/ 4",
            "tacet after",
        )

    def test_closed_comment_stays(self) -> None:
        """Closed inline comments are not trailing comments."""
        assert split_trailing_comment("1 /*a*/ 5 // end") == ("1 /*a*/ 5", "end")

    def test_no_comment(self) -> None:
        """Test lines without comments are unchanged."""
        assert split_trailing_comment("1 4") == ("1 4", None)

    def test_empty_comment(self) -> None:
        """Test an empty comment gives None."""
        assert split_trailing_comment("1 //   ") == ("1", None)
