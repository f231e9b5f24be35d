"""Tests for the escape-aware scanner and line fitter."""

import pytest

from tmux_preview.ansi import (
    ELLIPSIS,
    RESET,
    Token,
    TokenKind,
    east_asian_width,
    fit_line,
    get_width_policy,
    is_blank,
    scan,
    simple_width,
    strip_ansi,
    truncate,
    visible_width,
)

SAMPLE_LINES = [
    "",
    "hello",
    "\033[31mred\033[0m text",
    "x" * 200,
    "\033[1;32m" + "y" * 50 + "\033[0m",
    "tab\tchar",
    "ünïcödé",
    "\033]8;;http://example.com\007link\033]8;;\007 after",
    "broken \033[31",
    "\033",
    "a\033[",
    "mixed \033[38;5;244mgrey\033[0m and more text here",
    "\033(Bcharset switch",
]

WIDTHS = [1, 2, 5, 10, 20, 47]


class TestScan:
    """Tokenizing lines into characters and escape runs."""

    def test_plain_text(self):
        """Every character is its own CHAR token."""
        assert scan("ab") == [Token(TokenKind.CHAR, "a"), Token(TokenKind.CHAR, "b")]

    def test_sgr_sequence(self):
        """An SGR sequence is one zero-width ESCAPE token."""
        assert scan("\033[1;31mhi") == [
            Token(TokenKind.ESCAPE, "\033[1;31m"),
            Token(TokenKind.CHAR, "h"),
            Token(TokenKind.CHAR, "i"),
        ]

    def test_charset_designation(self):
        """ESC ( B ends at its final byte."""
        assert scan("\033(Bx") == [Token(TokenKind.ESCAPE, "\033(B"), Token(TokenKind.CHAR, "x")]

    def test_osc_terminated_by_bel(self):
        """OSC strings end at BEL."""
        tokens = scan("\033]0;title\007x")
        assert tokens == [Token(TokenKind.ESCAPE, "\033]0;title\007"), Token(TokenKind.CHAR, "x")]

    def test_osc_terminated_by_string_terminator(self):
        """OSC strings end at ESC backslash."""
        tokens = scan("\033]0;title\033\\x")
        assert tokens == [Token(TokenKind.ESCAPE, "\033]0;title\033\\"), Token(TokenKind.CHAR, "x")]

    def test_osc_interrupted_by_new_escape(self):
        """An ESC inside an unterminated string starts a fresh sequence."""
        tokens = scan("\033]0;ti\033[31mx")
        assert tokens == [
            Token(TokenKind.BROKEN, "\033]0;ti"),
            Token(TokenKind.ESCAPE, "\033[31m"),
            Token(TokenKind.CHAR, "x"),
        ]

    def test_unterminated_csi_at_end(self):
        """A CSI cut off at end of line is one BROKEN token."""
        assert scan("ok\033[31") == [
            Token(TokenKind.CHAR, "o"),
            Token(TokenKind.CHAR, "k"),
            Token(TokenKind.BROKEN, "\033[31"),
        ]

    def test_csi_interrupted_by_non_ascii(self):
        """A CSI broken by a character outside its grammar ends before it."""
        assert scan("\033[31é") == [Token(TokenKind.BROKEN, "\033[31"), Token(TokenKind.CHAR, "é")]

    def test_lone_escape_before_control(self):
        """A lone ESC is its own BROKEN token and the next char is rescanned."""
        assert scan("\033\001a") == [
            Token(TokenKind.BROKEN, "\033"),
            Token(TokenKind.CHAR, "\001"),
            Token(TokenKind.CHAR, "a"),
        ]


class TestMeasuring:
    """visible_width, strip_ansi and is_blank."""

    def test_visible_width_ignores_escapes(self):
        assert visible_width("\033[31mred\033[0m") == 3

    def test_strip_ansi(self):
        assert strip_ansi("\033[1mbold\033[0m plain") == "bold plain"

    @pytest.mark.parametrize("line", ["", "   ", "\033[0m  ", "\033[31m\033[0m"])
    def test_blank_lines(self, line):
        """Whitespace and style codes alone count as blank."""
        assert is_blank(line)

    @pytest.mark.parametrize("line", [" x ", "\033[31m$\033[0m"])
    def test_non_blank_lines(self, line):
        assert not is_blank(line)


class TestFitLine:
    """fit_line produces exactly the requested visible width."""

    @pytest.mark.parametrize("width", WIDTHS)
    @pytest.mark.parametrize("line", SAMPLE_LINES)
    def test_exact_visible_width(self, line, width):
        """Visible width always equals the target."""
        assert visible_width(fit_line(line, width)) == width

    @pytest.mark.parametrize("width", WIDTHS)
    @pytest.mark.parametrize("line", SAMPLE_LINES)
    def test_idempotent(self, line, width):
        """Fitting an already fitted line changes nothing."""
        once = fit_line(line, width)
        assert fit_line(once, width) == once

    @pytest.mark.parametrize("width", WIDTHS)
    @pytest.mark.parametrize("line", SAMPLE_LINES)
    def test_ends_with_single_reset(self, line, width):
        fitted = fit_line(line, width)
        assert fitted.endswith(RESET)
        assert not fitted[: -len(RESET)].endswith(RESET) or line.endswith(RESET)

    @pytest.mark.parametrize("width", [1, 3, 8, 20])
    def test_empty_line_is_spaces_plus_reset(self, width):
        assert fit_line("", width) == " " * width + RESET

    def test_exact_length_passes_through(self):
        """A line that already fits exactly gets only the reset."""
        assert fit_line("hello", 5) == "hello" + RESET

    def test_exact_length_with_styles(self):
        line = "\033[32mok\033[0m go"
        assert fit_line(line, 5) == line + RESET

    def test_long_plain_line_truncates_with_ellipsis(self):
        """200 characters into 20 columns: 19 characters, an ellipsis and a reset."""
        line = "abcdefghij" * 20
        fitted = fit_line(line, 20)
        assert fitted == "abcdefghijabcdefghi" + ELLIPSIS + RESET
        assert visible_width(fitted) == 20

    @pytest.mark.parametrize("width", WIDTHS)
    def test_truncation_has_exactly_one_ellipsis(self, width):
        fitted = strip_ansi(fit_line("\033[33m" + "z" * 100, width))
        assert fitted.count(ELLIPSIS) == 1
        assert fitted.endswith(ELLIPSIS)

    def test_width_one_truncates_to_ellipsis(self):
        assert fit_line("ab", 1) == ELLIPSIS + RESET

    def test_width_one_keeps_single_char(self):
        assert fit_line("a", 1) == "a" + RESET

    def test_short_line_is_padded(self):
        assert fit_line("\033[31mab", 5) == "\033[31mab   " + RESET

    def test_escapes_kept_in_position(self):
        assert fit_line("a\033[1mb\033[0mc", 3) == "a\033[1mb\033[0mc" + RESET

    def test_escapes_after_truncation_dropped(self):
        """Styles past the cut are superseded by the trailing reset."""
        fitted = fit_line("\033[31mabcdef\033[32mghi", 4)
        assert fitted == "\033[31mabc" + ELLIPSIS + RESET

    def test_broken_escape_is_zero_width_and_dropped(self):
        assert fit_line("ok\033[31", 4) == "ok  " + RESET

    def test_custom_ellipsis(self):
        assert fit_line("abcdefgh", 6, ellipsis="..") == "abcd.." + RESET

    def test_ellipsis_wider_than_width_falls_back(self):
        assert fit_line("abcdef", 2, ellipsis="...") == "a" + ELLIPSIS + RESET

    def test_ellipsis_that_fits_is_kept(self):
        assert fit_line("abcdef", 3, ellipsis="...") == "..." + RESET

    @pytest.mark.parametrize("width", [0, -3])
    def test_width_must_be_positive(self, width):
        with pytest.raises(ValueError):
            fit_line("abc", width)


class TestTruncate:
    """truncate() cuts without padding or reset."""

    def test_short_text_unchanged(self):
        assert truncate(" 1: zsh ", 20) == " 1: zsh "

    def test_long_text_cut(self):
        assert truncate(" 1: a-very-long-window-name ", 10) == " 1: a-ver" + ELLIPSIS


class TestWidthPolicies:
    """Replaceable per-character width policies."""

    def test_simple_width_counts_every_char_once(self):
        assert simple_width("中") == 1
        assert simple_width("\u0301") == 1

    def test_east_asian_width(self):
        assert east_asian_width("中") == 2
        assert east_asian_width("a") == 1
        assert east_asian_width("\u0301") == 0

    def test_wide_chars_fit_exactly(self):
        fitted = fit_line("中文", 4, char_width=east_asian_width)
        assert fitted == "中文" + RESET

    def test_wide_char_never_split(self):
        """A wide char that would overflow is replaced and the gap padded."""
        fitted = fit_line("ab中文", 4, char_width=east_asian_width)
        assert fitted == "ab" + ELLIPSIS + " " + RESET
        assert visible_width(fitted, east_asian_width) == 4

    @pytest.mark.parametrize("width", [1, 2, 3, 7])
    def test_east_asian_exact_width(self, width):
        fitted = fit_line("表示テスト漢字", width, char_width=east_asian_width)
        assert visible_width(fitted, east_asian_width) == width

    def test_get_width_policy(self):
        assert get_width_policy("east_asian") is east_asian_width
        assert get_width_policy("simple") is simple_width

    def test_unknown_policy_falls_back(self):
        assert get_width_policy("nonsense") is simple_width
