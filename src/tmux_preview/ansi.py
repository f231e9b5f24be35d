# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# ANSI-aware Text Fitting
# =============================================================================
# Captured pane lines carry SGR (and occasionally OSC) escape sequences. They
# occupy no terminal cell, so every width decision below ignores them while
# keeping them in place in the output.

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from loguru import logger

ESC = "\033"
BEL = "\007"
RESET = "\033[0m"
ELLIPSIS = "…"


class TokenKind(Enum):
    CHAR = "char"        # one displayable character
    ESCAPE = "escape"    # complete escape sequence, zero width
    BROKEN = "broken"    # escape with no identifiable terminator, zero width


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


class ScanState(Enum):
    TEXT = "text"
    ESCAPE = "escape"              # just read ESC
    CSI = "csi"                    # ESC [ params/intermediates
    INTERMEDIATE = "intermediate"  # ESC followed by 0x20-0x2F bytes
    STRING = "string"              # OSC/DCS/SOS/PM/APC body
    STRING_ESC = "string_esc"      # ESC seen inside a string body


_STRING_INTRODUCERS = "]PX^_"


def _in_range(ch: str, low: int, high: int) -> bool:
    return low <= ord(ch) <= high


def scan(line: str) -> list[Token]:
    """Split a line into displayable characters and zero-width escape runs.

    CSI sequences end at a final byte (0x40-0x7E), string sequences (OSC and
    friends) at BEL or ESC \\. An escape whose grammar breaks before its
    terminator becomes a single BROKEN token covering the bytes read so far.
    """
    tokens: list[Token] = []
    state = ScanState.TEXT
    start = 0
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]

        if state is ScanState.TEXT:
            if ch == ESC:
                start = i
                state = ScanState.ESCAPE
            else:
                tokens.append(Token(TokenKind.CHAR, ch))
            i += 1

        elif state is ScanState.ESCAPE:
            if ch == "[":
                state = ScanState.CSI
                i += 1
            elif ch in _STRING_INTRODUCERS:
                state = ScanState.STRING
                i += 1
            elif _in_range(ch, 0x20, 0x2F):
                state = ScanState.INTERMEDIATE
                i += 1
            elif _in_range(ch, 0x30, 0x7E):
                tokens.append(Token(TokenKind.ESCAPE, line[start:i + 1]))
                state = ScanState.TEXT
                i += 1
            else:
                # Lone ESC; rescan ch as text
                tokens.append(Token(TokenKind.BROKEN, line[start:i]))
                state = ScanState.TEXT

        elif state is ScanState.CSI or state is ScanState.INTERMEDIATE:
            if state is ScanState.CSI and _in_range(ch, 0x30, 0x3F):
                i += 1
            elif _in_range(ch, 0x20, 0x2F):
                i += 1
            elif (state is ScanState.CSI and _in_range(ch, 0x40, 0x7E)) or (
                state is ScanState.INTERMEDIATE and _in_range(ch, 0x30, 0x7E)
            ):
                tokens.append(Token(TokenKind.ESCAPE, line[start:i + 1]))
                state = ScanState.TEXT
                i += 1
            else:
                tokens.append(Token(TokenKind.BROKEN, line[start:i]))
                state = ScanState.TEXT

        elif state is ScanState.STRING:
            if ch == BEL:
                tokens.append(Token(TokenKind.ESCAPE, line[start:i + 1]))
                state = ScanState.TEXT
            elif ch == ESC:
                state = ScanState.STRING_ESC
            i += 1

        else:  # ScanState.STRING_ESC
            if ch == "\\":
                tokens.append(Token(TokenKind.ESCAPE, line[start:i + 1]))
                state = ScanState.TEXT
                i += 1
            else:
                # The ESC starts a new sequence; the string never terminated
                tokens.append(Token(TokenKind.BROKEN, line[start:i - 1]))
                start = i - 1
                state = ScanState.ESCAPE

    if state is not ScanState.TEXT:
        tokens.append(Token(TokenKind.BROKEN, line[start:]))

    return tokens


# =============================================================================
# Width Policies
# =============================================================================

def simple_width(ch: str) -> int:
    """One column per character (no East-Asian or combining-mark handling)."""
    return 1


def east_asian_width(ch: str) -> int:
    """Zero for combining/format characters, two for Wide/Fullwidth, else one."""
    if unicodedata.combining(ch) or unicodedata.category(ch) in ("Mn", "Me", "Cf"):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


WIDTH_POLICIES: dict[str, Callable[[str], int]] = {
    "simple": simple_width,
    "east_asian": east_asian_width,
}


def get_width_policy(name: str) -> Callable[[str], int]:
    policy = WIDTH_POLICIES.get(name)
    if policy is None:
        logger.warning(
            "Unknown width policy - using simple",
            operation="get_width_policy",
            status="fallback",
            policy=name,
        )
        return simple_width
    return policy


# =============================================================================
# Measuring and Fitting
# =============================================================================

def visible_width(line: str, char_width: Callable[[str], int] = simple_width) -> int:
    """Number of terminal columns the line occupies, escapes excluded."""
    return sum(char_width(t.text) for t in scan(line) if t.kind is TokenKind.CHAR)


def strip_ansi(line: str) -> str:
    return "".join(t.text for t in scan(line) if t.kind is TokenKind.CHAR)


def is_blank(line: str) -> bool:
    """True when the line shows nothing but whitespace."""
    return not strip_ansi(line).strip()


def fit_line(
    line: str,
    width: int,
    *,
    ellipsis: str = ELLIPSIS,
    char_width: Callable[[str], int] = simple_width,
    pad: bool = True,
    reset: bool = True,
) -> str:
    """
    Fit a line to exactly ``width`` visible columns.

    Escape sequences are kept in place. Content wider than ``width`` is cut
    and ends in ``ellipsis``; escapes after the cut are dropped. Short content
    is padded with spaces. The result ends with exactly one reset code.

    Args:
        line: Raw line, possibly containing escape sequences
        width: Target visible width, at least 1
        ellipsis: Truncation marker
        char_width: Width policy for displayable characters
        pad: Pad short content with spaces (False = truncate only)
        reset: Append the reset code

    Returns:
        The fitted line.
    """
    if width < 1:
        raise ValueError(f"width must be at least 1, got {width}")

    tokens = scan(line)
    ellipsis_width = visible_width(ellipsis, char_width)
    if ellipsis_width > width:
        ellipsis = ELLIPSIS
        ellipsis_width = visible_width(ellipsis, char_width)

    # remaining[k] = visible width of tokens[k:]
    remaining = [0] * (len(tokens) + 1)
    for k in range(len(tokens) - 1, -1, -1):
        token = tokens[k]
        cw = char_width(token.text) if token.kind is TokenKind.CHAR else 0
        remaining[k] = remaining[k + 1] + cw

    parts: list[str] = []
    vw = 0
    for k, token in enumerate(tokens):
        if token.kind is TokenKind.ESCAPE:
            parts.append(token.text)
            continue
        if token.kind is TokenKind.BROKEN:
            continue

        cw = char_width(token.text)
        if vw + remaining[k] <= width or vw + cw <= width - ellipsis_width:
            parts.append(token.text)
            vw += cw
            continue

        if vw + ellipsis_width <= width:
            parts.append(ellipsis)
            vw += ellipsis_width
        break

    if pad and vw < width:
        parts.append(" " * (width - vw))

    fitted = "".join(parts)
    if reset and not fitted.endswith(RESET):
        fitted += RESET
    return fitted


def truncate(text: str, width: int, **kwargs) -> str:
    """Cut text to at most ``width`` columns without padding or reset."""
    return fit_line(text, width, pad=False, reset=False, **kwargs)
