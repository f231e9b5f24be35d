# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Box Rendering and Grid Composition
# =============================================================================

from dataclasses import dataclass
from typing import Callable

from tmux_preview.ansi import ELLIPSIS, fit_line, simple_width, truncate, visible_width
from tmux_preview.layout import GridLayout
from tmux_preview.palette import Palette
from tmux_preview.tmux import Window

# Box drawing
TOP_LEFT, TOP_RIGHT = "┌", "┐"
BOTTOM_LEFT, BOTTOM_RIGHT = "└", "┘"
HORIZONTAL, VERTICAL = "─", "│"


@dataclass(frozen=True)
class Box:
    label: str
    is_active: bool
    width: int   # outer, borders included
    height: int  # outer, borders included
    lines: tuple[str, ...]  # fitted content, inner_height entries


def window_label(window: Window) -> str:
    """'<index>: <name>', plus ' *' when active and ' (<n>p)' for split windows."""
    label = f"{window.index}: {window.name}"
    if window.is_active:
        label += " *"
    if window.pane_count > 1:
        label += f" ({window.pane_count}p)"
    return label


def build_box(
    window: Window,
    captured: list[str],
    layout: GridLayout,
    *,
    ellipsis: str = ELLIPSIS,
    char_width: Callable[[str], int] = simple_width,
) -> Box:
    """
    Fit captured lines into a box, bottom-aligned.

    Missing lines become blank rows at the top so the most recent output
    sits just above the bottom border.
    """
    inner_w, inner_h = layout.inner_width, layout.inner_height
    captured = captured[-inner_h:] if captured else []
    blank = fit_line("", inner_w)
    fitted = [blank] * (inner_h - len(captured))
    fitted.extend(
        fit_line(line, inner_w, ellipsis=ellipsis, char_width=char_width)
        for line in captured
    )
    return Box(
        label=window_label(window),
        is_active=window.is_active,
        width=inner_w + 2,
        height=inner_h + 2,
        lines=tuple(fitted),
    )


def render_box(
    box: Box,
    palette: Palette,
    *,
    ellipsis: str = ELLIPSIS,
    char_width: Callable[[str], int] = simple_width,
) -> list[str]:
    """Bordered lines for one box: top border with label, content, bottom border."""
    inner_w = box.width - 2
    border = palette.border(box.is_active)
    edge = palette.edge(box.is_active)

    # The leading HORIZONTAL takes one inner column
    label = truncate(f" {box.label} ", max(inner_w - 1, 1), ellipsis=ellipsis, char_width=char_width)
    fill = HORIZONTAL * max(inner_w - 1 - visible_width(label, char_width), 0)
    top = palette.paint(border, f"{TOP_LEFT}{HORIZONTAL}{label}{fill}{TOP_RIGHT}")

    side = palette.paint(edge, VERTICAL)
    content = [f"{side}{line}{side}" for line in box.lines]

    bottom = palette.paint(border, f"{BOTTOM_LEFT}{HORIZONTAL * inner_w}{BOTTOM_RIGHT}")
    return [top, *content, bottom]


def compose_grid(rendered: list[list[str]], columns: int, gap: int) -> list[str]:
    """
    Lay rendered boxes out row by row, ``columns`` per row.

    Boxes in a row are joined line by line with ``gap`` spaces; a short last
    row simply has fewer boxes.
    """
    spacer = " " * gap
    output: list[str] = []
    for start in range(0, len(rendered), columns):
        row = rendered[start:start + columns]
        height = len(row[0])
        for line_no in range(height):
            output.append(spacer.join(box[line_no] for box in row))
    return output


def render_header(session: str, window_count: int, attached: bool, palette: Palette) -> str:
    title = palette.paint("header_title", f" ── {session} ──")
    meta = f"{window_count} windows"
    if attached:
        meta += " · attached"
    return f"{title} {palette.paint('header_meta', meta)}"


def render_placeholder(session: str) -> str:
    """Shown in place of a grid when the session does not exist yet."""
    return f"  New session: {session}"
