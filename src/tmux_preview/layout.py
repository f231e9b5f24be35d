# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Grid Layout
# =============================================================================

import math
from dataclasses import dataclass

from tmux_preview.config_loader import DEFAULT_CONFIG

MAX_GRID_COLUMNS = 2
HEADER_LINES = 1
BORDER = 2  # one border cell/line on each side


@dataclass(frozen=True)
class GridLayout:
    columns: int
    rows: int
    box_width: int
    box_height: int
    inner_width: int
    inner_height: int
    gap: int


def plan_grid(
    columns: int,
    lines: int,
    window_count: int,
    *,
    gap: int = DEFAULT_CONFIG["layout"]["gap"],
    min_two_column_width: int = DEFAULT_CONFIG["layout"]["min_two_column_width"],
    min_inner_width: int = DEFAULT_CONFIG["layout"]["min_inner_width"],
    min_inner_height: int = DEFAULT_CONFIG["layout"]["min_inner_height"],
) -> GridLayout:
    """
    Size a grid of window boxes for a ``columns`` x ``lines`` preview pane.

    Two columns when there are at least two windows and the pane is at least
    ``min_two_column_width`` wide, otherwise one. The inner box size never
    drops below ``min_inner_width`` x ``min_inner_height``, so any pane size
    (however small) yields a usable layout.
    """
    columns = max(columns, 1)
    lines = max(lines, 1)
    window_count = max(window_count, 0)
    gap = max(gap, 0)

    grid_cols = MAX_GRID_COLUMNS
    if window_count <= 1 or columns < min_two_column_width:
        grid_cols = 1

    grid_rows = math.ceil(window_count / grid_cols)

    box_width = (columns - gap * (grid_cols - 1)) // grid_cols
    inner_width = max(box_width - BORDER, min_inner_width, 1)

    # An empty session still gets one row's worth of height
    box_height = (lines - HEADER_LINES) // max(grid_rows, 1)
    inner_height = max(box_height - BORDER, min_inner_height, 1)

    return GridLayout(
        columns=grid_cols,
        rows=grid_rows,
        box_width=box_width,
        box_height=box_height,
        inner_width=inner_width,
        inner_height=inner_height,
        gap=gap,
    )
