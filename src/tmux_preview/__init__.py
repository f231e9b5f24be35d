"""tmux session preview for fzf: window thumbnails in a two-column grid."""

__version__ = "1.0.0"

from tmux_preview.ansi import fit_line, visible_width
from tmux_preview.layout import GridLayout, plan_grid
from tmux_preview.preview import render_session_preview

__all__ = [
    "GridLayout",
    "fit_line",
    "plan_grid",
    "render_session_preview",
    "visible_width",
]
