# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Session Preview
# =============================================================================
# Invoked fresh on every fzf preview refresh: nothing is cached between runs.

import time
from uuid import uuid4

from loguru import logger

from tmux_preview.ansi import get_width_policy
from tmux_preview.config_loader import DEFAULT_CONFIG, deep_merge
from tmux_preview.errors import ErrorReport
from tmux_preview.layout import plan_grid
from tmux_preview.logging_config import trace_id_var
from tmux_preview.palette import Palette
from tmux_preview.render import (
    build_box,
    compose_grid,
    render_box,
    render_header,
    render_placeholder,
)
from tmux_preview.tmux import capture_window, list_windows, session_attached, session_exists


def render_session_preview(session: str, columns: int, lines: int, config: dict | None = None) -> str:
    """
    Render the thumbnail grid for ``session`` sized for a columns x lines pane.

    Returns:
        The preview text (no trailing newline). A session that does not exist
        renders as the one-line "New session" placeholder.
    """
    config = deep_merge(DEFAULT_CONFIG, config or {})
    op_trace_id = str(uuid4())
    token = trace_id_var.set(op_trace_id)
    start_time = time.perf_counter()
    report = ErrorReport()

    try:
        if not session_exists(session):
            logger.info(
                "Session does not exist - rendering placeholder",
                operation="render_session_preview",
                status="new_session",
                session=session
            )
            return render_placeholder(session)

        windows_result = list_windows(session)
        report.collect_result(windows_result)
        windows = windows_result.value_or([])
        attached = session_attached(session)

        layout_cfg = config["layout"]
        layout = plan_grid(
            columns,
            lines,
            len(windows),
            gap=layout_cfg["gap"],
            min_two_column_width=layout_cfg["min_two_column_width"],
            min_inner_width=layout_cfg["min_inner_width"],
            min_inner_height=layout_cfg["min_inner_height"],
        )

        palette = Palette.from_config(config["styles"])
        ellipsis = config["text"]["ellipsis"]
        char_width = get_width_policy(config["text"]["width_policy"])

        rendered = []
        for window in windows:
            captured = capture_window(window, layout.inner_height)
            report.collect_result(captured)
            box = build_box(
                window,
                captured.value_or([]),
                layout,
                ellipsis=ellipsis,
                char_width=char_width,
            )
            rendered.append(render_box(box, palette, ellipsis=ellipsis, char_width=char_width))

        output = [render_header(session, len(windows), attached, palette)]
        output.extend(compose_grid(rendered, layout.columns, layout.gap))

        logger.debug(
            "Preview rendered",
            operation="render_session_preview",
            status="success",
            session=session,
            metrics={
                "window_count": len(windows),
                "grid_columns": layout.columns,
                "grid_rows": layout.rows,
                "inner_width": layout.inner_width,
                "inner_height": layout.inner_height,
                "duration_ms": int((time.perf_counter() - start_time) * 1000),
            }
        )
        return "\n".join(output)
    finally:
        report.log_summary(op_trace_id)
        trace_id_var.reset(token)
