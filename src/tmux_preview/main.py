# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Entry Points
# =============================================================================

import argparse
import sys
from uuid import uuid4

from loguru import logger

from tmux_preview.config_loader import load_config, resolve_preview_size
from tmux_preview.errors import ErrorReport
from tmux_preview.logging_config import setup_logger, trace_id_var
from tmux_preview.picker import (
    activate_session,
    build_fzf_command,
    default_preview_command,
    parse_selection,
    run_fzf,
    session_list_lines,
)
from tmux_preview.preview import render_session_preview
from tmux_preview.tmux import configure_tmux, list_sessions


def _bootstrap(config_path: str | None) -> dict:
    """Load config, then wire logging and tmux settings from it."""
    config = load_config(config_path)
    setup_logger(config["logging"])
    configure_tmux(config["tmux"])
    return config


def build_preview_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmux-session-preview",
        description="Render a tmux session as a grid of window thumbnails (for fzf --preview).",
    )
    parser.add_argument("session", help="tmux session name")
    parser.add_argument("--columns", type=int, default=None,
                        help="preview width (default: $FZF_PREVIEW_COLUMNS or 80)")
    parser.add_argument("--lines", type=int, default=None,
                        help="preview height (default: $FZF_PREVIEW_LINES or 30)")
    parser.add_argument("--config", default=None, help="path to config.toml")
    return parser


def preview_main(argv: list[str] | None = None) -> int:
    """
    Print the preview for one session.

    Every degraded path (missing session, vanished panes, tiny pane) still
    prints something and exits 0.
    """
    args = build_preview_parser().parse_args(argv)
    config = _bootstrap(args.config)
    columns, lines = resolve_preview_size(args.columns, args.lines)

    try:
        output = render_session_preview(args.session, columns, lines, config)
    except Exception:
        logger.exception(
            "Preview rendering failed",
            operation="preview_main",
            status="failed",
            session=args.session
        )
        output = f"  {args.session}"

    sys.stdout.write(output + "\n")
    sys.stdout.flush()
    return 0


def build_picker_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmux-session-picker",
        description="Switch to or create a tmux session via fzf.",
    )
    parser.add_argument("--list", action="store_true",
                        help="print the session list fed to fzf and exit")
    parser.add_argument("--config", default=None, help="path to config.toml")
    return parser


def picker_main(argv: list[str] | None = None) -> int:
    args = build_picker_parser().parse_args(argv)
    config = _bootstrap(args.config)
    op_trace_id = str(uuid4())
    token = trace_id_var.set(op_trace_id)
    report = ErrorReport()

    try:
        sessions = list_sessions()
        report.collect_result(sessions)
        lines = session_list_lines(sessions.value_or([]))

        if args.list:
            if lines:
                sys.stdout.write("\n".join(lines) + "\n")
            return 0

        if not lines:
            return 0

        preview_command = default_preview_command(config["picker"], args.config)
        command = build_fzf_command(preview_command, config["picker"])
        picked = run_fzf(lines, command)
        if not report.collect_result(picked):
            return 0

        selected = parse_selection(picked.value)
        if not selected:
            logger.info("Picker cancelled", operation="picker_main", status="cancelled")
            return 0

        report.collect_result(activate_session(selected), as_warning=False)
        return 1 if report.has_errors() else 0
    finally:
        report.log_summary(op_trace_id)
        trace_id_var.reset(token)
