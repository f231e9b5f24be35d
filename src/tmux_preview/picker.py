# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Session Picker (fzf front end)
# =============================================================================

import shlex
import subprocess
import time

from loguru import logger

from tmux_preview.config_loader import DEFAULT_CONFIG
from tmux_preview.errors import Error, ErrorType, Result
from tmux_preview.tmux import SessionInfo, new_session, session_exists, switch_client

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY

META_STYLE = "\033[90m"
META_RESET = "\033[0m"

FZF_COLORS = "bg+:236,fg+:39:bold,pointer:39,border:244,header:244,prompt:39,label:39:bold"


def format_age(seconds: int) -> str:
    """Compact relative age: 42s, 5m, 3h, 2d, 6w."""
    seconds = max(int(seconds), 0)
    if seconds < MINUTE:
        return f"{seconds}s"
    if seconds < HOUR:
        return f"{seconds // MINUTE}m"
    if seconds < DAY:
        return f"{seconds // HOUR}h"
    if seconds < WEEK:
        return f"{seconds // DAY}d"
    return f"{seconds // WEEK}w"


def session_list_line(info: SessionInfo, now: int) -> str:
    """'<name>\\t  <name> · <w>w · <age>[ · attached]' with grey metadata."""
    meta = f"· {info.windows}w · {format_age(now - info.activity)}"
    if info.attached > 0:
        meta += " · attached"
    return f"{info.name}\t  {info.name} {META_STYLE}{meta}{META_RESET}"


def session_list_lines(sessions: list[SessionInfo], now: int | None = None) -> list[str]:
    now = int(time.time()) if now is None else now
    return [session_list_line(info, now) for info in sessions]


def build_fzf_command(preview_command: str, settings: dict | None = None) -> list[str]:
    """fzf argv for the picker; ``{1}`` in the preview command is the session name."""
    settings = {**DEFAULT_CONFIG["picker"], **(settings or {})}
    return [
        settings["binary"],
        "--delimiter=\t",
        "--with-nth=2..",
        "--nth=1",
        "--accept-nth=1",
        "--print-query",
        "--ansi",
        "--no-sort",
        "--height=100%",
        "--layout=reverse",
        "--highlight-line",
        "--pointer=▸",
        "--border=rounded",
        "--border-label= Sessions ",
        "--header=  Select session or type new name",
        f"--preview={preview_command}",
        f"--preview-window={settings['preview_window']}",
        "--preview-label= Preview ",
        f"--color={FZF_COLORS}",
    ]


def default_preview_command(settings: dict | None = None, config_path: str | None = None) -> str:
    """Preview command for fzf, forwarding ``--config`` when one was given."""
    settings = {**DEFAULT_CONFIG["picker"], **(settings or {})}
    command = settings["preview_command"]
    if config_path:
        command += f" --config {shlex.quote(config_path)}"
    return command


def parse_selection(output: str) -> str:
    """
    Session chosen in fzf.

    With --print-query fzf prints the query first and the accepted item
    last; when nothing matched, the only line is the typed name.
    """
    lines = [line for line in output.split("\n") if line.strip()]
    if not lines:
        return ""
    return lines[-1].split("\t", 1)[0].strip()


def run_fzf(lines: list[str], command: list[str]) -> Result[str]:
    try:
        result = subprocess.run(
            command,
            input="\n".join(lines) + "\n",
            stdout=subprocess.PIPE,
            text=True,
            check=False  # 1 = no match, 130 = cancelled
        )
    except (FileNotFoundError, OSError) as e:
        return Result.err(Error(
            error_type=ErrorType.COMMAND_FAILED,
            message=f"fzf could not be started: {e}",
            context={"binary": command[0]},
            original_exception=e
        ))
    if result.returncode == 130:
        return Result.ok("")
    return Result.ok(result.stdout)


def activate_session(name: str) -> Result[str]:
    """Switch to ``name``, creating it detached first when it is new."""
    if not session_exists(name):
        created = new_session(name)
        if created.is_err():
            return created
        logger.info(
            "Session created",
            operation="activate_session",
            status="created",
            session=name
        )
    return switch_client(name)
