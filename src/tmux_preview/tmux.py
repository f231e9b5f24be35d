# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# tmux Queries (window enumeration, pane capture, session listing)
# =============================================================================
# All calls are read-only snapshots except switch_client/new_session, which
# only the picker uses. Failures come back as Result.err, never as exceptions.

import subprocess
from dataclasses import dataclass

from loguru import logger

from tmux_preview.ansi import is_blank
from tmux_preview.config_loader import DEFAULT_CONFIG
from tmux_preview.errors import Error, ErrorType, Result

TMUX_SETTINGS = dict(DEFAULT_CONFIG["tmux"])

# Name goes last so a "|" inside it survives the split
WINDOW_FORMAT = "#{window_index}|#{?window_active,1,0}|#{window_panes}|#{pane_id}|#{window_name}"
SESSION_FORMAT = "#{session_windows}|#{session_attached}|#{session_activity}|#{session_name}"


@dataclass(frozen=True)
class Window:
    index: int
    name: str
    is_active: bool
    pane_count: int
    pane_id: str = ""  # active pane


@dataclass(frozen=True)
class SessionInfo:
    name: str
    windows: int
    attached: int
    activity: int  # epoch seconds of last activity


def configure_tmux(settings: dict) -> None:
    """Apply the ``[tmux]`` config table (binary, timeout)."""
    TMUX_SETTINGS.update({k: v for k, v in settings.items() if v is not None})


def session_target(name: str) -> str:
    """Exact-match target, so "wo" never resolves to session "work"."""
    return f"={name}"


def run_tmux(*args: str) -> Result[str]:
    """
    Run a tmux command and return its stdout.

    Returns:
        Result[str]: Ok with stdout (trailing newlines removed), or Err with
        TMUX_UNAVAILABLE / TIMEOUT_ERROR / COMMAND_FAILED.
    """
    binary = TMUX_SETTINGS["binary"]
    command = [binary, *args]
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=TMUX_SETTINGS["timeout"],
            check=False  # Non-zero exit is reported through Result
        )
    except FileNotFoundError as e:
        return Result.err(Error(
            error_type=ErrorType.TMUX_UNAVAILABLE,
            message=f"tmux binary not found: {binary}",
            context={"binary": binary},
            original_exception=e
        ))
    except subprocess.TimeoutExpired as e:
        return Result.err(Error(
            error_type=ErrorType.TIMEOUT_ERROR,
            message=f"tmux {args[0] if args else ''} timed out",
            context={"command": args[0] if args else "", "timeout": TMUX_SETTINGS["timeout"]},
            original_exception=e
        ))
    except OSError as e:
        return Result.err(Error(
            error_type=ErrorType.TMUX_UNAVAILABLE,
            message=f"tmux could not be started: {e}",
            context={"binary": binary},
            original_exception=e
        ))

    if result.returncode != 0:
        return Result.err(Error(
            error_type=ErrorType.COMMAND_FAILED,
            message=result.stderr.strip() or f"tmux exited with {result.returncode}",
            context={"command": args[0] if args else "", "returncode": result.returncode}
        ))

    # rstrip("\n") only: leading/trailing spaces are content
    return Result.ok(result.stdout.rstrip("\n"))


def session_exists(session: str) -> bool:
    """True when the session exists. A stopped server counts as absent."""
    return run_tmux("has-session", "-t", session_target(session)).is_ok()


def parse_window_line(line: str) -> Window | None:
    """Parse one WINDOW_FORMAT line; None when it is malformed."""
    parts = line.split("|", 4)
    if len(parts) != 5:
        return None
    index, active, panes, pane_id, name = parts
    try:
        return Window(
            index=int(index),
            name=name,
            is_active=active == "1",
            pane_count=int(panes),
            pane_id=pane_id,
        )
    except ValueError:
        return None


def list_windows(session: str) -> Result[list[Window]]:
    """
    Snapshot of a session's windows in tmux index order.

    Returns:
        Result[list[Window]]: Err with SESSION_NOT_FOUND when tmux cannot
        list the session (it vanished or never existed).
    """
    result = run_tmux("list-windows", "-t", session_target(session), "-F", WINDOW_FORMAT)
    if result.is_err():
        return Result.err(Error(
            error_type=ErrorType.SESSION_NOT_FOUND,
            message=f"Cannot list windows of session {session}",
            context={"session": session, "cause": result.error.message},
            original_exception=result.error.original_exception
        ))

    windows: list[Window] = []
    for line in result.value.splitlines():
        if not line.strip():
            continue
        window = parse_window_line(line)
        if window is None:
            logger.warning(
                "Skipping unparseable window line",
                operation="list_windows",
                status="skipped",
                session=session,
                line=line
            )
            continue
        windows.append(window)

    logger.debug(
        "Windows listed",
        operation="list_windows",
        status="success",
        session=session,
        metrics={"window_count": len(windows)}
    )
    return Result.ok(windows)


def session_attached(session: str) -> bool:
    """True when at least one client is attached to the session."""
    result = list_sessions()
    if result.is_err():
        return False
    return any(info.name == session and info.attached > 0 for info in result.value)


def capture_pane(pane_id: str) -> Result[list[str]]:
    """Rendered pane content with escape sequences, wrapped lines joined."""
    if not pane_id:
        return Result.err(Error(
            error_type=ErrorType.PANE_VANISHED,
            message="Window has no active pane",
            context={"pane_id": pane_id}
        ))
    result = run_tmux("capture-pane", "-e", "-J", "-p", "-t", pane_id)
    if result.is_err():
        return Result.err(Error(
            error_type=ErrorType.PANE_VANISHED,
            message=f"Cannot capture pane {pane_id}",
            context={"pane_id": pane_id, "cause": result.error.message},
            original_exception=result.error.original_exception
        ))
    return Result.ok(result.value.split("\n") if result.value else [])


def tail_meaningful(lines: list[str], height: int) -> list[str]:
    """Drop trailing visually-empty lines, then keep the last ``height``."""
    end = len(lines)
    while end > 0 and is_blank(lines[end - 1]):
        end -= 1
    start = max(end - height, 0)
    return lines[start:end]


def capture_window(window: Window, height: int) -> Result[list[str]]:
    """
    Last ``height`` meaningful lines of the window's active pane.

    Other panes of a multi-pane window are not captured.
    """
    result = capture_pane(window.pane_id)
    if result.is_err():
        return result
    return Result.ok(tail_meaningful(result.value, height))


def parse_session_line(line: str) -> SessionInfo | None:
    parts = line.split("|", 3)
    if len(parts) != 4:
        return None
    windows, attached, activity, name = parts
    try:
        return SessionInfo(
            name=name,
            windows=int(windows),
            attached=int(attached),
            activity=int(activity or 0),
        )
    except ValueError:
        return None


def list_sessions() -> Result[list[SessionInfo]]:
    """All sessions on the server; Ok([]) when no server is running."""
    result = run_tmux("list-sessions", "-F", SESSION_FORMAT)
    if result.is_err():
        if result.error.error_type is ErrorType.COMMAND_FAILED:
            return Result.ok([])
        return Result.err(result.error)

    sessions = []
    for line in result.value.splitlines():
        if not line.strip():
            continue
        info = parse_session_line(line)
        if info is None:
            logger.warning(
                "Skipping unparseable session line",
                operation="list_sessions",
                status="skipped",
                line=line
            )
            continue
        sessions.append(info)
    return Result.ok(sessions)


def switch_client(session: str) -> Result[str]:
    return run_tmux("switch-client", "-t", session_target(session))


def new_session(session: str) -> Result[str]:
    """Create a detached session (tmux takes the name literally here)."""
    return run_tmux("new-session", "-d", "-s", session)
