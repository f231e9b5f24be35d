# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Structured Logging Setup (JSONL format)
# =============================================================================
# The fuzzy finder shows the preview's stderr inside the preview pane, so the
# stderr sink stays off unless explicitly requested.

import json
import os
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path

import platformdirs
from loguru import logger

APP_NAME = "tmux-session-preview"
DEBUG_ENV = "TMUX_PREVIEW_DEBUG"

# Correlation ID for one preview render / picker run
trace_id_var: ContextVar[str] = ContextVar("trace_id", default=None)


def json_sink(message):
    """JSONL sink - writes one JSON object per record to stderr."""
    record = message.record
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": record["extra"].get("operation", "unknown"),
        "operation_status": record["extra"].get("status", None),
        "trace_id": record["extra"].get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "context": {k: v for k, v in record["extra"].items()
                    if k not in ("operation", "status", "trace_id", "metrics")},
        "metrics": record["extra"].get("metrics", {}),
        "error": None
    }

    if record["exception"]:
        exc_type, exc_value, exc_tb = record["exception"]
        tb_lines = []
        if exc_tb:
            tb_lines = traceback.format_tb(exc_tb)

        log_entry["error"] = {
            "type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "Unknown error",
            "traceback_lines": tb_lines
        }

    sys.stderr.write(json.dumps(log_entry, default=str) + "\n")


def get_log_dir() -> Path:
    """Per-user log directory.

    macOS: ~/Library/Logs/tmux-session-preview/
    Linux: ~/.local/state/tmux-session-preview/log/
    """
    return Path(platformdirs.user_log_dir(appname=APP_NAME))


def setup_logger(settings: dict | None = None, log_dir: Path | None = None):
    """Configure Loguru sinks from the ``[logging]`` config table.

    Args:
        settings: ``{"console_level": str | None, "file": bool, "file_level": str}``
        log_dir: Override for the file sink directory (tests).

    Returns:
        The configured loguru logger.
    """
    settings = settings or {}
    logger.remove()

    console_level = settings.get("console_level")
    if os.environ.get(DEBUG_ENV):
        console_level = "DEBUG"
    if console_level:
        logger.add(json_sink, level=str(console_level).upper())

    if settings.get("file", True):
        target_dir = log_dir or get_log_dir()
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(
                "Log directory unavailable - file logging disabled",
                operation="setup_logger",
                status="degraded",
                log_dir=str(target_dir),
                error=str(e)
            )
            return logger

        logger.add(
            str(target_dir / "preview.jsonl"),
            format="{message}",
            serialize=True,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            level=str(settings.get("file_level", "DEBUG")).upper()
        )

    return logger
