# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Configuration Loading
# =============================================================================

import os
import re
import time
import tomllib
from pathlib import Path

from loguru import logger

from tmux_preview.errors import Error, ErrorType, Result

CONFIG_DIR = Path("~/.config/tmux-session-preview").expanduser()
CONFIG_PATH = CONFIG_DIR / "config.toml"
CONFIG_ENV = "TMUX_PREVIEW_CONFIG"

# Preview pane size when fzf does not provide one
DEFAULT_COLUMNS = 80
DEFAULT_LINES = 30

# Defaults reproduce the stock look of the shell preview script
DEFAULT_CONFIG = {
    "layout": {
        "gap": 2,
        "min_two_column_width": 50,
        "min_inner_width": 10,
        "min_inner_height": 1,
    },
    "styles": {
        "header_title": "1;36",
        "header_meta": "38;5;244",
        "active_border": "1;37",
        "inactive_border": "38;5;244",
        "inactive_edge": "38;5;238",
    },
    "text": {
        "ellipsis": "…",
        "width_policy": "simple",  # or "east_asian"
    },
    "tmux": {
        "binary": "tmux",
        "timeout": 2.0,
    },
    "logging": {
        "console_level": None,  # stderr is shown in the preview pane
        "file": True,
        "file_level": "DEBUG",
    },
    "picker": {
        "binary": "fzf",
        "preview_window": "down:75%:border-top",
        # {1} is replaced by fzf with the highlighted session name
        "preview_command": "tmux-session-preview {1}",
    },
}


def extract_toml_error_context(error: tomllib.TOMLDecodeError, file_path: Path) -> dict:
    """
    Extract line context from TOML parse error.

    Args:
        error: The TOMLDecodeError exception
        file_path: Path to the TOML file

    Returns:
        Dict with line_number, line_content, and formatted_message
    """
    error_str = str(error)
    line_number = None
    line_content = None

    # Common formats: "line 15", "at line 15", "(line 15)"
    line_match = re.search(r"line\s+(\d+)", error_str, re.IGNORECASE)
    if line_match:
        line_number = int(line_match.group(1))

    if line_number and file_path.exists():
        try:
            with open(file_path, "r") as f:
                lines = f.readlines()
                if 0 < line_number <= len(lines):
                    line_content = lines[line_number - 1].rstrip()
        except OSError:
            pass

    if line_number:
        formatted = f"Error on line {line_number}"
        if line_content:
            display_line = line_content[:50] + "..." if len(line_content) > 50 else line_content
            formatted += f": {display_line}"
        formatted += f"\n\nDetails: {error_str}"
    else:
        formatted = f"TOML parse error: {error_str}"

    return {
        "line_number": line_number,
        "line_content": line_content,
        "formatted_message": formatted,
        "raw_error": error_str
    }


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dictionary."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def resolve_config_path(cli_path: str | None = None) -> Path:
    """Pick the config file: ``--config`` flag, then env var, then default."""
    if cli_path:
        return Path(cli_path).expanduser()
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return CONFIG_PATH


def load_config_from_path(config_path: Path) -> Result[dict]:
    """
    Load configuration from a TOML file merged over DEFAULT_CONFIG.

    Args:
        config_path: Path to the TOML file

    Returns:
        Result[dict]: Ok with merged config, or Err with error details
    """
    start_time = time.perf_counter()

    if not config_path.exists():
        return Result.err(Error(
            error_type=ErrorType.FILE_NOT_FOUND,
            message=f"Config file not found: {config_path}",
            context={"config_path": str(config_path)}
        ))

    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        error_context = extract_toml_error_context(e, config_path)
        logger.error(
            "Invalid TOML syntax in configuration file",
            operation="load_config_from_path",
            status="failed",
            file=str(config_path),
            line_number=error_context["line_number"],
            line_content=error_context["line_content"],
            error=error_context["formatted_message"]
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=error_context["formatted_message"],
            context={"config_path": str(config_path), "line_number": error_context["line_number"]},
            original_exception=e
        ))
    except OSError as e:
        return Result.err(Error(
            error_type=ErrorType.FILE_NOT_FOUND,
            message=f"Config file unreadable: {config_path}",
            context={"config_path": str(config_path)},
            original_exception=e
        ))

    merged = deep_merge(DEFAULT_CONFIG, user_config)
    duration_ms = int((time.perf_counter() - start_time) * 1000)
    logger.debug(
        "Config loaded successfully",
        operation="load_config_from_path",
        status="success",
        config_path=str(config_path),
        metrics={"duration_ms": duration_ms}
    )
    return Result.ok(merged)


def load_config(cli_path: str | None = None) -> dict:
    """
    Load the effective configuration. Never fails.

    A missing file is the normal case and yields the defaults; an unreadable
    or invalid file is logged and also yields the defaults.
    """
    config_path = resolve_config_path(cli_path)
    result = load_config_from_path(config_path)
    if result.is_ok():
        return result.value

    if result.error.error_type is not ErrorType.FILE_NOT_FOUND or cli_path:
        logger.warning(
            "Using default configuration",
            operation="load_config",
            status="fallback",
            config_path=str(config_path),
            reason=result.error.message
        )
    return deep_merge(DEFAULT_CONFIG, {})


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return int(raw)
    except ValueError:
        return default


def resolve_preview_size(columns: int | None = None, lines: int | None = None) -> tuple[int, int]:
    """
    Preview pane size in (columns, lines).

    Explicit values win, then fzf's FZF_PREVIEW_COLUMNS / FZF_PREVIEW_LINES,
    then 80 x 30.
    """
    if columns is None:
        columns = _env_int("FZF_PREVIEW_COLUMNS", DEFAULT_COLUMNS)
    if lines is None:
        lines = _env_int("FZF_PREVIEW_LINES", DEFAULT_LINES)
    return columns, lines
