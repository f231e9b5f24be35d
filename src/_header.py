#!/usr/bin/env python3
# /// script
# requires-python = ">=3.11"
# dependencies = ["loguru", "platformdirs"]
# ///
"""
tmux session preview / picker (single-file build)

Renders a tmux session as a grid of window thumbnails for fzf's preview
pane, and drives the fzf session picker that uses it.

Generated by build.py from src/tmux_preview/ - edit the modules, not this file.

Configuration: ~/.config/tmux-session-preview/config.toml
Logs: platformdirs user_log_dir("tmux-session-preview")/preview.jsonl
"""

import argparse
import json
import math
import os
import re
import shlex
import subprocess
import sys
import time
import tomllib
import traceback
import unicodedata
from contextvars import ContextVar
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Callable, Generic, TypeVar
from uuid import uuid4


def show_import_error(package: str, error_msg: str) -> None:
    """
    Explain a missing dependency where the user will see it.

    stdout is what fzf shows in the preview pane, so the hint goes there.
    """
    sys.stdout.write(
        f"  Missing Python package: {package}\n"
        f"  Install it with: uv pip install {package}\n"
        f"  (or run this script with: uv run --script {sys.argv[0]})\n"
        f"  Error: {error_msg}\n"
    )


try:
    import platformdirs
except ImportError as e:
    show_import_error("platformdirs", str(e))
    sys.exit(1)

try:
    from loguru import logger
except ImportError as e:
    show_import_error("loguru", str(e))
    sys.exit(1)
