# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Palette (configurable emphasis styles)
# =============================================================================

import re
from dataclasses import dataclass, fields

from loguru import logger

from tmux_preview.ansi import RESET
from tmux_preview.config_loader import DEFAULT_CONFIG

_SGR_PARAMS = re.compile(r"^[0-9;]*$")


def sgr(params: str) -> str:
    """Escape sequence for an SGR parameter string ("1;37" -> ESC[1;37m)."""
    if not params:
        return ""
    return f"\033[{params}m"


@dataclass(frozen=True)
class Palette:
    """SGR parameter strings for each decorated element of the preview."""

    header_title: str = DEFAULT_CONFIG["styles"]["header_title"]
    header_meta: str = DEFAULT_CONFIG["styles"]["header_meta"]
    active_border: str = DEFAULT_CONFIG["styles"]["active_border"]
    inactive_border: str = DEFAULT_CONFIG["styles"]["inactive_border"]
    inactive_edge: str = DEFAULT_CONFIG["styles"]["inactive_edge"]

    @classmethod
    def from_config(cls, styles: dict) -> "Palette":
        """Build a palette from the ``[styles]`` table.

        Values that are not plain SGR parameters (digits and ``;``) are
        replaced by the default for that role.
        """
        values = {}
        for f in fields(cls):
            value = styles.get(f.name, f.default)
            if value is None:
                value = ""
            value = str(value)
            if not _SGR_PARAMS.match(value):
                logger.warning(
                    "Invalid style - using default",
                    operation="palette_from_config",
                    status="fallback",
                    role=f.name,
                    value=value,
                )
                value = f.default
            values[f.name] = value
        return cls(**values)

    def paint(self, role: str, text: str) -> str:
        """Wrap ``text`` in the style for ``role`` followed by a reset."""
        params = getattr(self, role)
        if not params:
            return text
        return f"{sgr(params)}{text}{RESET}"

    def border(self, is_active: bool) -> str:
        return "active_border" if is_active else "inactive_border"

    def edge(self, is_active: bool) -> str:
        return "active_border" if is_active else "inactive_edge"
