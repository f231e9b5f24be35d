"""Entry point for python -m tmux_preview <session>."""

import sys

from tmux_preview.main import preview_main

sys.exit(preview_main())
