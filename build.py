#!/usr/bin/env python3
"""
Build script for the single-file tmux preview/picker scripts.

Concatenates src/tmux_preview/*.py behind src/_header.py into stand-alone
scripts that fzf can call directly (``uv run --script`` reads the PEP 723
block in the header), no package install needed.

Usage:
    python build.py           # Build tmux-session-preview.py and tmux-session-picker.py
    python build.py --check   # Verify outputs match (for CI)

Module order matters for dependencies: a module may only use names from
modules listed before it at import time (function bodies can use any).
"""

import ast
import sys
from pathlib import Path

ROOT = Path(__file__).parent
SRC_DIR = ROOT / "src"
PACKAGE_DIR = SRC_DIR / "tmux_preview"
HEADER_FILE = SRC_DIR / "_header.py"
PACKAGE_NAME = "tmux_preview"

# Module order (dependencies flow downward)
MODULE_ORDER = [
    "logging_config.py",    # Loguru structured logging
    "errors.py",            # Error types (Result monad)
    "config_loader.py",     # TOML config loading, preview size
    "ansi.py",              # Escape-aware scanner and line fitter
    "palette.py",           # Configurable emphasis styles
    "tmux.py",              # Window listing, pane capture, sessions
    "layout.py",            # Grid layout planner
    "render.py",            # Box rendering and grid composition
    "preview.py",           # Session preview orchestration
    "picker.py",            # fzf session picker
    "main.py",              # Entry points
]

# Output file -> entry point function
TARGETS = {
    "tmux-session-preview.py": "preview_main",
    "tmux-session-picker.py": "picker_main",
}


class BuildError(Exception):
    pass


def imported_names(tree: ast.AST) -> set[tuple[str, str]]:
    """(module, name) pairs for every import anywhere in the tree."""
    names = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                names.add(("", alias.asname or alias.name))
        elif isinstance(node, ast.ImportFrom):
            for alias in node.names:
                names.add((node.module or "", alias.asname or alias.name))
    return names


def strip_module_imports(content: str, header_names: set[tuple[str, str]], module_name: str) -> str:
    """
    Remove top-level import statements from a module.

    Package-internal imports are dropped outright (everything shares one
    namespace after concatenation); every other import must already be
    provided by _header.py.
    """
    tree = ast.parse(content, filename=module_name)
    lines = content.split("\n")
    drop: set[int] = set()

    for node in tree.body:
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        internal = isinstance(node, ast.ImportFrom) and (
            (node.module or "").split(".")[0] == PACKAGE_NAME or node.level > 0
        )
        if not internal:
            missing = imported_names(node) - header_names
            if missing:
                listing = ", ".join(f"{mod}.{name}".lstrip(".") for mod, name in sorted(missing))
                raise BuildError(f"{module_name}: imports not provided by _header.py: {listing}")
        drop.update(range(node.lineno - 1, node.end_lineno))

    return "\n".join(line for i, line in enumerate(lines) if i not in drop)


def strip_build_comment(content: str) -> str:
    """Remove the leading 'Concatenated into...' marker comment."""
    lines = content.split("\n")
    if lines and lines[0].startswith("# Concatenated into the single-file scripts"):
        lines = lines[1:]
    return "\n".join(lines)


def collapse_blank_runs(content: str) -> str:
    """Squeeze runs of 3+ blank lines left behind by removed imports."""
    out = []
    blank = 0
    for line in content.split("\n"):
        blank = blank + 1 if not line.strip() else 0
        if blank <= 2:
            out.append(line)
    return "\n".join(out)


def process_module(path: Path, header_names: set[tuple[str, str]]) -> str:
    """Process a single module file for concatenation."""
    content = path.read_text()
    content = strip_module_imports(content, header_names, path.name)
    content = strip_build_comment(content)
    return collapse_blank_runs(content).strip()


def build(entry_point: str) -> str:
    """Build the concatenated script for one entry point."""
    header = HEADER_FILE.read_text()
    header_names = imported_names(ast.parse(header, filename=HEADER_FILE.name))
    parts = [header.rstrip("\n")]

    for module_name in MODULE_ORDER:
        module_path = PACKAGE_DIR / module_name
        if not module_path.exists():
            raise BuildError(f"Missing module: {module_path}")

        content = process_module(module_path, header_names)
        if content:
            separator = f"\n\n\n# {'=' * 77}\n# Module: {module_name}\n# {'=' * 77}\n\n"
            parts.append(separator)
            parts.append(content)

    parts.append(f'\n\n\nif __name__ == "__main__":\n    sys.exit({entry_point}())\n')
    return "".join(parts)


def main():
    check_mode = "--check" in sys.argv

    if not PACKAGE_DIR.exists():
        print(f"ERROR: package directory not found: {PACKAGE_DIR}", file=sys.stderr)
        sys.exit(1)

    failed = False
    for output_name, entry_point in TARGETS.items():
        output_file = ROOT / output_name
        try:
            output = build(entry_point)
        except (BuildError, SyntaxError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            sys.exit(1)

        if check_mode:
            if not output_file.exists() or output_file.read_text() != output:
                print(f"ERROR: {output_name} is missing or stale.", file=sys.stderr)
                print("Run 'python build.py' to regenerate.", file=sys.stderr)
                failed = True
            continue

        output_file.write_text(output)
        output_file.chmod(0o755)

        import py_compile
        try:
            py_compile.compile(str(output_file), doraise=True)
            print(f"Built: {output_file} ({len(output)} bytes, syntax OK)")
        except py_compile.PyCompileError as e:
            print(f"ERROR: Syntax error in output: {e}", file=sys.stderr)
            sys.exit(1)

    if check_mode:
        if failed:
            sys.exit(1)
        print("OK: Outputs match.")


if __name__ == "__main__":
    main()
