#!/usr/bin/env python3
"""Terminal colors for solresolve output.

Colors are enabled only on capable terminals and respect the NO_COLOR
environment variable (https://no-color.org/). FORCE_COLOR turns them on
regardless of the terminal.

Example:
    >>> c = get_colors()
    >>> print(c.green("contracts/Token.sol") + " " + c.dim("(project)"))
"""

import os
import sys
import threading


class Colors:
    """ANSI styling helpers that become no-ops when colors are disabled.

    Attributes:
        enabled: Whether escape codes are emitted.
    """

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"

    def __init__(self, enabled: bool = None):
        """Initialize Colors with optional override.

        Args:
            enabled: Force colors on/off. If None, auto-detect.
        """
        if enabled is not None:
            self.enabled = enabled
        else:
            self.enabled = self._should_enable_colors()

    def _should_enable_colors(self) -> bool:
        if os.environ.get("NO_COLOR"):
            return False

        if os.environ.get("FORCE_COLOR"):
            return True

        if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
            return False

        if os.environ.get("TERM", "") == "dumb":
            return False

        if sys.platform == "win32":
            return bool(
                os.environ.get("WT_SESSION")
                or os.environ.get("ANSICON")
                or os.environ.get("TERM_PROGRAM") == "vscode"
            )

        return True

    def _colorize(self, text: str, *codes: str) -> str:
        if not self.enabled:
            return text
        return f"{''.join(codes)}{text}{self.RESET}"

    def green(self, text: str) -> str:
        """Resolved files."""
        return self._colorize(text, self.GREEN)

    def yellow(self, text: str) -> str:
        """Library names and versions."""
        return self._colorize(text, self.YELLOW)

    def magenta(self, text: str) -> str:
        """Error codes."""
        return self._colorize(text, self.MAGENTA)

    def cyan(self, text: str) -> str:
        """Paths and import strings."""
        return self._colorize(text, self.CYAN)

    def bold(self, text: str) -> str:
        return self._colorize(text, self.BOLD)

    def dim(self, text: str) -> str:
        return self._colorize(text, self.DIM)

    def error(self, text: str) -> str:
        """Error message (bold red)."""
        return self._colorize(text, self.BOLD, self.RED)


_colors = None
_colors_lock = threading.Lock()


def get_colors(no_color: bool = False) -> Colors:
    """Get the shared Colors instance, or a disabled one.

    Args:
        no_color: If True, return a new disabled instance instead of the
            shared auto-detected one.
    """
    global _colors

    if no_color:
        return Colors(enabled=False)

    if _colors is None:
        with _colors_lock:
            if _colors is None:
                _colors = Colors()
    return _colors
