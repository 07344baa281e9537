"""ANSI escape sequences used to render the prompt line."""

from __future__ import annotations

ESC = "\x1b"
CSI = ESC + "["

ERASE_LINE = CSI + "2K"
CURSOR_LEFT = CSI + "G"
ERASE_END_LINE = CSI + "K"
SHOW_CURSOR = CSI + "?25h"

# Control characters recognised by the line editor
CTRL_C = "\x03"
CTRL_D = "\x04"
CR = "\r"
LF = "\n"
BACKSPACE = "\x7f"


def cursor_backward(count: int = 1) -> str:
    """Move the cursor *count* columns to the left."""
    return f"{CSI}{count}D"
