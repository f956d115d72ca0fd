"""ANSI foreground colours for terminal output."""

from enum import IntEnum


class Color(IntEnum):
    """A terminal foreground colour, valued by its ANSI SGR code."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37

    def add(self, s: str) -> str:
        """Wrap ``s`` in the escape sequences for this colour."""
        return f"\x1b[{int(self)}m{s}\x1b[0m"