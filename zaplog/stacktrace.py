"""Capturing and formatting call stacks."""

from __future__ import annotations

import inspect
import sys
from enum import Enum
from traceback import FrameSummary
from types import FrameType
from typing import Iterable, Optional


class StacktraceDepth(Enum):
    """How much of the call stack to capture."""

    FIRST = 0
    """Only the first frame."""
    FULL = 1
    """The entire call stack."""


def _function_name(frame: FrameType) -> str:
    code = frame.f_code
    name = getattr(code, "co_qualname", code.co_name)
    module = inspect.getmodulename(code.co_filename)
    return f"{module}.{name}" if module else name


def capture_stacktrace(skip: int, depth: StacktraceDepth) -> list[FrameSummary]:
    """Capture frames of the call stack, innermost first.

    ``skip=0`` starts at the caller of this function. Each frame's ``name``
    is the function name qualified by its module's file name. Returns an
    empty list when ``skip`` goes past the outermost frame.
    """
    frame: Optional[FrameType] = sys._getframe(1)
    for _ in range(skip):
        if frame is None:
            break
        frame = frame.f_back

    frames: list[FrameSummary] = []
    while frame is not None:
        frames.append(
            FrameSummary(
                frame.f_code.co_filename,
                frame.f_lineno,
                _function_name(frame),
                lookup_line=False,
            )
        )
        if depth is StacktraceDepth.FIRST:
            break
        frame = frame.f_back
    return frames


class StackFormatter:
    """Formats stack frames into a readable, newline-separated text."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def format_frame(self, frame: FrameSummary) -> None:
        """Append one frame as ``function`` then a tab-indented ``file:line``."""
        self._parts.append(f"{frame.name}\n\t{frame.filename}:{frame.lineno}")

    def format_stack(self, frames: Iterable[FrameSummary]) -> None:
        """Append every frame except the outermost one, which is only the
        interpreter's entry point and adds noise."""
        remaining = list(frames)
        for frame in remaining[:-1]:
            self.format_frame(frame)

    def getvalue(self) -> str:
        return "\n".join(self._parts)


def take_stacktrace(skip: int) -> str:
    """Format the full call stack; ``skip=0`` starts at the caller."""
    frames = capture_stacktrace(skip + 1, StacktraceDepth.FULL)
    formatter = StackFormatter()
    formatter.format_stack(frames)
    return formatter.getvalue()