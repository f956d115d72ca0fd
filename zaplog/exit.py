"""Process termination that tests can replace with a recording stub."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable

_exit: Callable[[int], None] = sys.exit


def exit_now() -> None:
    """Terminate the process with status 1 (or record it when stubbed)."""
    exit_with(1)


def exit_with(code: int) -> None:
    """Terminate the process with ``code`` (or record it when stubbed)."""
    _exit(code)


@dataclass
class StubbedExit:
    """A stand-in for process termination that records the call."""

    exited: bool = False
    code: int = 0
    _prev: Callable[[int], None] = field(default=sys.exit, repr=False)

    def _exit(self, code: int) -> None:
        self.exited = True
        self.code = code

    def unstub(self) -> None:
        """Restore the exit function that was active before stubbing."""
        global _exit
        _exit = self._prev


def stub() -> StubbedExit:
    """Replace process termination with a recording stub."""
    global _exit
    s = StubbedExit(_prev=_exit)
    _exit = s._exit
    return s


def with_stub(f: Callable[[], object]) -> StubbedExit:
    """Run ``f`` with termination stubbed and return the stub used."""
    s = stub()
    try:
        f()
    finally:
        s.unstub()
    return s