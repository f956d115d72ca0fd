"""Build the benchmark tables of the README from benchmark output."""

from __future__ import annotations

import argparse
import math
import re
import subprocess
import sys
from dataclasses import dataclass
from fractions import Fraction
from typing import Mapping, Optional, Sequence

LIBRARY_NAME_TO_MARKDOWN_NAME = {
    "Zap": ":zap: zap",
    "Zap.Sugar": ":zap: zap (sugared)",
    "stdlib.Println": "standard library",
    "sirupsen/logrus": "logrus",
    "go-kit/kit/log": "go-kit",
    "inconshreveable/log15": "log15",
    "apex/log": "apex/log",
    "rs/zerolog": "zerolog",
}

BENCHMARK_NAMES = (
    "BenchmarkAddingFields",
    "BenchmarkAccumulatedContext",
    "BenchmarkWithoutFields",
)

TABLE_HEADER = (
    "| Package | Time | Time % to zap | Objects Allocated |",
    "| :------ | :--: | :-----------: | :---------------: |",
)

_NANOS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_DURATION_PART = re.compile(r"(\d*)(?:\.(\d*))?(ns|us|µs|μs|ms|s|m|h)")
_INTEGER = re.compile(r"[+-]?\d+")
_TEMPLATE_ACTION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_FIELD_REF = re.compile(r"\s*\.(\w+)\s*")


def parse_duration(text: str) -> int:
    """Parse a duration such as ``"1.5us"`` or ``"2h45m"`` into nanoseconds.

    Raises ValueError for malformed text.
    """
    invalid = ValueError(f'time: invalid duration "{text}"')
    s = text
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return 0
    if not s:
        raise invalid
    total = Fraction(0)
    pos = 0
    while pos < len(s):
        m = _DURATION_PART.match(s, pos)
        if m is None or not (m.group(1) or m.group(2)):
            raise invalid
        whole, frac, unit = m.groups()
        value = Fraction(int(whole or "0"))
        if frac:
            value += Fraction(int(frac), 10 ** len(frac))
        total += value * _NANOS_PER_UNIT[unit]
        pos = m.end()
    nanos = int(total)
    return -nanos if negative else nanos


def _atoi(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f'strconv.Atoi: parsing "{text}": invalid syntax')
    return int(text)


def _pct(val: int, baseline: int) -> str:
    if baseline == 0:
        ratio = math.nan if val == 0 else math.copysign(math.inf, val)
    else:
        ratio = val / baseline
    p = ratio * 100 - 100
    if math.isnan(p):
        return "+NaN%"
    if math.isinf(p):
        return "+Inf%" if p > 0 else "-Inf%"
    return f"{p:+.0f}%"


@dataclass
class BenchmarkRow:
    """One logger's results, with the zap baseline to compare against."""

    name: str
    time: int
    allocated_bytes: int
    allocated_objects: int
    zap_time: int = 0
    zap_allocated_bytes: int = 0
    zap_allocated_objects: int = 0

    def __str__(self) -> str:
        return (
            f"| {self.name} | {self.time} ns/op | {_pct(self.time, self.zap_time)}"
            f" | {self.allocated_objects} allocs/op"
        )


def find_unique_substring(lines: Sequence[str], substring: str) -> str:
    """Return the one line containing ``substring``, or "" if none does.

    Raises ValueError if more than one line contains it.
    """
    found = ""
    for line in lines:
        if substring in line:
            if found:
                raise ValueError(f"input has duplicate substring {substring}")
            found = line
    return found


def get_benchmark_row(
    lines: Sequence[str],
    benchmark_name: str,
    library_name: str,
    baseline: Optional[BenchmarkRow],
) -> Optional[BenchmarkRow]:
    """Parse the result line of one library, or return None if it is absent."""
    line = find_unique_substring(lines, f"{benchmark_name}/{library_name}-")
    if not line:
        return None
    split = line.split("\t")
    if len(split) < 5:
        raise ValueError(f"unknown benchmark line: {line}")
    duration = parse_duration(
        split[2].strip().removesuffix("/op").replace(" ", "")
    )
    allocated_bytes = _atoi(split[3].strip().removesuffix(" B/op"))
    allocated_objects = _atoi(split[4].strip().removesuffix(" allocs/op"))
    row = BenchmarkRow(
        name=LIBRARY_NAME_TO_MARKDOWN_NAME.get(library_name, ""),
        time=duration,
        allocated_bytes=allocated_bytes,
        allocated_objects=allocated_objects,
    )
    if baseline is not None:
        row.zap_time = baseline.time
        row.zap_allocated_bytes = baseline.allocated_bytes
        row.zap_allocated_objects = baseline.allocated_objects
    return row


def sort_rows(rows: Sequence[BenchmarkRow]) -> list[BenchmarkRow]:
    """Zap rows first, then every group by ascending time."""
    return sorted(rows, key=lambda r: ("zap" not in r.name, r.time))


def get_benchmark_rows(benchmark_name: str, lines: Sequence[str]) -> str:
    """Render the markdown table for one benchmark from its output lines."""
    baseline = get_benchmark_row(lines, benchmark_name, "Zap", None)
    rows = []
    for library_name in LIBRARY_NAME_TO_MARKDOWN_NAME:
        row = get_benchmark_row(lines, benchmark_name, library_name, baseline)
        if row is not None:
            rows.append(row)
    table = list(TABLE_HEADER)
    table.extend(str(row) for row in sort_rows(rows))
    return "\n".join(table)


def get_benchmark_output(benchmark_name: str) -> list[str]:
    """Run one benchmark in the ``benchmarks`` directory; return its lines.

    Raises RuntimeError if the benchmark cannot be run or fails.
    """
    cmd = ["go", "test", f"-bench={benchmark_name}", "-benchmem"]
    what = f"error running 'go test -bench=\"{benchmark_name}\"'"
    try:
        proc = subprocess.run(
            cmd, cwd="benchmarks", stdout=subprocess.PIPE, stderr=subprocess.STDOUT
        )
    except OSError as exc:
        raise RuntimeError(f"{what}: {exc}") from exc
    output = proc.stdout.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        raise RuntimeError(f"{what}: exit status {proc.returncode}\n{output}")
    return output.split("\n")


def render_template(template_text: str, data: Mapping[str, str]) -> str:
    """Replace each ``{{.Name}}`` with ``data["Name"]``.

    Raises ValueError for other actions or fields missing from ``data``.
    """

    def substitute(m: re.Match[str]) -> str:
        action = m.group(1)
        ref = _FIELD_REF.fullmatch(action)
        if ref is None:
            raise ValueError(f"unsupported template action: {{{{{action}}}}}")
        name = ref.group(1)
        if name not in data:
            raise ValueError(f"can't evaluate field {name}")
        return str(data[name])

    return _TEMPLATE_ACTION.sub(substitute, template_text)


def _template_data() -> dict[str, str]:
    return {
        name: get_benchmark_rows(name, get_benchmark_output(name))
        for name in BENCHMARK_NAMES
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Read a README template on stdin and write it, filled in, to stdout."""
    parser = argparse.ArgumentParser(
        prog="readme",
        description="Fill the README template on stdin with benchmark tables.",
    )
    parser.parse_args(argv)
    try:
        data = _template_data()
        template_text = sys.stdin.read()
        sys.stdout.write(render_template(template_text, data))
    except (ValueError, RuntimeError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0