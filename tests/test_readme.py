import io
import subprocess
import sys
from unittest import mock

import pytest

from zaplog.readme import (
    BENCHMARK_NAMES,
    TABLE_HEADER,
    BenchmarkRow,
    find_unique_substring,
    get_benchmark_output,
    get_benchmark_row,
    get_benchmark_rows,
    main,
    parse_duration,
    render_template,
    sort_rows,
)


def _line(bench, lib, ns, nbytes, allocs):
    return (
        f"{bench}/{lib}-8   \t 1000000\t  {ns} ns/op\t  {nbytes} B/op\t"
        f"  {allocs} allocs/op"
    )


def _output(bench):
    return [
        "goos: linux",
        _line(bench, "Zap", 100, 10, 1),
        _line(bench, "Zap.Sugar", 150, 20, 2),
        _line(bench, "sirupsen/logrus", 300, 30, 3),
        _line(bench, "rs/zerolog", 80, 5, 0),
        "PASS",
    ]


def test_parse_duration_plain_nanoseconds():
    assert parse_duration("1234ns") == 1234
    assert parse_duration("0") == 0


def test_parse_duration_unit_relations():
    assert parse_duration("1us") == parse_duration("1000ns")
    assert parse_duration("1µs") == parse_duration("1us")
    assert parse_duration("1s") == 1000 * parse_duration("1ms")
    assert parse_duration("1m") == 60 * parse_duration("1s")
    assert parse_duration("1h") == 60 * parse_duration("1m")
    assert parse_duration("1.5us") == parse_duration("1us") + parse_duration("500ns")
    assert parse_duration("2h45m") == parse_duration("2h") + parse_duration("45m")
    assert parse_duration("-5ns") == -parse_duration("5ns")


@pytest.mark.parametrize("text", ["", "abc", "5", "5xs", ".s", "-", "1ns2"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError, match="invalid duration"):
        parse_duration(text)


def test_find_unique_substring():
    lines = ["alpha one", "beta two", "gamma three"]
    assert find_unique_substring(lines, "beta") == "beta two"
    assert find_unique_substring(lines, "delta") == ""
    with pytest.raises(ValueError, match="duplicate substring"):
        find_unique_substring(lines + ["beta again"], "beta")


def test_get_benchmark_row():
    lines = _output("BenchmarkAddingFields")
    row = get_benchmark_row(lines, "BenchmarkAddingFields", "Zap", None)
    assert row == BenchmarkRow(
        name=":zap: zap", time=100, allocated_bytes=10, allocated_objects=1
    )
    sugared = get_benchmark_row(lines, "BenchmarkAddingFields", "Zap.Sugar", row)
    assert sugared.name == ":zap: zap (sugared)"
    assert sugared.time == 150
    assert sugared.zap_time == row.time
    assert sugared.zap_allocated_bytes == row.allocated_bytes
    assert sugared.zap_allocated_objects == row.allocated_objects


def test_get_benchmark_row_missing_and_malformed():
    lines = _output("BenchmarkAddingFields")
    assert get_benchmark_row(lines, "BenchmarkAddingFields", "apex/log", None) is None
    bad = ["BenchmarkX/Zap-8\t1000\t12 ns/op"]
    with pytest.raises(ValueError, match="unknown benchmark line"):
        get_benchmark_row(bad, "BenchmarkX", "Zap", None)
    bad_num = [_line("BenchmarkX", "Zap", 10, "lots", 1)]
    with pytest.raises(ValueError):
        get_benchmark_row(bad_num, "BenchmarkX", "Zap", None)


def test_benchmark_row_str_against_itself():
    row = BenchmarkRow(":zap: zap", 1234, 0, 5, zap_time=1234)
    assert str(row) == "| :zap: zap | 1234 ns/op | +0% | 5 allocs/op"


def test_benchmark_row_str_zero_baseline():
    row = BenchmarkRow("logrus", 10, 0, 3)
    assert "+Inf%" in str(row)
    assert str(row).startswith("| logrus | 10 ns/op |")


def test_sort_rows_zap_first_then_time():
    rows = [
        BenchmarkRow("zap a", 50, 0, 0),
        BenchmarkRow("logrus", 10, 0, 0),
        BenchmarkRow("zap b", 20, 0, 0),
        BenchmarkRow("go-kit", 5, 0, 0),
    ]
    names = [r.name for r in sort_rows(rows)]
    assert names == ["zap b", "zap a", "go-kit", "logrus"]


def test_get_benchmark_rows_table():
    table = get_benchmark_rows("BenchmarkAddingFields", _output("BenchmarkAddingFields"))
    lines = table.split("\n")
    assert len(lines) == 6
    assert tuple(lines[:2]) == TABLE_HEADER
    assert lines[2].startswith("| :zap: zap | 100 ns/op | +0% |")
    assert lines[3].startswith("| :zap: zap (sugared) | 150 ns/op |")
    assert lines[4].startswith("| zerolog | 80 ns/op |")
    assert lines[5].startswith("| logrus | 300 ns/op |")


def test_render_template():
    assert render_template("a {{.X}} b {{ .Y }}", {"X": "x1", "Y": "y1"}) == "a x1 b y1"
    assert render_template("no actions", {}) == "no actions"
    with pytest.raises(ValueError, match="Missing"):
        render_template("{{.Missing}}", {})
    with pytest.raises(ValueError, match="unsupported"):
        render_template("{{range .X}}", {"X": "x"})


def _fake_run(cmd, **kwargs):
    bench = cmd[2].removeprefix("-bench=")
    out = "\n".join(_output(bench)).encode()
    return subprocess.CompletedProcess(cmd, 0, stdout=out)


def test_get_benchmark_output():
    with mock.patch("subprocess.run", side_effect=_fake_run) as run:
        lines = get_benchmark_output("BenchmarkWithoutFields")
    assert lines == _output("BenchmarkWithoutFields")
    assert run.call_args.kwargs["cwd"] == "benchmarks"


def test_get_benchmark_output_failure():
    failed = subprocess.CompletedProcess([], 2, stdout=b"build failed")
    with mock.patch("subprocess.run", return_value=failed):
        with pytest.raises(RuntimeError, match="build failed"):
            get_benchmark_output("BenchmarkWithoutFields")
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("go")):
        with pytest.raises(RuntimeError, match="error running"):
            get_benchmark_output("BenchmarkWithoutFields")


def test_main_renders_template(monkeypatch, capsys):
    template = "".join(f"[{{{{.{name}}}}}]" for name in BENCHMARK_NAMES)
    monkeypatch.setattr(sys, "stdin", io.StringIO(template))
    with mock.patch("subprocess.run", side_effect=_fake_run):
        assert main([]) == 0
    out = capsys.readouterr().out
    assert out.startswith("[" + TABLE_HEADER[0])
    assert out.count(TABLE_HEADER[1]) == len(BENCHMARK_NAMES)
    assert out.endswith("]")


def test_main_reports_errors(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("{{.Unknown}}"))
    with mock.patch("subprocess.run", side_effect=_fake_run):
        assert main([]) == 1
    captured = capsys.readouterr()
    assert "Unknown" in captured.err
    assert captured.out == ""