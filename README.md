# zaplog

Building blocks for a structured logger: destinations opened by URL, a
buffered writer that flushes on size or on a timer, system and controllable
clocks, compact stack traces, and small helpers for testing code that writes
logs or ends the process.

All writers in this package share one small shape: `write(data: bytes) -> int`
and `sync()`. Errors are raised as exceptions.

## Modules

- `zaplog.sink` — a registry of sink factories keyed by URL scheme.
  `new_sink(raw_url)` opens a destination. URLs without a scheme, or with the
  `file` scheme, are local files opened for appending; the bare paths
  `stdout` and `stderr` mean the standard streams and are wrapped in a
  `NopCloserSink`, whose `close()` leaves the stream open. File URLs may not
  carry a user, password, port, query or fragment, and their host must be
  empty or `localhost`; otherwise `ValueError` is raised.
  `register_sink(scheme, factory)` adds a factory for another scheme (the
  factory receives the parsed `urllib.parse.SplitResult`); schemes are checked
  and lower-cased by `normalize_scheme`, and registering an empty, invalid or
  already registered scheme raises `ValueError`. Opening a URL whose scheme
  has no factory raises `SinkNotFoundError`. `reset_sink_registry()` drops
  everything but the built-in `file` scheme.
- `zaplog.writer` — `open_sinks(*paths)` opens several destinations and
  combines them into one locked writer, returning `(writer, close)`. If any
  path fails, whatever did open is closed and `OpenError` is raised, listing
  every failure in `failures`. `combine_write_syncers(*writers)` merges
  writers you already have; with none, it returns a writer that discards
  everything.
- `zaplog.buffered` — `BufferedWriteSyncer(ws, size=0, flush_interval=None,
  clock=None)` keeps writes in memory (256 kB and 30 seconds by default) and
  hands them to `ws` when the buffer fills, on every tick of the flush
  interval, on `sync()`, or on `stop()`. Only the first `stop()` flushes. It
  can be used as a context manager, which calls `stop()` on exit.
- `zaplog.clock` — `SystemClock` with `now()` and `new_ticker(interval)`, and
  the `Ticker` it returns (`get(timeout)`, `tick(when)`, `stop()`).
  `DEFAULT_CLOCK` is a shared `SystemClock`.
- `zaplog.mock_clock` — `MockClock`, whose time starts at the Unix epoch and
  only moves when you call `add(delta)`; tickers it made fire for every
  interval passed on the way.
- `zaplog.stacktrace` — `take_stacktrace(skip)` returns the current call
  stack as text: each frame's module-qualified function name, then a
  tab-indented `file:line`. `capture_stacktrace(skip, depth)` returns the
  frames themselves (`StacktraceDepth.FIRST` or `StacktraceDepth.FULL`), and
  `StackFormatter` formats frames you pass to it.
- `zaplog.color` — `Color` wraps text in ANSI foreground colour codes.
- `zaplog.timeutil` — `time_to_millis(t)` gives milliseconds since the Unix
  epoch; naive datetimes are taken as UTC.
- `zaplog.exit` — `exit_with(code)` and `exit_now()` end the process;
  `stub()` and `with_stub(f)` replace that with a `StubbedExit` recording
  `exited` and `code`.
- `zaplog.timeout` — `timeout(base)` and `sleep(base)` scale a duration by a
  factor set with `initialize(factor)` or, at import, from the
  `TEST_TIMEOUT_SCALE` environment variable.
- `zaplog.test_writers` — writers for tests: `Syncer` records `sync()` calls
  and can raise a set `error`; `Discarder` drops writes, `FailWriter` fails
  them, `ShortWriter` writes one byte short, and `Buffer` collects them, with
  `getvalue()`, `lines()` and `stripped()`.

## Examples

```python
from datetime import datetime, timezone

from zaplog.color import Color
from zaplog.sink import normalize_scheme
from zaplog.stacktrace import take_stacktrace
from zaplog.timeutil import time_to_millis

print(Color.RED.add("error"))            # red text on a terminal
print(normalize_scheme("HTTP"))          # "http"
print(time_to_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)))  # 1000
print(take_stacktrace(0))
```

Buffering writes to a file:

```python
from zaplog.buffered import BufferedWriteSyncer
from zaplog.writer import open_sinks

writer, close = open_sinks("app.log", "stderr")
with BufferedWriteSyncer(writer, size=4096, flush_interval=1.0) as buffered:
    buffered.write(b"hello\n")
close()
```

Testing code that would end the process:

```python
from zaplog.exit import exit_with, with_stub

stubbed = with_stub(lambda: exit_with(42))
assert stubbed.exited and stubbed.code == 42
```

## Benchmark tables

The `zaplog-readme` command runs the benchmarks `BenchmarkAddingFields`,
`BenchmarkAccumulatedContext` and `BenchmarkWithoutFields` with
`go test -bench=<name> -benchmem` in the `benchmarks` directory under the
current directory, builds a markdown comparison table for each, and fills
them into a template read from standard input. The template may only use
actions of the form `{{.BenchmarkAddingFields}}`. On any error it prints the
message to standard error and exits with status 1.

```
zaplog-readme < readme-template.md > README.md
```

## What this package does not do

There is no logger here: no log levels, entries, fields, encoders or cores.
The package gives the pieces around one — where output goes, how it is
buffered and timed, and how stacks are described — but nothing that formats
or filters log records itself.