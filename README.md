# dockcompose

Building blocks for a container-compose command line, usable on their own
from Python code. The package has no third-party runtime dependencies.

## What is in it

- `dockcompose.progress.event`: the `Event` dataclass, the `EventStatus`
  enum (`WORKING`, `DONE`, `ERROR`) and helpers that build the usual events
  (`creating_event`, `started_event`, `stopped_event`, `removed_event`,
  `error_message_event` and the rest).
- `dockcompose.progress.spinner`: `Spinner`, a text spinner that advances as
  it is rendered and shows a fixed character once stopped.
- `dockcompose.progress.tty`: `TTYWriter`, which keeps the latest state of
  every event and redraws a live status block on a terminal, followed by
  any messages queued with `tail_msgf`; plus `line_text`, `num_done` and
  `align`, used to lay out each line.
- `dockcompose.compose.stacks`: `Container` and `Stack`, grouping containers
  into stacks by project label (`containers_to_stacks`,
  `group_container_by_label`), and combining their states
  (`combined_status`) and config files (`combined_config_files`). A
  container without a required label raises `MissingLabelError`.
- `dockcompose.compose.ps`: `summarize`, which combines a listed container,
  its `Port`s and its inspected `ContainerState` into a `ContainerSummary`.
- `dockcompose.compose.restart_policy`: `RestartPolicy` and
  `will_container_restart`.
- `dockcompose.compose.printer`: `LogPrinter`, which consumes
  `ContainerEvent`s and forwards registrations, exit statuses and log lines
  to a consumer, with optional cascade stop and exit-code selection.
- `dockcompose.compose.pullevents`: decoding engine pull/push streams
  (`decode_stream`, `JSONMessage`), turning messages into progress events
  (`to_pull_progress_event`, `to_push_progress_event`), and pull-policy
  decisions (`PullPolicy`, `needs_pull`, `skip_reason`).
- `dockcompose.metrics`: `FailureCategory` and `by_exit_code`, mapping a
  command's exit code to a metrics status.
- `dockcompose.linewriter`: `LineWriter` / `get_writer`, which split written
  chunks into whole lines for a consumer.
- `dockcompose.stringutils`: `string_contains` and `string_to_bool`.
- `dockcompose.scan_suggest`: `display_scan_suggest_msg`,
  `scan_already_invoked` and `docker_config_dir`, for suggesting an image
  scan after a build.
- `dockcompose.prompt`: `User`, asking select, input, confirm and password
  questions on a terminal or on given streams.
- `dockcompose.e2e.framework`: `E2eCLI`, which runs the `docker` CLI and the
  compose plugin with a private, throw-away configuration directory, plus
  `find_executable`, `copy_file`, `dir_contents`, `stdout_contains`,
  `lines` and `http_get_with_retry`. Setting `COMPOSE_E2E_STANDALONE` to a
  true value makes it run the `docker-compose` binary directly instead of
  through `docker compose`.

## Examples

Combine container states the way a project listing shows them:

```python
from dockcompose.compose.stacks import combined_status

print(combined_status(["running", "exited", "running"]))
# exited(1), running(2)
```

Split arbitrary chunks of output into whole lines:

```python
from dockcompose.linewriter import get_writer

lines = []
with get_writer(lines.append) as writer:
    writer.write(b"hel")
    writer.write(b"lo\nworld!\n")
print(lines)
# ['hello', 'world!']
```

Look up the failure category for an exit code:

```python
from dockcompose.metrics import by_exit_code

print(by_exit_code(18))
# FailureCategory(metrics_status='failure-pull', exit_code=18)
```

Render progress on a terminal; `start` blocks until `stop` is called:

```python
import sys
import threading

from dockcompose.progress.event import removing_event, removed_event
from dockcompose.progress.tty import TTYWriter

writer = TTYWriter(sys.stderr)
renderer = threading.Thread(target=writer.start)
renderer.start()
writer.event(removing_event("Container web-1"))
writer.event(removed_event("Container web-1"))
writer.tail_msgf("Removed %d container(s)", 1)
writer.stop()
renderer.join()
```

Decide whether a service image needs pulling:

```python
from dockcompose.compose.pullevents import needs_pull

needs_pull("nginx:latest", "missing", {"nginx:latest"})
# False: the image is already present locally
```

## What it does not do

- There is no command line: the package installs no commands.
- The only progress writer is `TTYWriter`; there is no plain-text writer
  for output that is not a terminal, and no helper that picks a writer or
  runs a task alongside one.
- Apart from the end-to-end harness, which starts the `docker` CLI, nothing
  here talks to a container engine: the functions work on data you pass in
  (container lists, inspected states, stream contents).

## Tests

The tests in `tests/` are written for pytest, available through the
`test` extra.