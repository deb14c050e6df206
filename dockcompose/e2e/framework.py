"""Helpers to drive the docker CLI and the compose plugin in end-to-end tests."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
import tempfile
import time
import urllib.error
import urllib.request
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from dockcompose.stringutils import string_to_bool

PLUGIN_NAME = "compose"

_EXE_SUFFIX = ".exe" if sys.platform == "win32" else ""

DOCKER_EXECUTABLE_NAME = "docker" + _EXE_SUFFIX
DOCKER_COMPOSE_EXECUTABLE_NAME = "docker-" + PLUGIN_NAME + _EXE_SUFFIX
DOCKER_SCAN_EXECUTABLE_NAME = "docker-scan" + _EXE_SUFFIX

DEFAULT_SEARCH_PATHS: tuple[str, ...] = ("../../bin", "../../../bin")

COMPOSE_STANDALONE_MODE = string_to_bool(os.environ.get("COMPOSE_E2E_STANDALONE", ""))

_NOT_STARTED_EXIT_CODE = 127


class CommandError(Exception):
    """A command did not finish successfully."""

    def __init__(self, result: Result) -> None:
        super().__init__(
            f"command {' '.join(result.command)!r} exited with code {result.exit_code}:\n"
            f"{result.combined}"
        )
        self.result = result


class WaitTimeoutError(TimeoutError):
    """A polled condition was not met before the timeout."""


@dataclass
class Cmd:
    """A command line together with the environment it runs in."""

    command: list[str]
    env: dict[str, str] = field(default_factory=dict)


@dataclass
class Result:
    """The outcome of running a command."""

    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    error: str = ""

    @property
    def combined(self) -> str:
        return self.stdout + self.stderr

    def assert_success(self) -> Result:
        """Raise CommandError unless the command exited with code 0."""
        if self.exit_code != 0:
            raise CommandError(self)
        return self


def run_command(cmd: Cmd) -> Result:
    """Run ``cmd`` and capture its output; a command that cannot start gives 127."""
    try:
        completed = subprocess.run(
            cmd.command,
            env=cmd.env or None,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as exc:
        return Result(
            command=list(cmd.command),
            exit_code=_NOT_STARTED_EXIT_CODE,
            stderr=str(exc),
            error=str(exc),
        )
    return Result(
        command=list(cmd.command),
        exit_code=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )


def _poll(check: Callable[[], str | None], timeout: float, delay: float) -> None:
    """Call ``check`` until it returns None; raise WaitTimeoutError after ``timeout``."""
    deadline = time.monotonic() + timeout
    while True:
        message = check()
        if message is None:
            return
        if time.monotonic() + delay > deadline:
            raise WaitTimeoutError(f"timeout hit after {timeout}s: {message}")
        time.sleep(delay)


def dir_contents(directory: str | os.PathLike[str]) -> list[str]:
    """List ``directory`` and every path below it, in lexical walk order."""
    root = str(directory)
    found = [root]

    def _walk(path: str) -> None:
        try:
            names = sorted(os.listdir(path))
        except OSError:
            return
        for name in names:
            child = os.path.join(path, name)
            found.append(child)
            if os.path.isdir(child) and not os.path.islink(child):
                _walk(child)

    if os.path.isdir(root):
        _walk(root)
    return found


def find_executable(executable_name: str, paths: Iterable[str | os.PathLike[str]]) -> str:
    """Return the absolute path of the first ``executable_name`` found in ``paths``."""
    for directory in paths:
        candidate = os.path.abspath(os.path.join(directory, executable_name))
        if os.path.exists(candidate):
            return candidate
    raise FileNotFoundError(f"executable not found: {executable_name}")


def copy_file(source_file: str | os.PathLike[str], destination_file: str | os.PathLike[str]) -> None:
    """Copy ``source_file`` over ``destination_file`` and make the copy executable."""
    shutil.copyfile(source_file, destination_file)
    os.chmod(destination_file, 0o755)


def stdout_contains(expected: str) -> Callable[[Result], bool]:
    """Predicate on a command result: its stdout contains ``expected``."""

    def _predicate(result: Result) -> bool:
        return expected in result.stdout

    return _predicate


def lines(output: str) -> list[str]:
    """Split trimmed output into lines."""
    return output.strip().split("\n")


def http_get_with_retry(
    endpoint: str, expected_status: int, retry_delay: float, timeout: float
) -> str:
    """GET ``endpoint`` until it answers ``expected_status``; return the response body."""
    print(f"\tGET {endpoint}")
    body: list[str] = []

    def _check() -> str | None:
        try:
            with urllib.request.urlopen(endpoint, timeout=retry_delay) as response:
                status = response.status
                content = response.read()
        except urllib.error.HTTPError as exc:
            status = exc.code
            content = exc.read()
        except (urllib.error.URLError, OSError) as exc:
            return f"reaching {endpoint!r}: Error {exc}"
        if status == expected_status:
            body.append(content.decode(errors="replace"))
            return None
        return f"reaching {endpoint!r}: {status} != {expected_status}"

    _poll(_check, timeout, retry_delay)
    return body[0] if body else ""


class E2eCLI:
    """Runs docker commands against a private, throw-away client configuration."""

    def __init__(
        self,
        bin_dir: str = "",
        name: str = "",
        search_paths: Sequence[str | os.PathLike[str]] = DEFAULT_SEARCH_PATHS,
        standalone: bool | None = None,
        docker_executable: str = DOCKER_EXECUTABLE_NAME,
    ) -> None:
        self.bin_dir = bin_dir
        self.name = name
        self.search_paths = list(search_paths)
        self.standalone = COMPOSE_STANDALONE_MODE if standalone is None else standalone
        self.docker_executable = docker_executable
        self.config_dir = tempfile.mkdtemp()

        plugins = os.path.join(self.config_dir, "cli-plugins")
        os.makedirs(plugins, mode=0o755, exist_ok=True)
        try:
            compose_plugin = find_executable(DOCKER_COMPOSE_EXECUTABLE_NAME, self.search_paths)
        except FileNotFoundError:
            print("WARNING: docker-compose cli-plugin not found")
        else:
            copy_file(compose_plugin, os.path.join(plugins, DOCKER_COMPOSE_EXECUTABLE_NAME))
            # A valid plugin binary is enough; it does not need to scan anything.
            copy_file(compose_plugin, os.path.join(plugins, DOCKER_SCAN_EXECUTABLE_NAME))

    def __enter__(self) -> E2eCLI:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc_type is not None:
            self._report()
        self.cleanup()

    def _report(self) -> None:
        config = Path(self.config_dir, "config.json")
        try:
            content = config.read_text()
        except OSError:
            content = ""
        print(f"Config: {content}", file=sys.stderr)
        print("Contents of config dir:", file=sys.stderr)
        for path in dir_contents(self.config_dir):
            print(path, file=sys.stderr)

    def cleanup(self) -> None:
        """Remove the private configuration directory."""
        shutil.rmtree(self.config_dir, ignore_errors=True)

    def _log(self, text: str) -> None:
        print(f"\t[{self.name}] {text}")

    def new_cmd(self, command: str, *args: str) -> Cmd:
        """Build a command running with this CLI's configuration."""
        env = dict(os.environ)
        env["DOCKER_CONFIG"] = self.config_dir
        env["KUBECONFIG"] = "invalid"
        return Cmd(command=[command, *args], env=env)

    def metrics_socket(self) -> str:
        """Path where test metrics are sent."""
        return os.path.join(self.config_dir, "docker-cli.sock")

    def new_docker_cmd(self, *args: str) -> Cmd:
        """Build a docker command without running it."""
        return self.new_cmd(self.docker_executable, *args)

    def run_docker_or_exit_error(self, *args: str) -> Result:
        """Run a docker command and return its result, whatever its exit code."""
        self._log("docker " + " ".join(args))
        return run_command(self.new_docker_cmd(*args))

    def run_cmd(self, *args: str) -> Result:
        """Run a command, requiring it to succeed."""
        if not args:
            raise ValueError("require at least one command in parameters")
        self._log(" ".join(args))
        return run_command(self.new_cmd(args[0], *args[1:])).assert_success()

    def run_docker_cmd(self, *args: str) -> Result:
        """Run a docker command, requiring it to succeed."""
        if args and args[0] == PLUGIN_NAME:
            raise ValueError(
                "run_docker_cmd was called for 'compose'; use run_docker_compose_cmd "
                "to test both as a plugin and standalone"
            )
        return self.run_docker_or_exit_error(*args).assert_success()

    def run_docker_compose_cmd(self, *args: str) -> Result:
        """Run a compose command, requiring it to succeed."""
        return self.run_docker_compose_cmd_no_check(*args).assert_success()

    def run_docker_compose_cmd_no_check(self, *args: str) -> Result:
        """Run a compose command and return its result, whatever its exit code."""
        if self.standalone:
            compose_binary = find_executable(DOCKER_COMPOSE_EXECUTABLE_NAME, self.search_paths)
            return run_command(self.new_cmd(compose_binary, *args))
        return run_command(self.new_cmd(self.docker_executable, PLUGIN_NAME, *args))

    def wait_for_cmd_result(
        self,
        command: Cmd,
        predicate: Callable[[Result], bool],
        timeout: float,
        delay: float,
    ) -> Result:
        """Run ``command`` repeatedly until its result satisfies ``predicate``."""
        if timeout <= delay:
            raise ValueError("timeout must be greater than delay")
        last: list[Result] = []

        def _check() -> str | None:
            self._log(" ".join(command.command))
            result = run_command(command)
            last[:] = [result]
            if predicate(result):
                return None
            return f"Cmd output did not match requirement: {result.combined!r}"

        _poll(_check, timeout, delay)
        return last[0]

    def wait_for_condition(
        self, predicate: Callable[[], tuple[bool, str]], timeout: float, delay: float
    ) -> None:
        """Call ``predicate`` until it reports success."""

        def _check() -> str | None:
            passed, description = predicate()
            if passed:
                return None
            return f"Condition not met: {description!r}"

        _poll(_check, timeout, delay)