"""Suggest image scanning after a successful build."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

SCAN_SUGGEST_MSG = (
    "Use 'docker scan' to run Snyk tests against images to find "
    "vulnerabilities and learn how to fix them"
)

_SCAN_PLUGIN = "docker-scan.exe" if sys.platform == "win32" else "docker-scan"

_SYSTEM_PLUGIN_DIRS = (
    "/usr/local/lib/docker/cli-plugins",
    "/usr/local/libexec/docker/cli-plugins",
    "/usr/lib/docker/cli-plugins",
    "/usr/libexec/docker/cli-plugins",
)


def docker_config_dir() -> Path:
    """Return the docker client configuration directory."""
    configured = os.environ.get("DOCKER_CONFIG")
    if configured:
        return Path(configured)
    return Path.home() / ".docker"


def scan_already_invoked(config_dir: str | os.PathLike[str] | None = None) -> bool:
    """Tell whether the user already opted in to scanning."""
    base = Path(config_dir) if config_dir is not None else docker_config_dir()
    filename = base / "scan" / "config.json"
    if not filename.exists():
        return False
    if filename.is_dir():
        return True
    try:
        data = json.loads(filename.read_text())
    except (OSError, ValueError):
        return True
    if data is None:
        return False
    if not isinstance(data, dict):
        return True
    optin = data.get("optin")
    if optin is None:
        return False
    if not isinstance(optin, bool):
        return True
    return optin


def _scan_plugin_installed(config_dir: Path) -> bool:
    candidates = [config_dir / "cli-plugins", *map(Path, _SYSTEM_PLUGIN_DIRS)]
    return any((directory / _SCAN_PLUGIN).is_file() for directory in candidates)


def display_scan_suggest_msg(
    stream: TextIO | None = None,
    config_dir: str | os.PathLike[str] | None = None,
    scan_available: Callable[[], bool] | None = None,
) -> bool:
    """Write the scan suggestion when appropriate; return whether it was written."""
    if os.environ.get("DOCKER_SCAN_SUGGEST") == "false":
        return False
    base = Path(config_dir) if config_dir is not None else docker_config_dir()
    available = scan_available() if scan_available is not None else _scan_plugin_installed(base)
    if not available:
        return False
    if scan_already_invoked(base):
        return False
    out = stream if stream is not None else sys.stderr
    out.write("\n" + SCAN_SUGGEST_MSG + "\n")
    return True