"""Metrics status values and the exit codes that go with them."""

from __future__ import annotations

from dataclasses import dataclass

API_SOURCE = "api"
SUCCESS_STATUS = "success"
FAILURE_STATUS = "failure"
COMPOSE_PARSE_FAILURE_STATUS = "failure-compose-parse"
FILE_NOT_FOUND_FAILURE_STATUS = "failure-file-not-found"
COMMAND_SYNTAX_FAILURE_STATUS = "failure-cmd-syntax"
BUILD_FAILURE_STATUS = "failure-build"
PULL_FAILURE_STATUS = "failure-pull"
CANCELED_STATUS = "canceled"


@dataclass(frozen=True)
class FailureCategory:
    """A metrics status paired with the exit code that reports it."""

    metrics_status: str
    exit_code: int


FILE_NOT_FOUND_FAILURE = FailureCategory(FILE_NOT_FOUND_FAILURE_STATUS, 14)
COMPOSE_PARSE_FAILURE = FailureCategory(COMPOSE_PARSE_FAILURE_STATUS, 15)
COMMAND_SYNTAX_FAILURE = FailureCategory(COMMAND_SYNTAX_FAILURE_STATUS, 16)
BUILD_FAILURE = FailureCategory(BUILD_FAILURE_STATUS, 17)
PULL_FAILURE = FailureCategory(PULL_FAILURE_STATUS, 18)

_KNOWN = {
    category.exit_code: category
    for category in (
        FILE_NOT_FOUND_FAILURE,
        COMPOSE_PARSE_FAILURE,
        COMMAND_SYNTAX_FAILURE,
        BUILD_FAILURE,
        PULL_FAILURE,
    )
}


def by_exit_code(exit_code: int) -> FailureCategory:
    """Return the failure category for a command exit code."""
    if exit_code == 0:
        return FailureCategory(SUCCESS_STATUS, 0)
    if exit_code in _KNOWN:
        return _KNOWN[exit_code]
    if exit_code == 130:
        return FailureCategory(CANCELED_STATUS, exit_code)
    return FailureCategory(FAILURE_STATUS, exit_code)