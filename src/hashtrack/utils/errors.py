"""Structured error rendering for CLI output."""

from __future__ import annotations

import json
import sys

from rich.console import Console

from hashtrack.exceptions import HashtrackError, RejectedError

console = Console(stderr=True)

_LOGIN_HINT = "Session missing or expired - run `hashtrack login`"

# Actionable hints keyed by error code
_ERROR_HINTS: dict[str, str] = {
    "UNAUTHENTICATED": _LOGIN_HINT,
    "NETWORK_ERROR": "Could not reach the service - check connectivity or --endpoint",
    "NOT_FOUND": "Nothing matched - check the hashtag with `hashtrack tracks`",
    "SERVER_ERROR": "The service failed - try again later",
    "MALFORMED": "Unexpected response - check that --endpoint points at a Hashtrack service",
    "STORAGE_ERROR": "Check permissions on the token file",
    "CONFIG_ERROR": "Fix the config file or pass --config",
}


def error_code(error: Exception) -> str:
    """Error code for structured output."""
    if isinstance(error, HashtrackError):
        return error.code
    return "RUNTIME_ERROR"


def get_hint(error: Exception) -> str | None:
    """Match an error to an actionable hint."""
    if isinstance(error, RejectedError):
        return _LOGIN_HINT if error.is_auth_failure else None
    return _ERROR_HINTS.get(error_code(error))


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout:
    {"error": true, "code": "REJECTED", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = get_hint(error)

    error_obj: dict[str, object] = {
        "error": True,
        "code": error_code(error),
        "message": message,
    }
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
