"""Exception hierarchy for dolphin.

All exceptions inherit from :class:`DolphinError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`dolphin.exit_codes`.
The top-level error handler in :func:`dolphin.app.main` catches
``DolphinError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    DolphinError (exit 1)
    +-- InvalidUsageError            (exit 2)
    |   +-- MissingArgumentError     (exit 2)
    +-- APIError                     (exit 5)
    |   +-- InvalidResponseCodeError (exit 5)
    +-- ConnectionError_             (exit 6)
    +-- ConfigError                  (exit 1)
"""

from __future__ import annotations

from typing import Optional

from dolphin.exit_codes import (
    EXIT_API_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class DolphinError(Exception):
    """Base exception for all dolphin errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`dolphin.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(DolphinError):
    """Raised for invalid CLI arguments or malformed parameters."""

    exit_code = EXIT_INVALID_USAGE


class MissingArgumentError(InvalidUsageError):
    """Raised before any network activity when a required parameter is absent.

    Args:
        argument: Name of the missing parameter (e.g. ``"name"``).
    """

    def __init__(self, argument: str):
        super().__init__(f"Missing the '{argument}' parameter.")
        self.argument = argument


class APIError(DolphinError):
    """Raised when the DigitalOcean API misbehaves."""

    exit_code = EXIT_API_ERROR


class InvalidResponseCodeError(APIError):
    """Raised when an operation receives a status code outside its accepted set.

    Args:
        status_code: The HTTP status actually returned.
        endpoint: The full URL that was requested.
        operation: Name of the client operation (e.g. ``"get_droplets"``).
    """

    def __init__(
        self,
        status_code: int,
        endpoint: str,
        operation: Optional[str] = None,
    ):
        label = operation or "request"
        super().__init__(
            f"Invalid response code {status_code} from {label} ({endpoint})."
        )
        self.status_code = status_code
        self.endpoint = endpoint
        self.operation = operation


class ConnectionError_(DolphinError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(DolphinError):
    """Raised for configuration problems (invalid JSON, missing token, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
