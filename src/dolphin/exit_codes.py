"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~dolphin.exceptions.DolphinError` subclass.
Shell wrappers can inspect the exit code to tell an API failure from a
network failure without parsing stderr.

Example::

    $ dolphin droplet create
    $ echo $?
    2   # EXIT_INVALID_USAGE -- the droplet name is missing
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_API_ERROR = 5
"""The remote API answered with a status code the operation does not accept."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
