"""HTTP transport used by the API client.

:class:`Transport` is the structural contract the client consumes: three
verbs taking a full URL and an ordered list of ``"Name: value"`` header
strings, each returning an :class:`~dolphin.models.Envelope`.

:class:`HttpxTransport` is the shipped implementation, backed by a single
:class:`httpx.Client`. It does not retry; network-level failures are
raised as :class:`~dolphin.exceptions.ConnectionError_` and left for the
caller to handle.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Protocol

import httpx

from dolphin.exceptions import ConnectionError_
from dolphin.models import Envelope, RequestConfig

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural interface for anything that can perform the three verbs."""

    def get(self, url: str, headers: list[str]) -> Envelope: ...

    def post(self, url: str, params: dict[str, Any], headers: list[str]) -> Envelope: ...

    def delete(self, url: str, headers: list[str]) -> Envelope: ...


def parse_header_lines(headers: list[str]) -> httpx.Headers:
    """Turn ``["Name: value", ...]`` into a header mapping.

    Later lines override earlier ones with the same (case-insensitive)
    name, so custom headers appended after the defaults win.

    Args:
        headers: Header lines in ``Name: value`` form.

    Returns:
        An :class:`httpx.Headers` instance keyed by header name.

    Raises:
        ValueError: If a line has no ``:`` separator.
    """
    parsed = httpx.Headers()
    for line in headers:
        name, sep, value = line.partition(":")
        if not sep:
            raise ValueError(f"Malformed header line: {line!r}")
        parsed[name.strip()] = value.strip()
    return parsed


class HttpxTransport:
    """Blocking transport backed by :class:`httpx.Client`.

    Can be used as a context manager, or closed explicitly with
    :meth:`close`.

    Args:
        config: Timeout and TLS verification settings.
        client: Optional pre-built client, mainly so tests can plug in an
            :class:`httpx.MockTransport`.

    Example::

        with HttpxTransport(RequestConfig(timeout=10)) as transport:
            envelope = transport.get(url, ["Authorization: Bearer ..."])
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._client = client or httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
        )

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if not self._client.is_closed:
            self._client.close()

    # ------------------------------------------------------------------ #
    # Verbs
    # ------------------------------------------------------------------ #

    def get(self, url: str, headers: list[str]) -> Envelope:
        return self._send("GET", url, headers)

    def post(self, url: str, params: dict[str, Any], headers: list[str]) -> Envelope:
        return self._send("POST", url, headers, json_body=params)

    def delete(self, url: str, headers: list[str]) -> Envelope:
        return self._send("DELETE", url, headers)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _send(
        self,
        method: str,
        url: str,
        headers: list[str],
        json_body: Optional[dict[str, Any]] = None,
    ) -> Envelope:
        """Perform one request and wrap the result in an envelope."""
        kwargs: dict[str, Any] = {
            "method": method,
            "url": url,
            "headers": parse_header_lines(headers),
        }
        if json_body is not None:
            kwargs["json"] = json_body

        start = time.monotonic()
        try:
            response = self._client.request(**kwargs)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            raise ConnectionError_(f"Connection to {url} failed: {exc}") from exc

        logger.debug(
            "%s %s -> %s in %.3fs",
            method,
            url,
            response.status_code,
            time.monotonic() - start,
        )
        return Envelope(code=response.status_code, body=response.text)
