"""Caching client for the DigitalOcean v2 API.

:class:`DigitalOcean` layers three things on top of a transport:

- **Cache policy** -- every GET first consults the cache according to a
  :class:`~dolphin.models.ForceUpdate` mode, and every GET that reaches
  the network overwrites the cached body for its URL.
- **Default headers** -- ``Content-type`` and a bearer ``Authorization``
  header are prepended to any caller-supplied headers.
- **Status validation** -- each resource method checks the returned code
  against :data:`ACCEPTED_CODES` and raises
  :class:`~dolphin.exceptions.InvalidResponseCodeError` on a mismatch.

Writes (POST / DELETE) never read, populate or invalidate the cache, so a
cached droplet list can lag behind a create or destroy until it expires
or is read with ``ForceUpdate.BYPASS_CACHE``.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Union
from urllib.parse import urlencode

from dolphin.cache import Cache
from dolphin.client.response import extract_key
from dolphin.exceptions import InvalidResponseCodeError, MissingArgumentError
from dolphin.models import DropletDefaults, Endpoints, Envelope, ForceUpdate
from dolphin.transport import Transport

logger = logging.getLogger(__name__)

_OK = frozenset({200})
# Droplet lifecycle operations.
_OK_OR_PENDING = frozenset({200, 202, 204})

ACCEPTED_CODES: dict[str, frozenset[int]] = {
    "get_keys": _OK,
    "get_images": _OK,
    "get_regions": _OK,
    "get_sizes": _OK,
    "get_droplets": _OK,
    "get_droplet": _OK_OR_PENDING,
    "create_droplet": _OK_OR_PENDING,
    "destroy_droplet": _OK_OR_PENDING,
}
"""Status codes each resource method accepts; anything else raises."""

ForceUpdateArg = Union[ForceUpdate, int, str, None]


class DigitalOcean:
    """Client for the DigitalOcean droplet, image, region, size and key endpoints.

    The client holds no per-call state apart from :attr:`last_response`,
    which is tracked per thread. The transport and cache are owned by the
    caller and are not closed by the client.

    Args:
        api_token: Bearer token sent with every request.
        transport: Performs the actual HTTP calls.
        cache: Store consulted before reads and refreshed after them.
        droplet_defaults: Parameters merged beneath the caller's in
            :meth:`create_droplet`.
        endpoints: Endpoint URLs. Defaults to the public API.

    Example::

        with HttpxTransport() as transport:
            do = DigitalOcean(token, transport, FileCache(cache_dir))
            do.create_droplet({"name": "web-1", "region": "ams3"})
    """

    def __init__(
        self,
        api_token: str,
        transport: Transport,
        cache: Cache,
        droplet_defaults: Optional[DropletDefaults] = None,
        endpoints: Optional[Endpoints] = None,
    ) -> None:
        self._api_token = api_token
        self._transport = transport
        self._cache = cache
        self._droplet_defaults = droplet_defaults or DropletDefaults()
        self._endpoints = endpoints or Endpoints()
        self._local = threading.local()

    def __repr__(self) -> str:
        return f"DigitalOcean(base_url={self._endpoints.base_url!r})"

    @property
    def last_response(self) -> Optional[Envelope]:
        """The most recent envelope received from the network on this thread.

        Cache hits do not update it. ``None`` until the first network call.
        """
        return getattr(self._local, "last_response", None)

    # ------------------------------------------------------------------ #
    # Resource methods
    # ------------------------------------------------------------------ #

    def get_keys(self, force_update: ForceUpdateArg = None) -> Any:
        """List the SSH keys registered on the account."""
        return self._read("get_keys", self._endpoints.keys, "ssh_keys", force_update)

    def get_images(
        self,
        force_update: ForceUpdateArg = None,
        image_type: str = "distribution",
    ) -> Any:
        """List images of the given type (``distribution``, ``application``, ...)."""
        endpoint = f"{self._endpoints.images}?{urlencode({'type': image_type})}"
        return self._read("get_images", endpoint, "images", force_update)

    def get_regions(self, force_update: ForceUpdateArg = None) -> Any:
        """List the available regions."""
        return self._read("get_regions", self._endpoints.regions, "regions", force_update)

    def get_sizes(self, force_update: ForceUpdateArg = None) -> Any:
        """List the available droplet sizes."""
        return self._read("get_sizes", self._endpoints.sizes, "sizes", force_update)

    def get_droplets(self, force_update: ForceUpdateArg = None) -> Any:
        """List all droplets on the account.

        Returns:
            The ``droplets`` array from the response, or ``None`` if the
            body does not contain one.

        Raises:
            InvalidResponseCodeError: If the API answers anything but 200.
        """
        return self._read(
            "get_droplets", self._endpoints.droplets, "droplets", force_update
        )

    def get_droplet(
        self,
        droplet_id: Union[int, str],
        force_update: ForceUpdateArg = None,
    ) -> Any:
        """Fetch a single droplet.

        Returns:
            The ``droplet`` object, or ``None`` if the body lacks one (for
            example on a 204).

        Raises:
            InvalidResponseCodeError: If the code is not 200, 202 or 204.
        """
        return self._read(
            "get_droplet", self._endpoints.droplet(droplet_id), "droplet", force_update
        )

    def create_droplet(self, params: dict[str, Any]) -> Envelope:
        """Create a droplet.

        The configured droplet defaults are applied first and then
        overridden key by key with *params*.

        Args:
            params: Droplet attributes. Only ``name`` is required.

        Returns:
            The raw :class:`~dolphin.models.Envelope` from the API.

        Raises:
            MissingArgumentError: If ``name`` is absent. Raised before any
                request is made.
            InvalidResponseCodeError: If the code is not 200, 202 or 204.
        """
        if "name" not in params or params["name"] is None:
            raise MissingArgumentError("name")

        body = {**self._droplet_defaults.as_params(), **params}
        endpoint = self._endpoints.droplets
        response = self.post(endpoint, body)
        self._check("create_droplet", endpoint, response)
        return response

    def destroy_droplet(self, droplet_id: Union[int, str]) -> bool:
        """Destroy a droplet.

        Returns:
            ``True`` once the API has accepted the request.

        Raises:
            InvalidResponseCodeError: If the code is not 200, 202 or 204.
        """
        endpoint = self._endpoints.droplet(droplet_id)
        response = self.delete(endpoint)
        self._check("destroy_droplet", endpoint, response)
        return True

    # ------------------------------------------------------------------ #
    # Primitive verbs
    # ------------------------------------------------------------------ #

    def get(
        self,
        endpoint: str,
        custom_headers: Optional[list[str]] = None,
        force_update: ForceUpdateArg = None,
    ) -> Envelope:
        """Make a GET request, serving it from the cache when the policy allows.

        Args:
            endpoint: Full URL, including any query string. Also the cache key.
            custom_headers: Extra ``"Name: value"`` lines sent after the
                default headers.
            force_update: Cache policy for this call; see
                :class:`~dolphin.models.ForceUpdate`. Legacy integers
                ``1`` / ``0`` / ``-1`` are accepted.

        Returns:
            A synthesised 200 envelope on a cache hit, otherwise the
            transport's envelope.
        """
        mode = ForceUpdate.coerce(force_update)

        if mode is not ForceUpdate.BYPASS_CACHE:
            if mode is ForceUpdate.USE_CACHE_IF_PRESENT:
                cached = self._cache.get_cached(endpoint)
            else:
                cached = self._cache.get_cached_unless_expired(endpoint)

            if cached:
                logger.debug("Cache hit (%s): %s", mode.value, endpoint)
                return Envelope(code=200, body=cached)
            logger.debug("Cache miss (%s): %s", mode.value, endpoint)

        response = self._transport.get(endpoint, self._headers(custom_headers))
        self._local.last_response = response

        # Stored whatever the status; expiry is the only thing that clears it.
        self._cache.save(response.body, endpoint)
        return response

    def post(
        self,
        endpoint: str,
        params: dict[str, Any],
        custom_headers: Optional[list[str]] = None,
    ) -> Envelope:
        """Make a POST request with a JSON body. Never touches the cache."""
        response = self._transport.post(endpoint, params, self._headers(custom_headers))
        self._local.last_response = response
        return response

    def delete(
        self,
        endpoint: str,
        custom_headers: Optional[list[str]] = None,
    ) -> Envelope:
        """Make a DELETE request. Never touches the cache."""
        response = self._transport.delete(endpoint, self._headers(custom_headers))
        self._local.last_response = response
        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _read(
        self,
        operation: str,
        endpoint: str,
        key: str,
        force_update: ForceUpdateArg,
    ) -> Any:
        """GET *endpoint*, validate its code for *operation*, and extract *key*."""
        response = self.get(endpoint, force_update=force_update)
        self._check(operation, endpoint, response)
        return extract_key(response, key)

    def _check(self, operation: str, endpoint: str, response: Envelope) -> None:
        if response.code not in ACCEPTED_CODES[operation]:
            raise InvalidResponseCodeError(response.code, endpoint, operation)

    def _default_headers(self) -> list[str]:
        return [
            "Content-type: application/json",
            f"Authorization: Bearer {self._api_token}",
        ]

    def _headers(self, custom_headers: Optional[list[str]]) -> list[str]:
        return self._default_headers() + list(custom_headers or [])
