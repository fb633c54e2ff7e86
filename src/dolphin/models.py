"""Canonical Pydantic models shared across all dolphin modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Wire models** -- produced and consumed by the API client:
    :class:`Envelope`, :class:`ForceUpdate`, and :class:`Endpoints`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`DropletDefaults`, :class:`RequestConfig`, :class:`CacheConfig`,
    :class:`OutputConfig`, and :class:`GlobalConfig`.

All models use Pydantic v2. Wire models are frozen so that a response handed
to one caller can never be mutated underneath another.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "https://api.digitalocean.com/v2"


# --- Wire models ---


class Envelope(BaseModel):
    """Uniform result of any HTTP call made through a transport.

    ``code`` is the literal HTTP status and ``body`` the raw, undecoded
    payload. Decoding is left to the resource methods of
    :class:`~dolphin.client.DigitalOcean`.

    Example::

        Envelope(code=200, body='{"droplets": []}')
    """

    model_config = ConfigDict(frozen=True)

    code: int
    body: str = ""


class ForceUpdate(str, enum.Enum):
    """Cache policy applied to a single read.

    ``USE_CACHE_IF_FRESH`` is the default: a cached body is used only while
    it is unexpired. ``USE_CACHE_IF_PRESENT`` serves any cached body even
    after expiry and only goes to the network on a miss. ``BYPASS_CACHE``
    never reads the cache but still overwrites it with the fresh body.
    """

    BYPASS_CACHE = "bypass"
    USE_CACHE_IF_FRESH = "if_fresh"
    USE_CACHE_IF_PRESENT = "if_present"

    @classmethod
    def coerce(cls, value: Union[ForceUpdate, int, str, None]) -> ForceUpdate:
        """Map a member or a legacy integer flag onto a member.

        The legacy flag is ``1`` (or anything greater) to bypass the cache,
        ``-1`` to use any cached entry, and anything else to use the cache
        only while fresh.

        Args:
            value: A :class:`ForceUpdate` member or its value, a legacy integer, or
                ``None`` for the default policy.

        Returns:
            The corresponding :class:`ForceUpdate` member.
        """
        if isinstance(value, ForceUpdate):
            return value
        if value is None:
            return cls.USE_CACHE_IF_FRESH
        if isinstance(value, str):
            return cls(value)
        if value >= 1:
            return cls.BYPASS_CACHE
        if value == -1:
            return cls.USE_CACHE_IF_PRESENT
        return cls.USE_CACHE_IF_FRESH


class Endpoints(BaseModel):
    """Immutable set of API endpoint URLs derived from a single base URL.

    Injected into the client at construction so that tests and staging
    setups can point at another host without touching module state.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_API_URL

    @property
    def root(self) -> str:
        """Base URL without a trailing slash."""
        return self.base_url.rstrip("/")

    @property
    def droplets(self) -> str:
        return f"{self.root}/droplets"

    @property
    def images(self) -> str:
        return f"{self.root}/images"

    @property
    def regions(self) -> str:
        return f"{self.root}/regions"

    @property
    def sizes(self) -> str:
        return f"{self.root}/sizes"

    @property
    def keys(self) -> str:
        return f"{self.root}/account/keys"

    def droplet(self, droplet_id: Union[int, str]) -> str:
        """URL of a single droplet."""
        return f"{self.droplets}/{droplet_id}"


# --- Configuration models ---


class DropletDefaults(BaseModel):
    """Default droplet-creation parameters stored in :class:`GlobalConfig`.

    Merged beneath the caller's parameters by
    :meth:`~dolphin.client.DigitalOcean.create_droplet`; the caller's
    values always win.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    region: Optional[str] = Field(default=None, description="Region slug, e.g. nyc3")
    size: Optional[str] = Field(default=None, description="Size slug, e.g. s-1vcpu-1gb")
    image: Optional[str] = Field(
        default=None, description="Image slug or id, e.g. ubuntu-24-04-x64"
    )
    tags: list[str] = Field(default_factory=list)
    ssh_keys: list[Union[int, str]] = Field(
        default_factory=list, description="SSH key ids or fingerprints"
    )

    def as_params(self) -> dict[str, Any]:
        """Return the configured defaults, omitting unset slugs."""
        return self.model_dump(mode="json", exclude_none=True)


class RequestConfig(BaseModel):
    """HTTP settings handed to :class:`~dolphin.transport.HttpxTransport`."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """Response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable response caching")
    ttl_seconds: int = Field(default=600, description="Cache TTL in seconds")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/dolphin/config.json``.

    Loaded and saved by :func:`~dolphin.config.load_global_config` and
    :func:`~dolphin.config.save_global_config`. See
    :func:`~dolphin.config.resolve_config` for how environment variables
    override the stored values.
    """

    api_url: str = DEFAULT_API_URL
    token_source: Optional[str] = Field(
        default=None,
        description="Token source: env:VAR, file:/path, prompt, token:VALUE",
    )
    droplet: DropletDefaults = Field(default_factory=DropletDefaults)
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
