"""dolphin -- a caching client and CLI for the DigitalOcean v2 API.

The package wraps the droplet, image, region, size and SSH key endpoints
behind :class:`~dolphin.client.DigitalOcean`, which puts a time-bounded
disk cache in front of every read and raises typed errors when the API
answers with an unexpected status code.

Typical library use::

    from dolphin.cache import FileCache
    from dolphin.client import DigitalOcean
    from dolphin.transport import HttpxTransport

    with HttpxTransport() as transport:
        do = DigitalOcean(token, transport, FileCache(cache_dir))
        for droplet in do.get_droplets() or []:
            print(droplet["name"])

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and token resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    transport: HTTP transport protocol and its httpx implementation.
"""

__version__ = "0.3.0"
