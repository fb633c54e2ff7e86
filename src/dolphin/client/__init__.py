"""DigitalOcean API client.

:class:`DigitalOcean` wraps a :class:`~dolphin.transport.Transport` and a
:class:`~dolphin.cache.Cache` behind resource methods for droplets,
images, regions, sizes and SSH keys. Reads go through a cache policy
selected per call with :class:`~dolphin.models.ForceUpdate`.

Example::

    from dolphin.client import DigitalOcean

    do = DigitalOcean(token, transport, cache)
    droplets = do.get_droplets(force_update=ForceUpdate.BYPASS_CACHE)
"""

from dolphin.client.api import ACCEPTED_CODES, DigitalOcean

__all__ = ["ACCEPTED_CODES", "DigitalOcean"]
