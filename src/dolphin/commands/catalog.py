"""Catalog commands -- images, regions, sizes and SSH keys.

These are the read-only listings used to pick values for
``dolphin droplet create``. All of them are served from the response
cache while it is fresh.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from dolphin.commands import force_update_from, open_client
from dolphin.output import info, print_records

IMAGE_COLUMNS = [
    ("ID", "id"),
    ("Slug", "slug"),
    ("Distribution", "distribution"),
    ("Name", "name"),
]
REGION_COLUMNS = [
    ("Slug", "slug"),
    ("Name", "name"),
    ("Available", "available"),
]
SIZE_COLUMNS = [
    ("Slug", "slug"),
    ("Memory (MB)", "memory"),
    ("vCPUs", "vcpus"),
    ("Disk (GB)", "disk"),
    ("Price/mo", "price_monthly"),
]
KEY_COLUMNS = [
    ("ID", "id"),
    ("Name", "name"),
    ("Fingerprint", "fingerprint"),
]


def _show(records: Optional[list[dict[str, Any]]], columns, title: str) -> None:
    if not records:
        info(f"No {title.lower()} found.")
        return
    print_records(records, columns, title=title)


def images_command(
    ctx: typer.Context,
    image_type: str = typer.Option(
        "distribution", "--type", "-t", help="Image type: distribution or application."
    ),
) -> None:
    """List available images."""
    with open_client() as client:
        images = client.get_images(force_update=force_update_from(ctx), image_type=image_type)
    _show(images, IMAGE_COLUMNS, "Images")


def regions_command(ctx: typer.Context) -> None:
    """List available regions."""
    with open_client() as client:
        regions = client.get_regions(force_update=force_update_from(ctx))
    _show(regions, REGION_COLUMNS, "Regions")


def sizes_command(ctx: typer.Context) -> None:
    """List available droplet sizes."""
    with open_client() as client:
        sizes = client.get_sizes(force_update=force_update_from(ctx))
    _show(sizes, SIZE_COLUMNS, "Sizes")


def keys_command(ctx: typer.Context) -> None:
    """List the SSH keys registered on the account."""
    with open_client() as client:
        keys = client.get_keys(force_update=force_update_from(ctx))
    _show(keys, KEY_COLUMNS, "SSH keys")
