"""Droplet commands -- list, inspect, create and destroy droplets.

Provides the ``dolphin droplet`` sub-command group. Listing and inspecting
go through the response cache; creating and destroying always reach the
API and leave the cache untouched, so follow them with
``dolphin --force-update droplet list`` to see the change immediately.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from dolphin.client.response import extract_key
from dolphin.commands import force_update_from, open_client
from dolphin.output import format_response, info, print_records, success, warning

droplet_app = typer.Typer(no_args_is_help=True)

DROPLET_COLUMNS = [
    ("ID", "id"),
    ("Name", "name"),
    ("Status", "status"),
    ("Region", "region.slug"),
    ("Size", "size_slug"),
    ("Public IPv4", "networks.v4.0.ip_address"),
    ("Tags", "tags"),
]


@droplet_app.command("list")
def droplet_list(ctx: typer.Context) -> None:
    """List all droplets on the account.

    Example::

        dolphin droplet list
        dolphin --force-update droplet list --json
    """
    with open_client() as client:
        droplets = client.get_droplets(force_update=force_update_from(ctx))

    if not droplets:
        info("No droplets found.")
        return
    print_records(droplets, DROPLET_COLUMNS, title="Droplets")


@droplet_app.command("info")
def droplet_info(
    ctx: typer.Context,
    droplet_id: str = typer.Argument(help="Droplet ID."),
) -> None:
    """Show everything the API reports about one droplet."""
    with open_client() as client:
        droplet = client.get_droplet(droplet_id, force_update=force_update_from(ctx))

    if droplet is None:
        warning(f"No data returned for droplet {droplet_id}.")
        return
    format_response(droplet)


@droplet_app.command("create")
def droplet_create(
    name: str = typer.Argument(help="Name of the new droplet."),
    region: Optional[str] = typer.Option(None, "--region", help="Region slug."),
    size: Optional[str] = typer.Option(None, "--size", help="Size slug."),
    image: Optional[str] = typer.Option(None, "--image", help="Image slug or ID."),
    tags: Optional[list[str]] = typer.Option(
        None, "--tag", help="Tag to apply. Repeat for several."
    ),
    ssh_keys: Optional[list[str]] = typer.Option(
        None, "--ssh-key", help="SSH key ID or fingerprint. Repeat for several."
    ),
) -> None:
    """Create a droplet.

    Options left out fall back to the ``droplet`` defaults in the config
    file.

    Example::

        dolphin droplet create web-1
        dolphin droplet create web-2 --region ams3 --tag web --tag prod
        dolphin droplet create web-3 --ssh-key 12345 --ssh-key aa:bb:cc
    """
    params: dict[str, Any] = {"name": name}
    if region:
        params["region"] = region
    if size:
        params["size"] = size
    if image:
        params["image"] = image
    if tags:
        params["tags"] = tags
    if ssh_keys:
        params["ssh_keys"] = [int(key) if key.isdigit() else key for key in ssh_keys]

    with open_client() as client:
        response = client.create_droplet(params)

    droplet = extract_key(response, "droplet")
    if droplet is None:
        success(f"Droplet '{name}' requested.")
        return
    success(f"Droplet '{name}' requested (id {droplet.get('id')}).")
    format_response(droplet)


@droplet_app.command("destroy")
def droplet_destroy(
    ctx: typer.Context,
    droplet_id: str = typer.Argument(help="Droplet ID."),
) -> None:
    """Destroy a droplet. Asks for confirmation unless ``--force`` is active."""
    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm(f"Destroy droplet {droplet_id}?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    with open_client() as client:
        client.destroy_droplet(droplet_id)
    success(f"Droplet {droplet_id} destroyed.")
