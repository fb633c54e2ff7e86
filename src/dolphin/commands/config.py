"""Config commands -- view and modify the global configuration.

Provides the ``dolphin config`` sub-command group for reading, updating,
and resetting the user's configuration file
(:class:`~dolphin.models.GlobalConfig`). The API token itself is never
stored here; only where to find it (``token_source``).
"""

from __future__ import annotations

import json

import typer

from dolphin.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration.

    Example::

        dolphin config show
        dolphin --json config show
    """
    from dolphin.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g. 'droplet.region')."
    ),
    value: str = typer.Argument(
        help="Value to set. Lists take a JSON array, comma-separated items or one item."
    ),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, list or str), and the result is
    validated against :class:`~dolphin.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        dolphin config set droplet.region ams3
        dolphin config set droplet.ssh_keys '[12345]'
        dolphin config set droplet.tags web,prod
        dolphin config set cache.ttl_seconds 300
        dolphin config set token_source env:DIGITALOCEAN_TOKEN
    """
    from dolphin.config import load_global_config, save_global_config
    from dolphin.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    elif isinstance(current, list):
        try:
            coerced = json.loads(value)
        except json.JSONDecodeError:
            coerced = [item.strip() for item in value.split(",") if item.strip()]
        if not isinstance(coerced, list):
            coerced = [coerced]
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults. Asks for confirmation unless ``--force`` is active."""
    from dolphin.config import save_global_config
    from dolphin.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
