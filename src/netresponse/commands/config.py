"""Config commands -- view and modify the global configuration.

Provides the ``netresponse config`` sub-command group.  Settings are
persisted as :class:`~netresponse.models.GlobalConfig` JSON and supply the
defaults for ``fetch`` (cache strategy and windows, retry policy, request
timeout, output format).
"""

from __future__ import annotations

from typing import Any

import typer

from netresponse.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _coerce(current: Any, value: str, key: str) -> Any:
    """Convert *value* to the type of the existing setting at *key*."""
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    try:
        if isinstance(current, int):
            return int(value)
        if isinstance(current, float):
            return float(value)
    except ValueError:
        error(f"Expected {type(current).__name__} for {key}, got: {value}")
        raise typer.Exit(code=2) from None
    return value


@config_app.command("show")
def config_show() -> None:
    """Show the stored configuration.

    Example::

        netresponse config show --json
    """
    from netresponse.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key in dot notation, e.g. 'cache.strategy'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the existing field's type and the result is
    validated before it is saved.

    Example::

        netresponse config set cache.strategy cache_first
        netresponse config set retry.max_attempts 5
        netresponse config set retry.factor 1.5
    """
    from netresponse.config import load_global_config, save_global_config
    from netresponse.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced = _coerce(target[final_key], value, key)
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
    """Restore default settings.  Asks for confirmation unless ``--force``."""
    from netresponse.config import reset_global_config

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    reset_global_config()
    success("Configuration reset to defaults.")
