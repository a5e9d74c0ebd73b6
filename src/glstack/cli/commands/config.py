from dataclasses import replace

import click

from glstack.cli.output import machine_output, user_output
from glstack.core.context import GlstackContext
from glstack.core.global_config import (
    CONFIG_KEYS,
    GlobalConfig,
    global_config_path,
    save_global_config,
)
from glstack.core.repo_discovery import NoRepoSentinel
from glstack.core.stack.current import CURRENT_STACK_KEY, get_current_stack_title


def _format_value(config: GlobalConfig, key: str) -> str:
    value = getattr(config, key)
    if value is None:
        return ""
    return str(value)


def _parse_positive_int(value: str, field_name: str) -> int:
    if not value.isdigit() or int(value) < 1:
        user_output(f"Invalid value for {field_name}: {value} (expected a positive integer)")
        raise SystemExit(1)
    return int(value)


def _parse_non_negative_float(value: str, field_name: str) -> float:
    try:
        parsed = float(value)
    except ValueError as e:
        user_output(f"Invalid value for {field_name}: {value} (expected a number)")
        raise SystemExit(1) from e
    if parsed < 0:
        user_output(f"Invalid value for {field_name}: {value} (expected a non-negative number)")
        raise SystemExit(1)
    return parsed


def _update_global_config_field(
    current_config: GlobalConfig,
    field_name: str,
    value: str,
) -> GlobalConfig:
    """Update a single field in GlobalConfig and return a new instance.

    Raises:
        SystemExit: If the field name is invalid or value is invalid
    """
    match field_name:
        case "branch_prefix":
            return replace(current_config, branch_prefix=value or None)
        case "remote":
            if not value:
                user_output("Invalid value for remote: must not be empty")
                raise SystemExit(1)
            return replace(current_config, remote=value)
        case "poll_attempts":
            return replace(
                current_config, poll_attempts=_parse_positive_int(value, field_name)
            )
        case "poll_interval":
            return replace(
                current_config, poll_interval=_parse_non_negative_float(value, field_name)
            )
        case _:
            user_output(f"Invalid key: {field_name}")
            raise SystemExit(1)


@click.group("config")
def config_group() -> None:
    """Manage glstack configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: GlstackContext) -> None:
    """Print a list of configuration keys and values."""
    machine_output(click.style("Global configuration:", bold=True))
    machine_output(f"  (from {global_config_path()})")
    for key in CONFIG_KEYS:
        machine_output(f"  {key}={_format_value(ctx.global_config, key)}")

    machine_output(click.style("\nRepository configuration:", bold=True))
    if isinstance(ctx.repo, NoRepoSentinel):
        machine_output("  (not in a git repository)")
        return

    title = get_current_stack_title(ctx.git, ctx.repo.root)
    machine_output(f"  {CURRENT_STACK_KEY}={title or ''}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: GlstackContext, key: str) -> None:
    """Print the value of a given configuration key."""
    if key not in CONFIG_KEYS:
        user_output(f"Invalid key: {key}")
        raise SystemExit(1)
    machine_output(_format_value(ctx.global_config, key))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: GlstackContext, key: str, value: str) -> None:
    """Update configuration with a value for the given key."""
    new_config = _update_global_config_field(ctx.global_config, key, value)
    save_global_config(new_config)
    user_output(f"Set {key}={value}")
