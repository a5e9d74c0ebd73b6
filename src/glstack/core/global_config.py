"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.glstack/config.toml
(or the file named by $GLSTACK_CONFIG). Loaded eagerly at the CLI entry point.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomlkit

DEFAULT_REMOTE = "origin"
CONFIG_ENV_VAR = "GLSTACK_CONFIG"

CONFIG_KEYS = ("branch_prefix", "remote", "poll_attempts", "poll_interval")


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in GlstackContext.
    All fields are read-only after construction.
    """

    branch_prefix: str | None
    remote: str
    poll_attempts: int
    poll_interval: float

    @staticmethod
    def default() -> "GlobalConfig":
        return GlobalConfig(
            branch_prefix=None,
            remote=DEFAULT_REMOTE,
            poll_attempts=5,
            poll_interval=1.0,
        )


def global_config_path() -> Path:
    """Get the path to the global config file.

    Returns:
        Path to config file (for error messages and debugging)
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".glstack" / "config.toml"


def _int_field(data: dict, key: str, default: int, config_path: Path) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"'{key}' in {config_path} must be a positive integer")
    return value


def _float_field(data: dict, key: str, default: float, config_path: Path) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int | float) or value < 0:
        raise ValueError(f"'{key}' in {config_path} must be a non-negative number")
    return float(value)


def load_global_config(path: Path | None = None) -> GlobalConfig:
    """Load global config, falling back to defaults when the file is absent.

    Args:
        path: Config file path (defaults to global_config_path())

    Returns:
        GlobalConfig instance with loaded values

    Raises:
        ValueError: If a value is malformed
    """
    config_path = path if path is not None else global_config_path()
    defaults = GlobalConfig.default()

    if not config_path.exists():
        return defaults

    data = tomllib.loads(config_path.read_text(encoding="utf-8"))

    branch_prefix = data.get("branch_prefix")
    if branch_prefix is not None and not isinstance(branch_prefix, str):
        raise ValueError(f"'branch_prefix' in {config_path} must be a string")

    remote = data.get("remote", defaults.remote)
    if not isinstance(remote, str) or not remote:
        raise ValueError(f"'remote' in {config_path} must be a non-empty string")

    return GlobalConfig(
        branch_prefix=branch_prefix or None,
        remote=remote,
        poll_attempts=_int_field(data, "poll_attempts", defaults.poll_attempts, config_path),
        poll_interval=_float_field(data, "poll_interval", defaults.poll_interval, config_path),
    )


def save_global_config(config: GlobalConfig, path: Path | None = None) -> None:
    """Save global config, preserving comments and layout of an existing file.

    Args:
        config: GlobalConfig instance to save
        path: Config file path (defaults to global_config_path())
    """
    config_path = path if path is not None else global_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()
        doc.add(tomlkit.comment("Global glstack configuration"))

    if config.branch_prefix is not None:
        doc["branch_prefix"] = config.branch_prefix
    elif "branch_prefix" in doc:
        del doc["branch_prefix"]
    doc["remote"] = config.remote
    doc["poll_attempts"] = config.poll_attempts
    doc["poll_interval"] = config.poll_interval

    with config_path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)
