# Preset management for mcpallete environments
import logging
from collections.abc import Iterable

from mcpallete.errors import DanglingReferenceError, PresetNotFoundError, UnknownServerError
from mcpallete.models import Config, unique, unknown_servers

logger = logging.getLogger(__name__)


def list_presets(config: Config, env_name: str) -> list[str]:
    """Return preset names of an environment in insertion order."""
    return list(config.get_environment(env_name).presets)


def save_preset(
    config: Config,
    env_name: str,
    name: str,
    servers: Iterable[str] | None = None,
) -> list[str]:
    """Store a named copy of an enable set.

    ABOUTME: Defaults to the environment's current enable set
    ABOUTME: Overwrites an existing preset of the same name
    ABOUTME: Unknown servers are rejected before anything is stored

    Args:
        config: Loaded configuration (mutated in place)
        env_name: Environment owning the preset
        name: Preset name (surrounding whitespace is stripped)
        servers: Servers to store, or None for the current enable set

    Returns:
        The stored server list

    Raises:
        UnknownEnvironmentError: If env_name is not defined
        UnknownServerError: If servers contains an undefined name
        ValueError: If name is empty
    """
    environment = config.get_environment(env_name)

    preset_name = name.strip()
    if not preset_name:
        raise ValueError("Preset name must not be empty")

    members = unique(environment.enable if servers is None else servers)
    missing = unknown_servers(config, members)
    if missing:
        raise UnknownServerError(missing[0])

    if preset_name in environment.presets:
        logger.debug(f"Overwriting preset '{preset_name}' in environment '{env_name}'")
    environment.presets[preset_name] = list(members)
    return list(members)


def apply_preset(config: Config, env_name: str, name: str) -> list[str]:
    """Replace the environment's enable set with a preset.

    ABOUTME: Total replacement, servers outside the preset are disabled
    ABOUTME: Enable set is untouched if the preset is missing or dangling

    Returns:
        The new enable set

    Raises:
        UnknownEnvironmentError: If env_name is not defined
        PresetNotFoundError: If the preset does not exist
        DanglingReferenceError: If the preset names undefined servers
    """
    environment = config.get_environment(env_name)
    if name not in environment.presets:
        raise PresetNotFoundError(env_name, name)

    members = unique(environment.presets[name])
    missing = unknown_servers(config, members)
    if missing:
        raise DanglingReferenceError(env_name, missing, preset=name)

    environment.enable = list(members)
    return list(members)


def delete_preset(config: Config, env_name: str, name: str) -> None:
    """Remove a preset.

    ABOUTME: Does not change the enable set, even if the preset was just applied

    Raises:
        UnknownEnvironmentError: If env_name is not defined
        PresetNotFoundError: If the preset does not exist
    """
    environment = config.get_environment(env_name)
    if name not in environment.presets:
        raise PresetNotFoundError(env_name, name)

    del environment.presets[name]
