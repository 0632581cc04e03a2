# Configuration loading and saving for mcpallete
import json
import os
from pathlib import Path
from typing import Any

from mcpallete.errors import ConfigError, PersistenceError
from mcpallete.models import Config, Environment, MCPServer, ensure_references, unique
from mcpallete.utils.fs import atomic_write_text

# ABOUTME: Directory name under $XDG_CONFIG_HOME (or ~/.config)
APP_NAME = "mcpallete"

# ABOUTME: Source document file name inside the config directory
CONFIG_FILENAME = "basic_config.json"

# ABOUTME: Overrides the full source document path when set
CONFIG_ENV_VAR = "MCPALLETE_CONFIG"

# ABOUTME: Content written by ensure_config() for a fresh install
EMPTY_DOCUMENT: dict[str, Any] = {"mcpServers": {}, "environments": {}}


def get_config_dir() -> Path:
    """Return the mcpallete config directory.

    ABOUTME: $XDG_CONFIG_HOME/mcpallete, falling back to ~/.config/mcpallete
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_NAME


def get_config_path() -> Path:
    """Return the path to the source document.

    ABOUTME: MCPALLETE_CONFIG wins over the XDG location
    ABOUTME: File may not exist yet - use ensure_config() first
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / CONFIG_FILENAME


def ensure_config(path: Path | None = None) -> Path:
    """Create the source document with empty tables if it doesn't exist.

    Returns:
        Path to the source document (guaranteed to exist)
    """
    config_path = path if path is not None else get_config_path()
    if not config_path.exists():
        try:
            atomic_write_text(config_path, json.dumps(EMPTY_DOCUMENT, indent=2) + "\n")
        except OSError as e:
            raise PersistenceError(f"Cannot create config file {config_path}: {e}") from e
    return config_path


def _require_str_list(value: Any, what: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{what} must be a list of strings")
    return list(value)


def _require_str_map(value: Any, what: str) -> dict[str, str]:
    if not isinstance(value, dict) or not all(isinstance(item, str) for item in value.values()):
        raise ConfigError(f"{what} must be an object with string values")
    return dict(value)


def parse_server(name: str, data: Any) -> MCPServer:
    """Build an MCPServer from its mcpServers entry.

    Raises:
        ConfigError: If command is missing or a field has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Server '{name}' must be an object")
    if not isinstance(data.get("command"), str):
        raise ConfigError(f"Server '{name}' missing required 'command' field")

    return MCPServer(
        name=name,
        command=data["command"],
        args=_require_str_list(data.get("args", []), f"Server '{name}' args"),
        env=_require_str_map(data.get("env", {}), f"Server '{name}' env"),
    )


def parse_environment(name: str, data: Any) -> Environment:
    """Build an Environment from its environments entry.

    ABOUTME: enable and preset lists are deduplicated, first occurrence wins

    Raises:
        ConfigError: If configPath is missing or a field has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Environment '{name}' must be an object")
    if not isinstance(data.get("configPath"), str):
        raise ConfigError(f"Environment '{name}' missing required 'configPath' field")

    mode = data.get("mode")
    if mode is not None and not isinstance(mode, str):
        raise ConfigError(f"Environment '{name}' mode must be a string")

    enable = data.get("enable")
    if enable is None:
        enable = []
    presets_data = data.get("preset")
    if presets_data is None:
        presets_data = {}
    if not isinstance(presets_data, dict):
        raise ConfigError(f"Environment '{name}' preset must be an object")

    return Environment(
        name=name,
        config_path=data["configPath"],
        mode=mode,
        enable=unique(_require_str_list(enable, f"Environment '{name}' enable")),
        presets={
            preset_name: unique(
                _require_str_list(members, f"Preset '{preset_name}' of environment '{name}'")
            )
            for preset_name, members in presets_data.items()
        },
    )


def parse_config(data: Any) -> Config:
    """Build and validate a Config from the decoded source document.

    Raises:
        ConfigError: If required sections are missing or malformed
        DanglingReferenceError: If enable or preset lists name unknown servers
    """
    if not isinstance(data, dict):
        raise ConfigError("Config must be a JSON object")
    if "mcpServers" not in data:
        raise ConfigError("Missing required 'mcpServers' section in config")

    servers_data = data["mcpServers"]
    environments_data = data.get("environments")
    if environments_data is None:
        environments_data = {}
    if not isinstance(servers_data, dict):
        raise ConfigError("'mcpServers' must be an object")
    if not isinstance(environments_data, dict):
        raise ConfigError("'environments' must be an object")

    config = Config(
        servers={name: parse_server(name, entry) for name, entry in servers_data.items()},
        environments={
            name: parse_environment(name, entry) for name, entry in environments_data.items()
        },
    )

    ensure_references(config)
    return config


def load_config(path: Path) -> Config:
    """Load and validate the source document.

    ABOUTME: Values are kept raw, $VAR references are expanded only when rendering
    ABOUTME: Fail-fast on parse and reference errors with clear messages

    Args:
        path: Path to basic_config.json

    Returns:
        Parsed Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the JSON is invalid or the structure is wrong
        DanglingReferenceError: If an enable or preset list names an unknown server
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    return parse_config(data)


def config_to_dict(config: Config) -> dict[str, Any]:
    """Convert Config back to the source document layout."""
    servers: dict[str, Any] = {
        name: {
            "command": server.command,
            "args": list(server.args),
            "env": dict(server.env),
        }
        for name, server in config.servers.items()
    }

    environments: dict[str, Any] = {}
    for name, environment in config.environments.items():
        entry: dict[str, Any] = {
            "configPath": environment.config_path,
            "enable": list(environment.enable),
        }
        if environment.presets:
            entry["preset"] = {
                preset_name: list(members)
                for preset_name, members in environment.presets.items()
            }
        if environment.mode is not None:
            entry["mode"] = environment.mode
        environments[name] = entry

    return {"mcpServers": servers, "environments": environments}


def save_config(path: Path, config: Config) -> None:
    """Write the source document atomically.

    Raises:
        PersistenceError: If the file cannot be written
    """
    content = json.dumps(config_to_dict(config), indent=2, ensure_ascii=False) + "\n"
    try:
        atomic_write_text(path, content)
    except OSError as e:
        raise PersistenceError(f"Cannot write config file {path}: {e}") from e
