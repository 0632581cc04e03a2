# Core data models for mcpallete
from collections.abc import Iterable
from dataclasses import dataclass, field

from mcpallete.errors import (
    DanglingReferenceError,
    UnknownEnvironmentError,
    UnknownServerError,
)


@dataclass(frozen=True)
class MCPServer:
    """Immutable MCP server definition.

    ABOUTME: Uses frozen dataclass to prevent accidental mutation
    ABOUTME: Values are stored raw, $VAR references are expanded only when rendering
    """
    name: str
    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)


@dataclass
class Environment:
    """A deployment target with its own enabled servers and presets.

    ABOUTME: enable and preset lists behave as sets, order is kept only for stable output
    ABOUTME: mode selects the output document shape (see mcpallete.modes)
    """
    name: str
    config_path: str
    mode: str | None = None
    enable: list[str] = field(default_factory=list)
    presets: dict[str, list[str]] = field(default_factory=dict)

    def is_enabled(self, server_name: str) -> bool:
        return server_name in self.enable


@dataclass
class Config:
    """mcpallete source document loaded from basic_config.json.

    ABOUTME: Servers and environments are keyed by name for easy lookup
    """
    servers: dict[str, MCPServer] = field(default_factory=dict)
    environments: dict[str, Environment] = field(default_factory=dict)

    def get_environment(self, name: str) -> Environment:
        """Return the named environment or raise UnknownEnvironmentError."""
        try:
            return self.environments[name]
        except KeyError:
            raise UnknownEnvironmentError(name) from None

    def get_server(self, name: str) -> MCPServer:
        """Return the named server or raise UnknownServerError."""
        try:
            return self.servers[name]
        except KeyError:
            raise UnknownServerError(name) from None


def unique(names: Iterable[str]) -> list[str]:
    """Drop duplicate names, keeping first-seen order."""
    return list(dict.fromkeys(names))


def unknown_servers(config: Config, names: Iterable[str]) -> list[str]:
    """Return the names that are not defined in config.servers."""
    return [name for name in unique(names) if name not in config.servers]


def check_references(config: Config) -> list[tuple[str, str | None, str]]:
    """Find enable/preset entries pointing at undefined servers.

    ABOUTME: Returns (environment, preset or None, server) triples
    ABOUTME: Empty list means the reference invariant holds
    """
    dangling: list[tuple[str, str | None, str]] = []
    for env_name, environment in config.environments.items():
        for server_name in unknown_servers(config, environment.enable):
            dangling.append((env_name, None, server_name))
        for preset_name, members in environment.presets.items():
            for server_name in unknown_servers(config, members):
                dangling.append((env_name, preset_name, server_name))
    return dangling


def ensure_references(config: Config) -> None:
    """Raise DanglingReferenceError for the first environment with bad references."""
    for env_name, environment in config.environments.items():
        missing = unknown_servers(config, environment.enable)
        if missing:
            raise DanglingReferenceError(env_name, missing)
        for preset_name, members in environment.presets.items():
            missing = unknown_servers(config, members)
            if missing:
                raise DanglingReferenceError(env_name, missing, preset=preset_name)


def toggle_server(config: Config, env_name: str, server_name: str) -> bool:
    """Flip a server's membership in an environment's enable set.

    ABOUTME: Applying it twice restores the original enable set
    ABOUTME: Model is untouched when the environment or server is unknown

    Args:
        config: Loaded configuration (mutated in place)
        env_name: Environment to change
        server_name: Server to enable or disable

    Returns:
        True if the server is now enabled, False if it was disabled

    Raises:
        UnknownEnvironmentError: If env_name is not defined
        UnknownServerError: If server_name is not defined
    """
    environment = config.get_environment(env_name)
    config.get_server(server_name)

    if server_name in environment.enable:
        environment.enable = [name for name in environment.enable if name != server_name]
        return False

    environment.enable = [*environment.enable, server_name]
    return True


def set_enabled(config: Config, env_name: str, server_names: Iterable[str]) -> list[str]:
    """Replace an environment's enable set wholesale.

    Raises:
        UnknownEnvironmentError: If env_name is not defined
        UnknownServerError: If any name is not defined (nothing is changed)
    """
    environment = config.get_environment(env_name)
    names = unique(server_names)
    missing = unknown_servers(config, names)
    if missing:
        raise UnknownServerError(missing[0])

    environment.enable = names
    return list(names)
