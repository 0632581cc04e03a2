# Rendering of environment output documents
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mcpallete.errors import DanglingReferenceError
from mcpallete.models import Config, MCPServer, unique, unknown_servers
from mcpallete.modes import get_mode
from mcpallete.modes.base import ServerEntry
from mcpallete.utils.env import expand_env_vars

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissingVariable:
    """A $VAR reference left unexpanded because the variable is unset.

    ABOUTME: Warning-level record, never aborts a render
    ABOUTME: field is "command", "args[i]" or "env.KEY"
    """
    server_name: str
    field: str
    var_name: str

    @property
    def message(self) -> str:
        return f"Environment variable '{self.var_name}' not set (server '{self.server_name}', {self.field})"


@dataclass
class RenderResult:
    """Output document for one environment plus any expansion warnings."""
    environment: str
    mode: str
    document: dict[str, Any]
    warnings: list[MissingVariable] = field(default_factory=list)


def expand_server(
    server: MCPServer,
    env: Mapping[str, str] | None = None,
    warnings: list[MissingVariable] | None = None,
) -> ServerEntry:
    """Expand every string field of a server.

    ABOUTME: env values are expanded with the global lookup, never the server's own env map
    ABOUTME: Appends one MissingVariable per unresolved reference to warnings

    Returns:
        {"command": ..., "args": [...], "env": {...}} with references expanded
    """

    def expand(value: str, field_path: str) -> str:
        missing: list[str] = []
        result = expand_env_vars(value, env, missing)
        for var_name in missing:
            record = MissingVariable(server.name, field_path, var_name)
            logger.debug(record.message)
            if warnings is not None:
                warnings.append(record)
        return result

    return {
        "command": expand(server.command, "command"),
        "args": [expand(arg, f"args[{i}]") for i, arg in enumerate(server.args)],
        "env": {key: expand(value, f"env.{key}") for key, value in server.env.items()},
    }


def render(config: Config, env_name: str, env: Mapping[str, str] | None = None) -> RenderResult:
    """Render the output document for one environment.

    ABOUTME: Selects enabled servers, expands references, shapes output by mode
    ABOUTME: Servers are emitted sorted by name so repeated renders diff cleanly
    ABOUTME: Pure, the same config and lookup always give the same document

    Args:
        config: Loaded configuration
        env_name: Environment to render
        env: Variable lookup (defaults to os.environ)

    Returns:
        RenderResult with the document and collected MissingVariable warnings

    Raises:
        UnknownEnvironmentError: If env_name is not defined
        UnsupportedModeError: If the environment's mode is unknown or unset
        DanglingReferenceError: If an enabled server is not defined
        InvalidReferenceError: If a value contains an empty ${} reference

    Examples:
        >>> result = render(config, "claudeDesktop", {"FIRECRAWL_API_KEY": "abc123"})
        >>> result.document["mcpServers"]["firecrawl-mcp"]["env"]
        {'FIRECRAWL_API_KEY': 'abc123'}
    """
    environment = config.get_environment(env_name)
    mode = get_mode(environment.mode, env_name)

    selected = unique(environment.enable)
    missing = unknown_servers(config, selected)
    if missing:
        raise DanglingReferenceError(env_name, missing)

    warnings: list[MissingVariable] = []
    servers: dict[str, ServerEntry] = {}
    for server_name in sorted(selected):
        servers[server_name] = expand_server(config.servers[server_name], env, warnings)

    return RenderResult(
        environment=env_name,
        mode=mode.name,
        document=mode.build(servers),
        warnings=warnings,
    )
