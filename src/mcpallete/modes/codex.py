# Codex CLI output mode
from pathlib import Path
from typing import Any, cast

import tomli

from mcpallete.modes.base import ServerEntry
from mcpallete.utils.toml_writer import write_toml_simple


class CodexMode:
    """Output for Codex CLI (~/.codex/config.toml).

    ABOUTME: Uses snake_case mcp_servers key (not mcpServers)
    ABOUTME: Written as TOML tables, read back with tomli
    ABOUTME: Empty env tables are omitted
    """

    name = "codex"
    label = "Codex CLI"
    servers_key = "mcp_servers"

    def build(self, servers: dict[str, ServerEntry]) -> dict[str, Any]:
        tables: dict[str, ServerEntry] = {}
        for server_name, server in servers.items():
            entry: ServerEntry = {
                "command": server["command"],
                "args": server["args"],
            }
            if server.get("env"):
                entry["env"] = server["env"]
            tables[server_name] = entry
        return {self.servers_key: tables}

    def read(self, path: Path) -> dict[str, ServerEntry]:
        """Load the mcp_servers table from an existing config.toml.

        ABOUTME: Returns empty dict if config doesn't exist
        ABOUTME: Raises ValueError for invalid TOML
        """
        if not path.exists():
            return {}

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        return cast(dict[str, ServerEntry], data.get(self.servers_key, {}))

    def write(self, path: Path, document: dict[str, Any]) -> None:
        write_toml_simple(document, path)
