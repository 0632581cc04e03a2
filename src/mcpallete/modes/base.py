# Output mode base utilities
import json
from pathlib import Path
from typing import Any, Protocol, cast, runtime_checkable

from mcpallete.utils.fs import atomic_write_text

# ABOUTME: Rendered server entry, e.g. {"command": "npx", "args": [...], "env": {...}}
ServerEntry = dict[str, Any]


@runtime_checkable
class OutputMode(Protocol):
    """Protocol for environment output formats.

    ABOUTME: One implementation per `mode` tag in the source document
    ABOUTME: Uses @runtime_checkable for isinstance() support
    """

    @property
    def name(self) -> str:
        """Mode tag as written in the source document."""
        ...

    @property
    def label(self) -> str:
        """Human-readable target application name."""
        ...

    @property
    def servers_key(self) -> str:
        """Top-level key holding the server table."""
        ...

    def build(self, servers: dict[str, ServerEntry]) -> dict[str, Any]:
        """Wrap rendered server entries into the output document."""
        ...

    def read(self, path: Path) -> dict[str, ServerEntry]:
        """Return the server table currently stored at path ({} if missing)."""
        ...

    def write(self, path: Path, document: dict[str, Any]) -> None:
        """Write the output document to path atomically."""
        ...


def read_json_file(path: Path) -> dict[str, Any]:
    """Read JSON file with error handling.

    ABOUTME: Returns empty dict if file doesn't exist
    ABOUTME: Raises ValueError for invalid JSON or a non-object top level
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            result = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return cast(dict[str, Any], result)


def write_json_file(path: Path, data: dict[str, Any]) -> None:
    """Write JSON file atomically.

    ABOUTME: 2-space indentation, insertion order kept for stable diffs
    """
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


class JsonMode:
    """Shared behaviour for modes writing a JSON file with an mcpServers table.

    ABOUTME: Preserves other top-level settings already present in the target file
    """

    name = ""
    label = ""
    servers_key = "mcpServers"
    keep_empty_env = True

    def entry(self, server: ServerEntry) -> ServerEntry:
        if self.keep_empty_env or server.get("env"):
            return server
        return {key: value for key, value in server.items() if key != "env"}

    def build(self, servers: dict[str, ServerEntry]) -> dict[str, Any]:
        return {self.servers_key: {name: self.entry(server) for name, server in servers.items()}}

    def read(self, path: Path) -> dict[str, ServerEntry]:
        data = read_json_file(path)
        return cast(dict[str, ServerEntry], data.get(self.servers_key, {}))

    def write(self, path: Path, document: dict[str, Any]) -> None:
        existing = read_json_file(path)
        existing.update(document)
        write_json_file(path, existing)
