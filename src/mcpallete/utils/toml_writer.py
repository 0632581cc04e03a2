# Minimal TOML writer for the codex output mode
import re
from pathlib import Path
from typing import Any

from mcpallete.utils.fs import atomic_write_text

# ABOUTME: TOML bare keys, anything else must be quoted
BARE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# ABOUTME: Control characters TOML basic strings cannot hold literally
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")


def write_toml_simple(data: dict[str, Any], path: Path) -> None:
    """Write the server tables of a rendered codex document.

    ABOUTME: Handles only our subset (command, args, env) under mcp_servers
    ABOUTME: Writes atomically, parent dirs are created as needed

    Args:
        data: Dictionary with mcp_servers key containing server entries
        path: Output file path

    Example output:
        [mcp_servers.filesystem]
        command = "npx"
        args = ["-y", "@modelcontextprotocol/server-filesystem", "/path"]

        [mcp_servers.github]
        command = "npx"
        args = ["-y", "@modelcontextprotocol/server-github"]
        env = { GITHUB_TOKEN = "ghp_xxxx" }
    """
    atomic_write_text(path, dumps_toml_servers(data))


def dumps_toml_servers(data: dict[str, Any]) -> str:
    """Serialize the mcp_servers section to TOML text."""
    lines: list[str] = []

    for server_name, server in data.get("mcp_servers", {}).items():
        lines.append(f"[mcp_servers.{_format_key(server_name)}]")
        lines.append(f"command = {_format_string(server.get('command', ''))}")
        lines.append(f"args = {_format_array(server.get('args', []))}")

        env = server.get("env", {})
        if env:
            lines.append(f"env = {_format_inline_table(env)}")

        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def _format_key(key: str) -> str:
    if BARE_KEY_PATTERN.match(key):
        return key
    return _format_string(key)


def _format_string(value: str) -> str:
    """Quote a TOML basic string, escaping backslashes, quotes and control chars."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )
    escaped = CONTROL_CHAR_PATTERN.sub(lambda m: f"\\u{ord(m.group()):04X}", escaped)
    return f'"{escaped}"'


def _format_array(items: list[str]) -> str:
    return "[" + ", ".join(_format_string(str(item)) for item in items) + "]"


def _format_inline_table(data: dict[str, str]) -> str:
    pairs = [f"{_format_key(key)} = {_format_string(value)}" for key, value in data.items()]
    return "{ " + ", ".join(pairs) + " }"
