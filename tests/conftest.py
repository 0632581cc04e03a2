# ABOUTME: Shared fixtures for mcpallete tests
# ABOUTME: Every config lives under tmp_path, the real home directory is never touched
import json
from pathlib import Path
from typing import Any

import pytest

from mcpallete.config import parse_config
from mcpallete.models import Config


def make_document(tmp_path: Path) -> dict[str, Any]:
    """Source document with two servers and two environments."""
    return {
        "mcpServers": {
            "firecrawl-mcp": {
                "command": "npx",
                "args": ["-y", "firecrawl-mcp"],
                "env": {"FIRECRAWL_API_KEY": "$FIRECRAWL_API_KEY"},
            },
            "filesystem": {
                "command": "npx",
                "args": ["-y", "@modelcontextprotocol/server-filesystem", "${HOME}/projects"],
                "env": {},
            },
        },
        "environments": {
            "claudeDesktop": {
                "configPath": str(tmp_path / "claude" / "claude_desktop_config.json"),
                "enable": ["firecrawl-mcp"],
                "preset": {"research": ["firecrawl-mcp", "filesystem"]},
                "mode": "claude_desktop",
            },
            "codex": {
                "configPath": str(tmp_path / "codex" / "config.toml"),
                "enable": ["filesystem"],
                "mode": "codex",
            },
        },
    }


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point config lookups at tmp_path for every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("MCPALLETE_CONFIG", raising=False)


@pytest.fixture
def document(tmp_path: Path) -> dict[str, Any]:
    return make_document(tmp_path)


@pytest.fixture
def config(document: dict[str, Any]) -> Config:
    return parse_config(document)


@pytest.fixture
def config_file(tmp_path: Path, document: dict[str, Any]) -> Path:
    path = tmp_path / "basic_config.json"
    path.write_text(json.dumps(document, indent=2))
    return path


@pytest.fixture
def variables() -> dict[str, str]:
    """Variable lookup injected instead of os.environ."""
    return {"FIRECRAWL_API_KEY": "abc123", "HOME": "/home/user"}
