# Tests for the Gemini CLI output mode
import json
from pathlib import Path

from mcpallete.modes import GeminiMode


def test_build_omits_empty_env():
    """Test that an empty env object is dropped."""
    document = GeminiMode().build({
        "a": {"command": "echo", "args": [], "env": {}},
        "b": {"command": "echo", "args": [], "env": {"K": "v"}},
    })

    assert document["mcpServers"]["a"] == {"command": "echo", "args": []}
    assert document["mcpServers"]["b"]["env"] == {"K": "v"}


def test_write_preserves_settings(tmp_path: Path):
    """Test that selectedAuthType and theme are kept."""
    path = tmp_path / ".gemini" / "settings.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"selectedAuthType": "oauth-personal", "theme": "Default"}))
    mode = GeminiMode()

    mode.write(path, mode.build({"a": {"command": "echo", "args": ["hi"], "env": {}}}))

    data = json.loads(path.read_text())
    assert data["selectedAuthType"] == "oauth-personal"
    assert data["theme"] == "Default"
    assert mode.read(path) == {"a": {"command": "echo", "args": ["hi"]}}
