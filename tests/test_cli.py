# ABOUTME: Tests for CLI commands
# ABOUTME: main() is called in-process with --config pointing at tmp_path
import json
from pathlib import Path

import pytest

from mcpallete.cli import EXIT_CONFIG_ERROR, EXIT_PARTIAL, EXIT_SUCCESS, main
from mcpallete.errors import PersistenceError


@pytest.fixture(autouse=True)
def api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIRECRAWL_API_KEY", "abc123")


def test_init_creates_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "new" / "basic_config.json"

    assert main(["--config", str(path), "init"]) == EXIT_SUCCESS

    assert json.loads(path.read_text())["mcpServers"] == {}
    assert "Created" in capsys.readouterr().out


def test_init_existing(config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-c", str(config_file), "init"]) == EXIT_SUCCESS
    assert "already exists" in capsys.readouterr().out


def test_init_uses_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test MCPALLETE_CONFIG is used when --config is absent."""
    path = tmp_path / "from_env.json"
    monkeypatch.setenv("MCPALLETE_CONFIG", str(path))

    assert main(["init"]) == EXIT_SUCCESS
    assert path.exists()


def test_list(config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-c", str(config_file), "list"]) == EXIT_SUCCESS

    out = capsys.readouterr().out
    assert "firecrawl-mcp" in out
    assert "claudeDesktop (claude_desktop)" in out
    assert "[x] firecrawl-mcp" in out
    assert "Total: 2 server(s), 2 environment(s)" in out


def test_missing_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test missing config is a config error with a hint."""
    assert main(["-c", str(tmp_path / "missing.json"), "list"]) == EXIT_CONFIG_ERROR
    assert "mcpallete init" in capsys.readouterr().out


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{")

    assert main(["-c", str(path), "list"]) == EXIT_CONFIG_ERROR


class TestValidate:
    """Tests for the validate command."""

    def test_valid(self, config_file: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        monkeypatch.setenv("HOME", "/home/user")

        assert main(["-c", str(config_file), "validate"]) == EXIT_SUCCESS
        assert "0 error(s), 0 warning(s)" in capsys.readouterr().out

    def test_unsupported_mode(self, config_file: Path, capsys) -> None:
        data = json.loads(config_file.read_text())
        data["environments"]["codex"]["mode"] = "vscode"
        config_file.write_text(json.dumps(data))

        assert main(["-c", str(config_file), "validate"]) == EXIT_CONFIG_ERROR
        assert "vscode" in capsys.readouterr().out


class TestToggle:
    """Tests for the toggle command."""

    def test_toggle_persists_source(self, config_file: Path, capsys) -> None:
        assert main(["-c", str(config_file), "toggle", "codex", "firecrawl-mcp"]) == EXIT_SUCCESS

        data = json.loads(config_file.read_text())
        assert data["environments"]["codex"]["enable"] == ["filesystem", "firecrawl-mcp"]
        assert "enabled in 'codex'" in capsys.readouterr().out

    def test_unknown_server(self, config_file: Path, capsys) -> None:
        before = config_file.read_text()

        assert main(["-c", str(config_file), "toggle", "codex", "ghost"]) == EXIT_CONFIG_ERROR

        assert config_file.read_text() == before
        assert "ghost" in capsys.readouterr().out


class TestPreset:
    """Tests for the preset commands."""

    def test_list(self, config_file: Path, capsys) -> None:
        assert main(["-c", str(config_file), "preset", "list", "claudeDesktop"]) == EXIT_SUCCESS
        assert "research: firecrawl-mcp, filesystem" in capsys.readouterr().out

    def test_list_empty(self, config_file: Path, capsys) -> None:
        assert main(["-c", str(config_file), "preset", "list", "codex"]) == EXIT_SUCCESS
        assert "No presets in 'codex'." in capsys.readouterr().out

    def test_save_apply_delete(self, config_file: Path) -> None:
        """Test a preset lifecycle through the CLI."""
        path = str(config_file)

        assert main(["-c", path, "preset", "save", "codex", "both", "--servers", "filesystem,firecrawl-mcp"]) == EXIT_SUCCESS
        assert main(["-c", path, "toggle", "codex", "filesystem"]) == EXIT_SUCCESS
        assert main(["-c", path, "preset", "apply", "codex", "both"]) == EXIT_SUCCESS

        data = json.loads(config_file.read_text())
        assert data["environments"]["codex"]["enable"] == ["filesystem", "firecrawl-mcp"]

        assert main(["-c", path, "preset", "delete", "codex", "both"]) == EXIT_SUCCESS
        data = json.loads(config_file.read_text())
        assert "preset" not in data["environments"]["codex"]
        assert data["environments"]["codex"]["enable"] == ["filesystem", "firecrawl-mcp"]

    def test_apply_missing(self, config_file: Path) -> None:
        assert main(["-c", str(config_file), "preset", "apply", "codex", "nope"]) == EXIT_CONFIG_ERROR


def test_render(config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-c", str(config_file), "render", "claudeDesktop"]) == EXIT_SUCCESS

    document = json.loads(capsys.readouterr().out)
    assert document["mcpServers"]["firecrawl-mcp"]["env"]["FIRECRAWL_API_KEY"] == "abc123"


def test_render_warning_on_stderr(config_file: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.delenv("FIRECRAWL_API_KEY")

    assert main(["-c", str(config_file), "render", "claudeDesktop"]) == EXIT_SUCCESS

    captured = capsys.readouterr()
    assert "FIRECRAWL_API_KEY" in captured.err
    json.loads(captured.out)


class TestSave:
    """Tests for the save command."""

    def test_save(self, tmp_path: Path, config_file: Path, capsys) -> None:
        assert main(["-c", str(config_file), "save"]) == EXIT_SUCCESS

        assert (tmp_path / "claude" / "claude_desktop_config.json").exists()
        assert "2/2 environments written" in capsys.readouterr().out

    def test_sync_alias(self, tmp_path: Path, config_file: Path) -> None:
        assert main(["-c", str(config_file), "sync"]) == EXIT_SUCCESS
        assert (tmp_path / "codex" / "config.toml").exists()

    def test_partial(self, tmp_path: Path, config_file: Path, capsys) -> None:
        """Test a failed environment gives the partial exit code."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        data = json.loads(config_file.read_text())
        data["environments"]["codex"]["configPath"] = str(blocker / "config.toml")
        config_file.write_text(json.dumps(data))

        assert main(["-c", str(config_file), "save"]) == EXIT_PARTIAL
        assert "1 failed" in capsys.readouterr().out

    def test_source_not_saved(self, tmp_path: Path, config_file: Path, monkeypatch, capsys) -> None:
        """Test a source write failure still writes environments and exits partial."""
        def fail(path, config):
            raise PersistenceError(f"Cannot write config file {path}: read-only")

        monkeypatch.setattr("mcpallete.sync.save_config", fail)

        assert main(["-c", str(config_file), "save"]) == EXIT_PARTIAL

        out = capsys.readouterr().out
        assert "source config - Cannot write config file" in out
        assert "2/2 environments written" in out
        assert (tmp_path / "claude" / "claude_desktop_config.json").exists()

    def test_missing_mode_skipped(self, config_file: Path, capsys) -> None:
        data = json.loads(config_file.read_text())
        del data["environments"]["codex"]["mode"]
        config_file.write_text(json.dumps(data))

        assert main(["-c", str(config_file), "save"]) == EXIT_SUCCESS
        assert "codex - skipped" in capsys.readouterr().out


def test_status(config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test status before and after a save."""
    assert main(["-c", str(config_file), "status"]) == EXIT_SUCCESS
    assert "out of date" in capsys.readouterr().out

    main(["-c", str(config_file), "save"])
    capsys.readouterr()

    assert main(["-c", str(config_file), "status"]) == EXIT_SUCCESS
    assert "out of date" not in capsys.readouterr().out

