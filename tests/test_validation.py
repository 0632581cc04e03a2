# Tests for configuration validation
from mcpallete.models import Config, Environment, MCPServer
from mcpallete.validation import server_variables, validate_config


def test_valid_config(config, variables):
    """Test a complete config with all variables set has no issues."""
    assert validate_config(config, variables) == []


def test_unset_variable_warning(config):
    """Test unset variables of enabled servers are warnings."""
    issues = validate_config(config, {"HOME": "/home/user"})

    assert len(issues) == 1
    issue = issues[0]
    assert issue.severity == "warning"
    assert issue.environment == "claudeDesktop"
    assert issue.server_name == "firecrawl-mcp"
    assert "FIRECRAWL_API_KEY" in issue.message


def test_disabled_servers_not_checked(config):
    """Test variables of servers no environment enables are ignored."""
    config.environments["claudeDesktop"].enable = []

    assert validate_config(config, {"HOME": "/home/user"}) == []


def test_dangling_references_are_errors():
    config = Config(
        servers={},
        environments={
            "e": Environment(name="e", config_path="/tmp/x.json", mode="gemini",
                             enable=["ghost"], presets={"p": ["phantom"]}),
        },
    )

    messages = [(i.severity, i.message) for i in validate_config(config, {})]

    assert ("error", "Unknown server 'ghost' in enable list") in messages
    assert ("error", "Unknown server 'phantom' in preset 'p'") in messages


def test_unsupported_mode_is_error(config, variables):
    config.environments["codex"].mode = "vscode"

    issues = validate_config(config, variables)

    assert [i.severity for i in issues] == ["error"]
    assert "vscode" in issues[0].message


def test_missing_mode_warning(config, variables):
    """Test an environment without a mode is a warning, not an error."""
    config.environments["codex"].mode = None

    issues = validate_config(config, variables)

    assert [(i.environment, i.severity) for i in issues] == [("codex", "warning")]
    assert "No mode" in issues[0].message


def test_empty_config_path_warning(config, variables):
    config.environments["codex"].config_path = ""

    issues = validate_config(config, variables)

    assert [(i.environment, i.severity) for i in issues] == [("codex", "warning")]


def test_server_variables():
    server = MCPServer(name="s", command="$BIN", args=["${A}", "$A"], env={"K": "$B"})
    assert server_variables(server.command, server.args, server.env) == ["BIN", "A", "B"]
