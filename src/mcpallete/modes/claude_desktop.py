# Claude Desktop output mode
from mcpallete.modes.base import JsonMode


class ClaudeDesktopMode(JsonMode):
    """Output for Claude Desktop (claude_desktop_config.json).

    ABOUTME: Writes {"mcpServers": {name: {command, args, env}}}
    ABOUTME: env is always written, even when empty
    ABOUTME: Other settings in the file (e.g. globalShortcut) are kept
    """

    name = "claude_desktop"
    label = "Claude Desktop"
    keep_empty_env = True
