# Gemini CLI output mode
from mcpallete.modes.base import JsonMode


class GeminiMode(JsonMode):
    """Output for Gemini CLI (~/.gemini/settings.json).

    ABOUTME: Same mcpServers table as Claude Desktop, empty env omitted
    ABOUTME: Preserves other settings like selectedAuthType, theme
    """

    name = "gemini"
    label = "Gemini CLI"
    keep_empty_env = False
