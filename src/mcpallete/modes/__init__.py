# Output mode registry
from mcpallete.errors import UnsupportedModeError
from mcpallete.modes.base import OutputMode
from mcpallete.modes.claude_desktop import ClaudeDesktopMode
from mcpallete.modes.codex import CodexMode
from mcpallete.modes.gemini import GeminiMode

# Registry of all output modes, keyed by the `mode` tag used in environments
ALL_MODES: dict[str, type[OutputMode]] = {
    ClaudeDesktopMode.name: ClaudeDesktopMode,
    GeminiMode.name: GeminiMode,
    CodexMode.name: CodexMode,
}

__all__ = [
    "OutputMode",
    "ClaudeDesktopMode",
    "GeminiMode",
    "CodexMode",
    "ALL_MODES",
    "get_mode",
]


def get_mode(name: str | None, environment: str | None = None) -> OutputMode:
    """Instantiate the output mode registered under name.

    ABOUTME: Unknown or missing modes fail instead of falling back to a default

    Raises:
        UnsupportedModeError: If no mode is registered under name
    """
    if name is None or name not in ALL_MODES:
        raise UnsupportedModeError(name, environment)
    return ALL_MODES[name]()
