# Exception types raised by the mcpallete engine


class MCPalleteError(Exception):
    """Base class for all engine errors.

    ABOUTME: Callers catch this to show any engine failure to the user
    """


class UnknownServerError(MCPalleteError, KeyError):
    """Server name is not defined in mcpServers."""

    def __init__(self, server_name: str) -> None:
        super().__init__(f"Unknown server '{server_name}'")
        self.server_name = server_name

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownEnvironmentError(MCPalleteError, KeyError):
    """Environment name is not defined in environments."""

    def __init__(self, environment: str) -> None:
        super().__init__(f"Unknown environment '{environment}'")
        self.environment = environment

    def __str__(self) -> str:
        return str(self.args[0])


class PresetNotFoundError(MCPalleteError, KeyError):
    """Preset name is not defined for the environment."""

    def __init__(self, environment: str, preset: str) -> None:
        super().__init__(f"Preset '{preset}' not found in environment '{environment}'")
        self.environment = environment
        self.preset = preset

    def __str__(self) -> str:
        return str(self.args[0])


class DanglingReferenceError(MCPalleteError, ValueError):
    """An enable list or preset references servers that do not exist.

    ABOUTME: Raised at load time and re-checked by the renderer
    """

    def __init__(self, environment: str, server_names: list[str], preset: str | None = None) -> None:
        names = ", ".join(server_names)
        where = f"preset '{preset}' of environment '{environment}'" if preset else f"environment '{environment}'"
        super().__init__(f"{where} references unknown server(s): {names}")
        self.environment = environment
        self.server_names = server_names
        self.preset = preset


class UnsupportedModeError(MCPalleteError, ValueError):
    """Environment mode has no registered output format."""

    def __init__(self, mode: str | None, environment: str | None = None) -> None:
        if mode is None:
            message = "No mode configured"
        else:
            message = f"Unsupported mode '{mode}'"
        if environment:
            message += f" for environment '{environment}'"
        super().__init__(message)
        self.mode = mode
        self.environment = environment


class InvalidReferenceError(MCPalleteError, ValueError):
    """Malformed expansion token such as ``${}``."""


class ConfigError(MCPalleteError, ValueError):
    """Source document is malformed."""


class PersistenceError(MCPalleteError, OSError):
    """Reading or writing a file failed."""
