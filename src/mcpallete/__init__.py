# mcpallete - MCP server palette for multiple environments
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and errors
# ABOUTME: Export config, preset, render and save entry points
from mcpallete.config import ensure_config, get_config_path, load_config, save_config
from mcpallete.errors import (
    ConfigError,
    DanglingReferenceError,
    InvalidReferenceError,
    MCPalleteError,
    PersistenceError,
    PresetNotFoundError,
    UnknownEnvironmentError,
    UnknownServerError,
    UnsupportedModeError,
)
from mcpallete.models import Config, Environment, MCPServer, toggle_server
from mcpallete.presets import apply_preset, delete_preset, list_presets, save_preset
from mcpallete.render import MissingVariable, RenderResult, render
from mcpallete.sync import SaveReport, save_all

# ABOUTME: Export utility functions
from mcpallete.utils import expand_env_vars

__all__ = [
    "__version__",
    "Config",
    "Environment",
    "MCPServer",
    "toggle_server",
    "ensure_config",
    "get_config_path",
    "load_config",
    "save_config",
    "save_preset",
    "apply_preset",
    "delete_preset",
    "list_presets",
    "render",
    "RenderResult",
    "MissingVariable",
    "save_all",
    "SaveReport",
    "expand_env_vars",
    "MCPalleteError",
    "ConfigError",
    "DanglingReferenceError",
    "InvalidReferenceError",
    "PersistenceError",
    "PresetNotFoundError",
    "UnknownEnvironmentError",
    "UnknownServerError",
    "UnsupportedModeError",
]
