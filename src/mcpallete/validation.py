# ABOUTME: Validation of a loaded configuration without raising
# ABOUTME: Collects reference, mode and unset-variable problems for the validate command
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from mcpallete.models import Config, check_references
from mcpallete.modes import ALL_MODES
from mcpallete.utils.env import find_env_refs

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationIssue:
    """Represents a validation error or warning.

    ABOUTME: Uses frozen dataclass for immutability
    ABOUTME: Severity level distinguishes between blocking errors and warnings
    """
    environment: str | None
    server_name: str | None
    message: str
    severity: Severity


def validate_config(config: Config, env: Mapping[str, str] | None = None) -> list[ValidationIssue]:
    """Validate references, modes and variables of a configuration.

    ABOUTME: Dangling enable/preset entries and unknown modes are errors
    ABOUTME: Unset variables, missing mode and empty configPath are warnings
    ABOUTME: Commands are never checked for existence

    Args:
        config: Configuration to check
        env: Variable lookup (defaults to os.environ)

    Returns:
        List of ValidationIssue instances (empty if valid)
    """
    lookup = os.environ if env is None else env
    issues: list[ValidationIssue] = []

    for env_name, preset_name, server_name in check_references(config):
        where = f"preset '{preset_name}'" if preset_name else "enable list"
        issues.append(ValidationIssue(
            environment=env_name,
            server_name=server_name,
            message=f"Unknown server '{server_name}' in {where}",
            severity="error",
        ))

    for env_name, environment in config.environments.items():
        if environment.mode is None:
            issues.append(ValidationIssue(
                environment=env_name,
                server_name=None,
                message="No mode set, output will not be written",
                severity="warning",
            ))
        elif environment.mode not in ALL_MODES:
            issues.append(ValidationIssue(
                environment=env_name,
                server_name=None,
                message=f"Unsupported mode '{environment.mode}' (expected one of: {', '.join(ALL_MODES)})",
                severity="error",
            ))

        if not environment.config_path.strip():
            issues.append(ValidationIssue(
                environment=env_name,
                server_name=None,
                message="configPath is empty, output will not be written",
                severity="warning",
            ))

        for server_name in environment.enable:
            server = config.servers.get(server_name)
            if server is None:
                continue
            for var_name in server_variables(server.command, server.args, server.env):
                if var_name not in lookup:
                    issues.append(ValidationIssue(
                        environment=env_name,
                        server_name=server_name,
                        message=f"Environment variable '${var_name}' not set",
                        severity="warning",
                    ))

    return issues


def server_variables(command: str, args: list[str], env: dict[str, str]) -> list[str]:
    """Return variable names referenced anywhere in a server definition."""
    names: list[str] = []
    for value in [command, *args, *env.values()]:
        for name in find_env_refs(value):
            if name not in names:
                names.append(name)
    return names
