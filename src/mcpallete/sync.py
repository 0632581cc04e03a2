# Save orchestration for mcpallete
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from mcpallete.config import save_config
from mcpallete.errors import ConfigError, MCPalleteError, PersistenceError
from mcpallete.models import Config
from mcpallete.modes import get_mode
from mcpallete.render import MissingVariable, render
from mcpallete.utils.backup import create_backup, get_backup_dir

logger = logging.getLogger(__name__)

ResultStatus = Literal["written", "skipped", "failed"]


@dataclass
class EnvironmentResult:
    """Outcome of writing one environment's output file.

    ABOUTME: One failed environment never blocks the others
    """
    environment: str
    path: Path | None
    status: ResultStatus
    server_count: int = 0
    warnings: list[MissingVariable] = field(default_factory=list)
    error: str | None = None


@dataclass
class SaveReport:
    """Report from a full save.

    ABOUTME: Per-environment results instead of an all-or-nothing flag
    ABOUTME: source_error is set when the source document could not be written
    """
    source_path: Path
    results: list[EnvironmentResult] = field(default_factory=list)
    source_error: str | None = None

    @property
    def written(self) -> list[EnvironmentResult]:
        return [r for r in self.results if r.status == "written"]

    @property
    def failed(self) -> list[EnvironmentResult]:
        return [r for r in self.results if r.status == "failed"]

    @property
    def ok(self) -> bool:
        return self.source_error is None and not self.failed


@dataclass
class EnvironmentStatus:
    """Drift between the rendered servers and what is on disk."""
    environment: str
    path: Path
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return not (self.added or self.removed or self.changed)


def sync_environment(
    config: Config,
    env_name: str,
    env: Mapping[str, str] | None = None,
    backup_dir: Path | None = None,
) -> EnvironmentResult:
    """Render one environment and write it to its configPath.

    ABOUTME: Skips environments with an empty configPath or no mode
    ABOUTME: Backs up the existing output before replacing it
    ABOUTME: Records failures in the result instead of raising

    Args:
        config: Loaded configuration
        env_name: Environment to write
        env: Variable lookup (defaults to os.environ)
        backup_dir: Where to keep backups, or None to skip backups

    Returns:
        EnvironmentResult with status written, skipped or failed
    """
    try:
        environment = config.get_environment(env_name)
        if not environment.config_path.strip() or environment.mode is None:
            return EnvironmentResult(environment=env_name, path=None, status="skipped")

        path = Path(environment.config_path).expanduser()
        result = render(config, env_name, env)

        if backup_dir is not None:
            create_backup(path, backup_dir, env_name)

        mode = get_mode(result.mode, env_name)
        mode.write(path, result.document)
    except (MCPalleteError, OSError, ValueError) as e:
        logger.info(f"{env_name}: save failed: {e}")
        return EnvironmentResult(environment=env_name, path=None, status="failed", error=str(e))

    return EnvironmentResult(
        environment=env_name,
        path=path,
        status="written",
        server_count=len(result.document[mode.servers_key]),
        warnings=result.warnings,
    )


def save_all(
    config: Config,
    source_path: Path,
    env: Mapping[str, str] | None = None,
    backup_dir: Path | None = None,
) -> SaveReport:
    """Persist the source document and write every environment's output.

    ABOUTME: Source document first, a failure there is reported, not raised
    ABOUTME: Environments are processed in sorted order, each independently
    ABOUTME: Backups default to the backups/ dir next to the source document

    Args:
        config: Configuration to persist
        source_path: Path of basic_config.json
        env: Variable lookup (defaults to os.environ)
        backup_dir: Backup directory override

    Returns:
        SaveReport with one EnvironmentResult per environment

    Examples:
        >>> report = save_all(config, get_config_path())
        >>> [r.status for r in report.results]
        ['written', 'skipped']
    """
    report = SaveReport(source_path=source_path)
    try:
        save_config(source_path, config)
    except PersistenceError as e:
        logger.info(f"Source config not saved: {e}")
        report.source_error = str(e)

    if backup_dir is None:
        backup_dir = get_backup_dir(source_path)

    for env_name in sorted(config.environments):
        report.results.append(sync_environment(config, env_name, env, backup_dir))

    return report


def environment_status(
    config: Config,
    env_name: str,
    env: Mapping[str, str] | None = None,
) -> EnvironmentStatus:
    """Compare the rendered output of an environment with its file on disk.

    Raises:
        UnknownEnvironmentError: If env_name is not defined
        ConfigError: If the environment has an empty configPath
        UnsupportedModeError: If the environment's mode is unknown or unset
        ValueError: If the existing output file cannot be parsed
    """
    environment = config.get_environment(env_name)
    if not environment.config_path.strip():
        raise ConfigError(f"Environment '{env_name}' has no configPath")
    path = Path(environment.config_path).expanduser()

    result = render(config, env_name, env)
    mode = get_mode(result.mode, env_name)
    wanted = result.document[mode.servers_key]
    current = mode.read(path)

    return EnvironmentStatus(
        environment=env_name,
        path=path,
        added=sorted(set(wanted) - set(current)),
        removed=sorted(set(current) - set(wanted)),
        changed=sorted(name for name in set(wanted) & set(current) if wanted[name] != current[name]),
    )
