# ABOUTME: Backup utilities for environment output files.
# ABOUTME: Handles timestamped backups with automatic retention cleanup (keep last 5 per environment).
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

# ABOUTME: Backups kept per label by cleanup_old_backups()
MAX_BACKUPS_PER_LABEL = 5

# ABOUTME: Characters allowed in a backup label, everything else becomes "-"
LABEL_PATTERN = re.compile(r"[^A-Za-z0-9-]+")


def get_backup_dir(config_path: Path) -> Path:
    """Return the backup directory next to the source document.

    ABOUTME: Does not create the directory

    Examples:
        >>> get_backup_dir(Path("/home/user/.config/mcpallete/basic_config.json"))
        PosixPath('/home/user/.config/mcpallete/backups')
    """
    return config_path.parent / "backups"


def create_backup(source_path: Path, backup_dir: Path, label: str) -> Path | None:
    """Create a timestamped backup of a file before it is overwritten.

    ABOUTME: Backup format: {label}_{YYYYMMDD}_{HHMMSS}.{ext}
    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: Returns None when there is nothing to back up yet

    Args:
        source_path: Path to file to backup
        backup_dir: Directory where backup should be created (created if missing)
        label: Backup name prefix, usually the environment name

    Returns:
        Path to created backup file, or None if source_path doesn't exist

    Raises:
        OSError: If backup creation fails

    Examples:
        >>> create_backup(Path("claude_desktop_config.json"), backup_dir, "claudeDesktop").name
        'claudeDesktop_20260108_143022.json'
    """
    if not source_path.exists():
        return None

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    safe_label = LABEL_PATTERN.sub("-", label).strip("-") or "backup"
    backup_path = backup_dir / f"{safe_label}_{timestamp}{source_path.suffix}"

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(backup_dir)

    return backup_path


def cleanup_old_backups(backup_dir: Path, max_backups_per_label: int = MAX_BACKUPS_PER_LABEL) -> list[Path]:
    """Remove old backup files, keeping only the most recent per label.

    ABOUTME: Groups backups by label prefix (before _timestamp)
    ABOUTME: Logs warnings on errors but does not raise exceptions

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    if not backup_dir.exists():
        return deleted_files

    # e.g., claudeDesktop_20260108_143022.json
    backup_pattern = re.compile(r"^(.+?)_(\d{8}_\d{6})(\..+)?$")

    backups_by_label: dict[str, list[tuple[str, Path]]] = {}
    for file_path in backup_dir.iterdir():
        if not file_path.is_file():
            continue

        match = backup_pattern.match(file_path.name)
        if not match:
            continue

        backups_by_label.setdefault(match.group(1), []).append((match.group(2), file_path))

    for backups in backups_by_label.values():
        # Newest first
        backups.sort(key=lambda x: x[0], reverse=True)

        for _timestamp, file_path in backups[max_backups_per_label:]:
            try:
                file_path.unlink()
                deleted_files.append(file_path)
                logger.debug(f"Deleted old backup: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files
