# ABOUTME: Utility modules for mcpallete
# ABOUTME: Exports env expansion, atomic write and backup functions

from mcpallete.utils.backup import cleanup_old_backups, create_backup, get_backup_dir
from mcpallete.utils.env import expand_env_vars, find_env_refs
from mcpallete.utils.fs import atomic_write_text

__all__ = [
    "expand_env_vars",
    "find_env_refs",
    "atomic_write_text",
    "create_backup",
    "cleanup_old_backups",
    "get_backup_dir",
]
