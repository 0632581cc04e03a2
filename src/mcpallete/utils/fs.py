# ABOUTME: Crash-safe file writes shared by the source document and environment outputs.
# ABOUTME: Content goes to a temp file next to the target and is moved into place with os.replace().
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, content: str) -> None:
    """Write content to path atomically.

    ABOUTME: Temp file lives in the target directory so os.replace() never crosses filesystems
    ABOUTME: Readers see either the old file or the new one, never a partial write
    ABOUTME: Creates parent directories if needed

    Args:
        path: Target file path
        content: Full text content

    Raises:
        OSError: If the directory or file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, path)
        tmp_path = None
        logger.debug(f"Wrote {path}")
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
