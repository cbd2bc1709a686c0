"""Disk file operation utilities used by the local filesystem backend."""
import contextlib
import os
import tempfile
from pathlib import Path

from loguru import logger


def safe_write_file(file_path: Path, content: str) -> None:
    """
    Write content to a file through a temporary sibling so readers never
    observe a partially written file.

    The parent directory must already exist.

    Args:
        file_path: Path to the target file
        content: Full text content of the file
    """
    temp_fd, temp_path = tempfile.mkstemp(dir=str(file_path.parent), prefix=f".{file_path.name}.")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)

        # On Windows, we need to remove the target file first
        if os.name == "nt" and file_path.exists():
            file_path.unlink()

        Path(temp_path).replace(file_path)
    except Exception:
        with contextlib.suppress(OSError):
            Path(temp_path).unlink()
        raise


def safe_read_file(file_path: Path) -> str:
    """
    Read a file's full text content.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    try:
        with file_path.open(encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        raise
    except Exception:
        logger.exception(f"Error reading file {file_path}")
        raise
