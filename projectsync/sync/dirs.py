"""Existence checks and ancestor directory creation on a FileSystem."""

import posixpath

from loguru import logger

from projectsync.errors import FilesystemFailure
from projectsync.fs import FileSystem


async def file_exists(fs: FileSystem, path: str) -> bool:
    """Check if a path exists in the filesystem."""
    try:
        await fs.stat(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as error:
        raise FilesystemFailure("stat", path, error) from error


def parent_dir(path: str) -> str:
    return posixpath.dirname(path) or "/"


async def ensure_dir(fs: FileSystem, dir_path: str) -> None:
    """
    Ensure a directory exists, creating missing ancestors one level at a time.

    Safe to call repeatedly for overlapping paths.

    Raises:
        FilesystemFailure: If a directory level cannot be created
    """
    current = ""
    for part in filter(None, dir_path.split("/")):
        current += "/" + part
        if await file_exists(fs, current):
            continue
        try:
            await fs.mkdir(current)
            logger.debug(f"Created directory {current}")
        except FileExistsError:
            continue
        except OSError as error:
            raise FilesystemFailure("mkdir", current, error) from error
