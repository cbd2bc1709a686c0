"""
Archive Path Normalization
==========================

Maps archive-internal entry paths onto project-relative paths and decides
which entries are never materialized on the target filesystem.
"""

import posixpath
import re
from typing import NamedTuple

from loguru import logger

ARCHIVE_ROOT = "projects"
EXCLUDED_FILES = frozenset({"README.md"})

_PROJECT_ID_PATTERN = re.compile(rf"^(?:{ARCHIVE_ROOT}/)?(\d{{2}})/")


class NormalizedPath(NamedTuple):
    """Result of normalizing one archive entry path."""

    path: str
    skip: bool


def strip_archive_root(raw_path: str) -> str:
    """Strip a single leading packaging root segment from an archive path."""
    path = raw_path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    prefix = ARCHIVE_ROOT + "/"
    if path.startswith(prefix):
        path = path[len(prefix):]
    return path


def _is_unsafe(path: str) -> bool:
    return path.startswith("/") or ".." in path.split("/")


def normalize_entry_path(raw_path: str) -> NormalizedPath:
    """
    Normalize an archive entry path and classify it.

    Root-level items, excluded files and paths that would escape the base
    directory are marked ``skip``: they count as processed but are never
    written.

    Args:
        raw_path: Path as recorded in the archive

    Returns:
        NormalizedPath: The project-relative path and its skip flag
    """
    path = strip_archive_root(raw_path)

    if _is_unsafe(path):
        logger.warning(f"Refusing to materialize unsafe archive path: {raw_path}")
        return NormalizedPath(path, True)

    if path in EXCLUDED_FILES or "/" not in path:
        return NormalizedPath(path, True)

    return NormalizedPath(path, False)


def target_path(base_path: str, relative_path: str) -> str:
    """Build the absolute target path for a normalized entry path."""
    return posixpath.join(base_path, relative_path)


def project_id(raw_path: str) -> str | None:
    """Return the two-digit project id an archive path belongs to, if any."""
    match = _PROJECT_ID_PATTERN.match(raw_path.replace("\\", "/"))
    return match.group(1) if match else None
