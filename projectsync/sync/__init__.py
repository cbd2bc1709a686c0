"""
Archive synchronization package for loading course project files.
"""

from .fetcher import PROJECTS_ZIP_URL, ArchiveFetcher, fallback_location
from .policy import (
    create_from_zip,
    get_project_ids_from_zip,
    load_from_zip,
    load_from_zip_data,
    reset_from_zip,
    sync_with_policy,
)
from .synchronizer import ArchiveSynchronizer

__all__ = [
    "PROJECTS_ZIP_URL",
    "ArchiveFetcher",
    "ArchiveSynchronizer",
    "create_from_zip",
    "fallback_location",
    "get_project_ids_from_zip",
    "load_from_zip",
    "load_from_zip_data",
    "reset_from_zip",
    "sync_with_policy",
]
