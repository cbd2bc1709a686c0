"""
projectsync - Course project file synchronizer
"""

__version__ = "0.1.0"

from projectsync.errors import DecodeFailure, FetchFailure, FilesystemFailure, SyncFailure
from projectsync.fs import FileSystem, LocalFileSystem, MemoryFileSystem
from projectsync.loader import LoadOutcome, ProjectLoader, StaticLegacyLoader
from projectsync.models import Policy, SourceLabel, SyncOptions, SyncReport
from projectsync.sync import (
    PROJECTS_ZIP_URL,
    ArchiveFetcher,
    ArchiveSynchronizer,
    create_from_zip,
    load_from_zip,
    load_from_zip_data,
    reset_from_zip,
)
from projectsync.cli import cli

__all__ = [
    "cli",
    "PROJECTS_ZIP_URL",
    "ArchiveFetcher",
    "ArchiveSynchronizer",
    "DecodeFailure",
    "FetchFailure",
    "FileSystem",
    "FilesystemFailure",
    "LoadOutcome",
    "LocalFileSystem",
    "MemoryFileSystem",
    "Policy",
    "ProjectLoader",
    "SourceLabel",
    "StaticLegacyLoader",
    "SyncFailure",
    "SyncOptions",
    "SyncReport",
    "create_from_zip",
    "load_from_zip",
    "load_from_zip_data",
    "reset_from_zip",
]
