"""
Policy entry points for the archive pipeline.

``reset`` overwrites every project file; ``create`` preserves existing files
and fills in only the missing ones. Any failure in the fetch, decode or sync
stage surfaces as a ``SyncFailure``.
"""

from loguru import logger

from projectsync.fs import FileSystem
from projectsync.models import Policy, SyncOptions, SyncReport
from projectsync.sync.archive import decode_archive
from projectsync.sync.fetcher import PROJECTS_ZIP_URL, ArchiveFetcher
from projectsync.sync.paths import project_id
from projectsync.sync.synchronizer import ArchiveSynchronizer


async def load_from_zip(
    fs: FileSystem,
    zip_url: str = PROJECTS_ZIP_URL,
    options: SyncOptions | None = None,
    fetcher: ArchiveFetcher | None = None,
    synchronizer: ArchiveSynchronizer | None = None,
) -> SyncReport:
    """
    Load project files from a ZIP archive.

    Args:
        fs: The filesystem to write files to
        zip_url: Location to fetch the archive from
        options: Synchronization options
        fetcher: Fetcher resolving the archive bytes
        synchronizer: Synchronizer to run the pass on, exposing its state to the caller

    Returns:
        SyncReport: Summary of the pass, labelled with the archive source

    Raises:
        SyncFailure: If fetching, decoding or writing fails
    """
    options = options or SyncOptions()
    fetcher = fetcher or ArchiveFetcher()
    synchronizer = synchronizer or ArchiveSynchronizer(fs)

    fetched = await synchronizer.fetch(fetcher, zip_url, options.use_fallback)

    report = await synchronizer.sync(fetched.data, options)
    report.source = fetched.source
    logger.info(
        f"Loaded {len(report.written)} project files from {fetched.source.value} archive "
        f"({fetched.location})"
    )
    return report


async def sync_with_policy(
    fs: FileSystem,
    policy: Policy,
    zip_url: str = PROJECTS_ZIP_URL,
    options: SyncOptions | None = None,
    fetcher: ArchiveFetcher | None = None,
) -> SyncReport:
    return await load_from_zip(fs, zip_url, policy.apply(options), fetcher)


async def reset_from_zip(
    fs: FileSystem,
    zip_url: str = PROJECTS_ZIP_URL,
    options: SyncOptions | None = None,
    fetcher: ArchiveFetcher | None = None,
) -> SyncReport:
    """Reset all project files from the archive, overwriting existing files."""
    return await sync_with_policy(fs, Policy.reset, zip_url, options, fetcher)


async def create_from_zip(
    fs: FileSystem,
    zip_url: str = PROJECTS_ZIP_URL,
    options: SyncOptions | None = None,
    fetcher: ArchiveFetcher | None = None,
) -> SyncReport:
    """Create project files from the archive only where they don't exist."""
    return await sync_with_policy(fs, Policy.create, zip_url, options, fetcher)


async def load_from_zip_data(
    fs: FileSystem, data: bytes, options: SyncOptions | None = None
) -> SyncReport:
    """Load project files from already fetched archive bytes."""
    return await ArchiveSynchronizer(fs).sync(data, options)


async def get_project_ids_from_zip(
    zip_url: str = PROJECTS_ZIP_URL,
    fetcher: ArchiveFetcher | None = None,
    allow_fallback: bool = True,
) -> list[str]:
    """List the project ids contained in an archive, sorted."""
    fetcher = fetcher or ArchiveFetcher()
    fetched = await fetcher.fetch(zip_url, allow_fallback)
    ids = {project_id(entry.path) for entry in decode_archive(fetched.data)}
    ids.discard(None)
    return sorted(ids)
