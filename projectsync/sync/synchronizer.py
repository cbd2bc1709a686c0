"""
Archive Synchronization
=======================

Reconciles decoded archive entries against a target filesystem, either
overwriting every file or filling in only the missing ones.
"""

from datetime import datetime

from loguru import logger

from projectsync.errors import FilesystemFailure, SyncFailure
from projectsync.fs import FileSystem
from projectsync.models import ArchiveEntry, FetchResult, SyncOptions, SyncReport, SyncState
from projectsync.sync.archive import ArchiveDecoder, decode_archive
from projectsync.sync.dirs import ensure_dir, file_exists, parent_dir
from projectsync.sync.fetcher import ArchiveFetcher
from projectsync.sync.paths import normalize_entry_path, target_path


class ArchiveSynchronizer:
    """Writes archive entries onto a filesystem, one entry at a time."""

    def __init__(self, fs: FileSystem, decoder: ArchiveDecoder = decode_archive):
        """Initialize the ArchiveSynchronizer.

        Args:
            fs: Filesystem the archive is materialized onto
            decoder: Callable turning raw bytes into archive entries
        """
        self.fs = fs
        self.decoder = decoder
        self.state = SyncState.idle
        self._error: str | None = None
        self._processed = 0
        self._total = 0
        self._last_sync: datetime | None = None

    async def fetch(self, fetcher: ArchiveFetcher, location: str, allow_fallback: bool = True) -> FetchResult:
        """Fetch archive bytes, recording a fetch failure in the sync state."""
        self.state = SyncState.fetching
        try:
            return await fetcher.fetch(location, allow_fallback)
        except SyncFailure as error:
            self._fail(error)
            raise

    def decode(self, data: bytes) -> list[ArchiveEntry]:
        self.state = SyncState.decoding
        try:
            return self.decoder(data)
        except SyncFailure as error:
            self._fail(error)
            raise

    async def sync(self, data: bytes, options: SyncOptions | None = None) -> SyncReport:
        """Decode ``data`` and synchronize its entries onto the filesystem."""
        return await self.sync_entries(self.decode(data), options)

    async def sync_entries(
        self, entries: list[ArchiveEntry], options: SyncOptions | None = None
    ) -> SyncReport:
        """
        Synchronize already decoded entries onto the filesystem.

        Directory entries are never written; file entries are skipped,
        ignored or written according to ``options``. Progress is reported
        after every file entry.

        Raises:
            FilesystemFailure: If a directory or file cannot be written
            DecodeFailure: If an entry's content cannot be read
        """
        options = options or SyncOptions()
        files = [entry for entry in entries if not entry.is_dir]
        report = SyncReport(total=len(files))

        self.state = SyncState.enumerating
        self._error = None
        self._processed = 0
        self._total = report.total

        try:
            for entry in files:
                await self._sync_entry(entry, options, report)
                self._processed += 1
                if options.on_progress is not None:
                    options.on_progress(self._processed, report.total)
        except SyncFailure as error:
            self._fail(error)
            raise

        self.state = SyncState.completed
        self._last_sync = datetime.now()
        logger.debug(
            f"Synchronized {report.total} entries: {len(report.written)} written, "
            f"{len(report.skipped)} skipped, {len(report.ignored)} ignored"
        )
        return report

    async def _sync_entry(self, entry: ArchiveEntry, options: SyncOptions, report: SyncReport) -> None:
        normalized = normalize_entry_path(entry.path)
        if normalized.skip:
            report.ignored.append(entry.path)
            return

        path = target_path(options.base_path, normalized.path)

        if options.skip_existing and await file_exists(self.fs, path):
            self.state = SyncState.skipping
            logger.debug(f"Keeping existing file {path}")
            report.skipped.append(path)
            return

        self.state = SyncState.writing
        await ensure_dir(self.fs, parent_dir(path))
        content = await entry.read_text()
        try:
            await self.fs.write_file(path, content)
        except OSError as error:
            raise FilesystemFailure("write", path, error) from error
        report.written.append(path)

    def _fail(self, error: SyncFailure) -> None:
        self.state = SyncState.failed
        self._error = error.message
        logger.debug(f"Synchronization failed: {error.message}")

    def get_status(self) -> dict:
        """Get the current status of synchronization.

        Returns:
            dict: State, progress counters, last error and last completion time
        """
        return {
            "state": self.state.value,
            "processed": self._processed,
            "total": self._total,
            "error": self._error,
            "last_sync": self._last_sync.isoformat() if self._last_sync else None,
        }
