"""
Project file loading with legacy fallback.

Loading runs as two explicit stages: the archive pipeline first, then, only
when it fails, a legacy loader that writes a fixed built-in file set.
"""

from collections.abc import Iterable, Mapping
from typing import Literal, Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict

from projectsync.errors import SyncFailure
from projectsync.fs import FileSystem
from projectsync.models import DEFAULT_BASE_PATH, Policy, SyncOptions, SyncReport
from projectsync.sync.dirs import ensure_dir, file_exists
from projectsync.sync.fetcher import PROJECTS_ZIP_URL, ArchiveFetcher
from projectsync.sync.paths import target_path
from projectsync.sync.policy import sync_with_policy

TEST_EXTENSIONS = (".tst", ".cmp")


class LegacyLoader(Protocol):
    """Writes a fixed, built-in project file set."""

    async def reset_files(self, fs: FileSystem, project_ids: Iterable[str] | None = None) -> None: ...

    async def create_files(self, fs: FileSystem) -> None: ...

    async def reset_tests(self, fs: FileSystem, project_ids: Iterable[str] | None = None) -> None: ...


class StaticLegacyLoader:
    """Legacy loader backed by an in-memory mapping of project files.

    ``files`` maps a project id to a mapping of file name to content.
    """

    def __init__(self, files: Mapping[str, Mapping[str, str]], base_path: str = DEFAULT_BASE_PATH):
        self.files = files
        self.base_path = base_path

    def _selected(self, project_ids: Iterable[str] | None) -> list[str]:
        if project_ids is None:
            return list(self.files)
        return [pid for pid in project_ids if pid in self.files]

    async def _write(self, fs: FileSystem, project: str, name: str, content: str) -> None:
        directory = target_path(self.base_path, project)
        await ensure_dir(fs, directory)
        await fs.write_file(target_path(directory, name), content)

    async def reset_files(self, fs: FileSystem, project_ids: Iterable[str] | None = None) -> None:
        for project in self._selected(project_ids):
            for name, content in self.files[project].items():
                await self._write(fs, project, name, content)

    async def create_files(self, fs: FileSystem) -> None:
        for project, files in self.files.items():
            for name, content in files.items():
                path = target_path(target_path(self.base_path, project), name)
                if not await file_exists(fs, path):
                    await self._write(fs, project, name, content)

    async def reset_tests(self, fs: FileSystem, project_ids: Iterable[str] | None = None) -> None:
        for project in self._selected(project_ids):
            for name, content in self.files[project].items():
                if name.endswith(TEST_EXTENSIONS):
                    await self._write(fs, project, name, content)


class LoadOutcome(BaseModel):
    """Result of a load: which stage produced the files, and why the archive stage failed."""

    stage: Literal["archive", "legacy"]
    report: SyncReport | None = None
    error: SyncFailure | None = None
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return self.error is None


class ProjectLoader:
    """Loads project files from the archive, falling back to the legacy loader."""

    def __init__(
        self,
        legacy: LegacyLoader,
        zip_url: str = PROJECTS_ZIP_URL,
        fetcher: ArchiveFetcher | None = None,
    ):
        self.legacy = legacy
        self.zip_url = zip_url
        self.fetcher = fetcher

    async def try_archive(
        self, fs: FileSystem, policy: Policy, options: SyncOptions | None = None
    ) -> LoadOutcome:
        """Run the archive stage, capturing a pipeline failure instead of raising it."""
        try:
            report = await sync_with_policy(fs, policy, self.zip_url, options, self.fetcher)
        except SyncFailure as error:
            return LoadOutcome(stage="archive", error=error)
        return LoadOutcome(stage="archive", report=report)

    async def reset_files(
        self,
        fs: FileSystem,
        project_ids: Iterable[str] | None = None,
        options: SyncOptions | None = None,
    ) -> LoadOutcome:
        """Reset all project files, overwriting existing ones."""
        outcome = await self.try_archive(fs, Policy.reset, options)
        if outcome.ok:
            logger.info("Successfully loaded project files from ZIP")
            return outcome

        logger.warning(f"ZIP loading failed, falling back to legacy loader: {outcome.error}")
        await self.legacy.reset_files(fs, project_ids)
        return LoadOutcome(stage="legacy", error=outcome.error)

    async def create_files(self, fs: FileSystem, options: SyncOptions | None = None) -> LoadOutcome:
        """Create project files only where they don't exist."""
        outcome = await self.try_archive(fs, Policy.create, options)
        if outcome.ok:
            logger.info("Successfully created project files from ZIP")
            return outcome

        logger.warning(f"ZIP loading failed, falling back to legacy loader: {outcome.error}")
        await self.legacy.create_files(fs)
        return LoadOutcome(stage="legacy", error=outcome.error)

    async def reset_tests(self, fs: FileSystem, project_ids: Iterable[str] | None = None) -> None:
        """Reset only test files (.tst, .cmp) using the legacy loader."""
        await self.legacy.reset_tests(fs, project_ids)
