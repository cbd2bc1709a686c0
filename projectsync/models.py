"""Data model shared by the fetch, decode and sync stages."""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_PATH = "/projects"

ProgressCallback = Callable[[int, int], None]


class SourceLabel(str, Enum):
    """Which location supplied the archive bytes."""

    primary = "primary"
    fallback = "fallback"


class PolicyMetadata(NamedTuple):
    """Metadata for a synchronization policy."""

    name: str
    skip_existing: bool
    description: str


class Policy(Enum):
    """Synchronization policy with associated metadata."""

    reset = PolicyMetadata(
        name="reset",
        skip_existing=False,
        description="Overwrite every project file with the archive copy",
    )

    create = PolicyMetadata(
        name="create",
        skip_existing=True,
        description="Create missing project files, preserving existing ones",
    )

    @property
    def metadata(self) -> PolicyMetadata:
        return self.value

    @property
    def skip_existing(self) -> bool:
        return self.metadata.skip_existing

    @property
    def description(self) -> str:
        return self.metadata.description

    def apply(self, options: "SyncOptions | None" = None) -> "SyncOptions":
        """Return a copy of ``options`` with this policy's skip behaviour forced."""
        options = options or SyncOptions()
        return options.model_copy(update={"skip_existing": self.skip_existing})


class SyncState(str, Enum):
    """Lifecycle of a single synchronization call."""

    idle = "idle"
    fetching = "fetching"
    decoding = "decoding"
    enumerating = "enumerating"
    skipping = "skipping"
    writing = "writing"
    completed = "completed"
    failed = "failed"


class ArchiveEntry(BaseModel):
    """One file or directory record enumerated from an archive."""

    path: str = Field(..., description="Archive-internal path, forward-slash separated")
    is_dir: bool = Field(False, description="True for directory markers")
    reader: Callable[[], Awaitable[str]] | None = Field(None, exclude=True, repr=False)
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    async def read_text(self) -> str:
        """Read the entry's full text content."""
        if self.is_dir or self.reader is None:
            raise IsADirectoryError(f"Archive entry {self.path} has no content")
        return await self.reader()


class SyncOptions(BaseModel):
    """Options recognised by a synchronization pass."""

    skip_existing: bool = Field(True, description="Preserve files that already exist")
    base_path: str = Field(DEFAULT_BASE_PATH, description="Directory files are written under")
    use_fallback: bool = Field(True, description="Allow the fallback archive location")
    on_progress: ProgressCallback | None = Field(None, exclude=True, repr=False)
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("base_path")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        value = value.replace("\\", "/")
        if not value.startswith("/"):
            value = "/" + value
        return value.rstrip("/") or "/"


class FetchResult(BaseModel):
    """Archive bytes tagged with the location that supplied them."""

    data: bytes = Field(..., repr=False)
    source: SourceLabel
    location: str


class SyncReport(BaseModel):
    """Summary of one synchronization pass."""

    total: int = 0
    written: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    ignored: list[str] = Field(default_factory=list)
    source: SourceLabel | None = None

    @property
    def processed(self) -> int:
        return len(self.written) + len(self.skipped) + len(self.ignored)
