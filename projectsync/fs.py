"""
Filesystem Collaborators
========================

The synchronizer only needs three awaitable operations from a filesystem:
``stat`` (raising ``FileNotFoundError`` when absent), single-level ``mkdir``
and whole-file ``write_file``. Paths are absolute and forward-slash separated.
"""

import asyncio
import posixpath
from pathlib import Path
from typing import Protocol, runtime_checkable

from projectsync.utils.file_ops import safe_read_file, safe_write_file


@runtime_checkable
class FileSystem(Protocol):
    """Minimal filesystem interface required by the synchronizer."""

    async def stat(self, path: str) -> object: ...

    async def mkdir(self, path: str) -> None: ...

    async def write_file(self, path: str, content: str) -> None: ...


def _clean(path: str) -> str:
    return posixpath.normpath("/" + path.replace("\\", "/").lstrip("/"))


class MemoryFileSystem:
    """In-process virtual filesystem; the root directory always exists."""

    def __init__(self, files: dict[str, str] | None = None):
        self._files: dict[str, str] = {}
        self._dirs: set[str] = {"/"}
        for path, content in (files or {}).items():
            self._seed(path, content)

    def _seed(self, path: str, content: str) -> None:
        path = _clean(path)
        parent = posixpath.dirname(path)
        while parent not in self._dirs:
            self._dirs.add(parent)
            parent = posixpath.dirname(parent)
        self._files[path] = content

    async def stat(self, path: str) -> dict[str, object]:
        path = _clean(path)
        if path in self._dirs:
            return {"path": path, "is_dir": True}
        if path in self._files:
            return {"path": path, "is_dir": False, "size": len(self._files[path])}
        raise FileNotFoundError(path)

    async def mkdir(self, path: str) -> None:
        path = _clean(path)
        if path in self._dirs or path in self._files:
            raise FileExistsError(path)
        if posixpath.dirname(path) not in self._dirs:
            raise FileNotFoundError(posixpath.dirname(path))
        self._dirs.add(path)

    async def write_file(self, path: str, content: str) -> None:
        path = _clean(path)
        if path in self._dirs:
            raise IsADirectoryError(path)
        if posixpath.dirname(path) not in self._dirs:
            raise FileNotFoundError(posixpath.dirname(path))
        self._files[path] = content

    async def read_file(self, path: str) -> str:
        path = _clean(path)
        if path not in self._files:
            raise FileNotFoundError(path)
        return self._files[path]

    def exists(self, path: str) -> bool:
        path = _clean(path)
        return path in self._files or path in self._dirs

    def files(self) -> dict[str, str]:
        """Snapshot of every file path and its content."""
        return dict(self._files)

    def dirs(self) -> set[str]:
        return set(self._dirs)


class LocalFileSystem:
    """Maps virtual absolute paths onto a directory on disk."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def resolve(self, path: str) -> Path:
        """Resolve a virtual path to a disk path confined to the root."""
        relative = _clean(path).lstrip("/")
        resolved = (self.root / relative).resolve() if relative else self.root
        if resolved != self.root and self.root not in resolved.parents:
            raise PermissionError(f"Path escapes filesystem root: {path}")
        return resolved

    def _stat(self, path: str):
        return self.resolve(path).stat()

    def _mkdir(self, path: str) -> None:
        self.resolve(path).mkdir()

    def _write_file(self, path: str, content: str) -> None:
        target = self.resolve(path)
        if target.is_dir():
            raise IsADirectoryError(str(target))
        if not target.parent.is_dir():
            raise FileNotFoundError(str(target.parent))
        safe_write_file(target, content)

    def _read_file(self, path: str) -> str:
        return safe_read_file(self.resolve(path))

    async def stat(self, path: str):
        return await asyncio.to_thread(self._stat, path)

    async def mkdir(self, path: str) -> None:
        await asyncio.to_thread(self._mkdir, path)

    async def write_file(self, path: str, content: str) -> None:
        await asyncio.to_thread(self._write_file, path, content)

    async def read_file(self, path: str) -> str:
        return await asyncio.to_thread(self._read_file, path)
