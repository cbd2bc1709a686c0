"""
Test Configuration and Fixtures
=============================

This module provides pytest fixtures and utilities for testing projectsync.
"""

import io
import struct
import zipfile
from collections.abc import Callable

import httpx
import pytest

from projectsync.fs import MemoryFileSystem
from projectsync.sync.fetcher import ArchiveFetcher


def build_zip(files: dict[str, str], dirs: tuple[str, ...] = ()) -> bytes:
    """
    Build ZIP bytes in memory.

    Args:
        files: Mapping of archive path to text content
        dirs: Directory markers to add before the files

    Returns:
        bytes: The encoded archive
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for directory in dirs:
            archive.writestr(directory.rstrip("/") + "/", "")
        for path, content in files.items():
            archive.writestr(path, content)
    return buffer.getvalue()


LOCAL_HEADER = (b"PK\x03\x04", 6)
CENTRAL_HEADER = (b"PK\x01\x02", 8)
ENCRYPTED_FLAG = 0x1
UNSUPPORTED_COMPRESSION = 9


def _patch_header_field(data: bytearray, signature: bytes, offset: int, occurrence: int, update) -> None:
    index = -1
    for _ in range(occurrence + 1):
        index = data.index(signature, index + 1)
    value = struct.unpack_from("<H", data, index + offset)[0]
    struct.pack_into("<H", data, index + offset, update(value))


def build_unreadable_zip(files: dict[str, str], broken: str, reason: str) -> bytes:
    """
    Build ZIP bytes whose ``broken`` member cannot be read back.

    Args:
        files: Mapping of archive path to text content
        broken: Archive path of the member to break
        reason: ``"encrypted"`` sets the encryption flag, ``"compression"``
            declares an unsupported compression method (deflate64)
    """
    data = bytearray(build_zip(files))
    occurrence = list(files).index(broken)
    for signature, flag_offset in (LOCAL_HEADER, CENTRAL_HEADER):
        if reason == "encrypted":
            _patch_header_field(data, signature, flag_offset, occurrence, lambda flags: flags | ENCRYPTED_FLAG)
        else:
            _patch_header_field(data, signature, flag_offset + 2, occurrence, lambda _: UNSUPPORTED_COMPRESSION)
    return bytes(data)


@pytest.fixture
def make_zip() -> Callable[..., bytes]:
    return build_zip


@pytest.fixture
def make_unreadable_zip() -> Callable[..., bytes]:
    return build_unreadable_zip


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """An empty in-memory filesystem."""
    return MemoryFileSystem()


@pytest.fixture
def course_zip() -> bytes:
    """A small course archive shaped like the released projects.zip."""
    return build_zip(
        {
            "projects/README.md": "# Projects",
            "projects/01/Not.hdl": "X",
            "projects/01/Not.tst": "load Not.hdl;",
            "projects/05/CPU.hdl": "CHIP CPU {}",
        },
        dirs=("projects", "projects/01", "projects/05"),
    )


def _mock_fetcher(
    routes: dict[str, bytes | int], fallback: str | None = None, calls: list[str] | None = None
) -> ArchiveFetcher:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls.append(url)
        if url not in routes:
            raise httpx.ConnectError("connection refused", request=request)
        value = routes[url]
        if isinstance(value, int):
            return httpx.Response(value)
        return httpx.Response(200, content=value)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ArchiveFetcher(client=client, fallback=fallback)


@pytest.fixture
def make_fetcher() -> Callable[..., ArchiveFetcher]:
    """
    Factory for ArchiveFetchers whose HTTP client is served from ``routes``.

    Routes map a URL to either response bytes or an HTTP status code.
    Unknown URLs raise a connection error.
    """
    return _mock_fetcher
