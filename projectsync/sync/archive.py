"""ZIP archive decoding into lazily readable entries."""

import asyncio
import io
import zipfile
from collections.abc import Callable

from projectsync.errors import DecodeFailure
from projectsync.models import ArchiveEntry

ArchiveDecoder = Callable[[bytes], list[ArchiveEntry]]


def _reader(archive: zipfile.ZipFile, info: zipfile.ZipInfo):
    async def read_text() -> str:
        try:
            raw = await asyncio.to_thread(archive.read, info)
            return raw.decode("utf-8")
        except (
            zipfile.BadZipFile,
            UnicodeDecodeError,
            ValueError,
            OSError,
            NotImplementedError,
            RuntimeError,
        ) as error:
            raise DecodeFailure(
                f"Failed to read archive entry {info.filename}: {error}",
                entry=info.filename,
                cause=error,
            ) from error

    return read_text


def decode_archive(data: bytes) -> list[ArchiveEntry]:
    """
    Decode ZIP bytes into entries, in archive order.

    Entry content is not read until ``ArchiveEntry.read_text`` is awaited.

    Raises:
        DecodeFailure: If the bytes are not a valid ZIP archive
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, ValueError, NotImplementedError) as error:
        raise DecodeFailure(f"Invalid archive: {error}", cause=error) from error

    return [
        ArchiveEntry(path=info.filename, is_dir=info.is_dir(), reader=_reader(archive, info))
        for info in archive.infolist()
    ]
