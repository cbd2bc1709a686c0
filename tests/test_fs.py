"""Tests for the filesystem collaborators."""

import threading

import pytest

from projectsync.fs import FileSystem, LocalFileSystem, MemoryFileSystem
from projectsync.models import SyncOptions
from projectsync.sync.synchronizer import ArchiveSynchronizer


def test_backends_satisfy_protocol(tmp_path):
    assert isinstance(MemoryFileSystem(), FileSystem)
    assert isinstance(LocalFileSystem(tmp_path), FileSystem)


@pytest.mark.asyncio
async def test_memory_mkdir_requires_parent(memory_fs):
    with pytest.raises(FileNotFoundError):
        await memory_fs.mkdir("/a/b")
    await memory_fs.mkdir("/a")
    with pytest.raises(FileExistsError):
        await memory_fs.mkdir("/a")


@pytest.mark.asyncio
async def test_memory_write_visible_to_stat(memory_fs):
    with pytest.raises(FileNotFoundError):
        await memory_fs.stat("/a.txt")
    await memory_fs.write_file("/a.txt", "content")
    stat = await memory_fs.stat("/a.txt")
    assert stat["is_dir"] is False
    with pytest.raises(FileNotFoundError):
        await memory_fs.write_file("/missing/a.txt", "content")


@pytest.mark.asyncio
async def test_local_filesystem_roundtrip(tmp_path):
    fs = LocalFileSystem(tmp_path)
    await fs.mkdir("/projects")
    await fs.write_file("/projects/Not.hdl", "CHIP Not {}\r\n")

    assert (tmp_path / "projects" / "Not.hdl").read_bytes() == b"CHIP Not {}\r\n"
    assert await fs.read_file("/projects/Not.hdl") == "CHIP Not {}\r\n"
    await fs.stat("/projects/Not.hdl")
    with pytest.raises(FileNotFoundError):
        await fs.stat("/projects/missing.hdl")


@pytest.mark.asyncio
async def test_local_filesystem_confined_to_root(tmp_path):
    fs = LocalFileSystem(tmp_path / "root")
    assert fs.resolve("/../../etc/passwd") == fs.root / "etc" / "passwd"
    (tmp_path / "root").mkdir()
    (tmp_path / "outside").mkdir()
    (tmp_path / "root" / "link").symlink_to(tmp_path / "outside")
    with pytest.raises(PermissionError):
        fs.resolve("/link/file.txt")


@pytest.mark.asyncio
async def test_sync_onto_local_filesystem(tmp_path, course_zip):
    fs = LocalFileSystem(tmp_path)
    await ArchiveSynchronizer(fs).sync(course_zip, SyncOptions(base_path="/projects"))
    assert (tmp_path / "projects" / "05" / "CPU.hdl").read_text() == "CHIP CPU {}"
    assert not (tmp_path / "projects" / "README.md").exists()
    leftovers = [path.name for path in tmp_path.rglob(".*")]
    assert leftovers == []


@pytest.mark.asyncio
async def test_local_filesystem_resolves_off_the_event_loop(tmp_path, monkeypatch):
    fs = LocalFileSystem(tmp_path)
    resolve = fs.resolve
    threads: list[threading.Thread] = []

    def recording_resolve(path):
        threads.append(threading.current_thread())
        return resolve(path)

    monkeypatch.setattr(fs, "resolve", recording_resolve)

    await fs.mkdir("/projects")
    await fs.write_file("/projects/Not.hdl", "X")
    await fs.stat("/projects/Not.hdl")
    await fs.read_file("/projects/Not.hdl")

    assert len(threads) == 4
    assert threading.main_thread() not in threads
