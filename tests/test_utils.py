import pytest
from loguru import logger

from projectsync.utils.file_ops import safe_read_file, safe_write_file
from projectsync.utils.logging import configure_logging


@pytest.fixture
def restore_logger():
    yield
    logger.remove()


def test_safe_write_file_replaces_content(tmp_path):
    target = tmp_path / "Not.hdl"
    target.write_text("old")

    safe_write_file(target, "new")

    assert safe_read_file(target) == "new"
    assert [path.name for path in tmp_path.iterdir()] == ["Not.hdl"]


def test_safe_read_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        safe_read_file(tmp_path / "missing.hdl")


def test_configure_logging_debug_file_sink(tmp_path, restore_logger):
    log_file = tmp_path / "projectsync.log"
    sinks = configure_logging("INFO", debug=True, log_file=str(log_file))

    logger.info("synchronized 3 files")
    logger.debug("hidden at INFO")

    assert len(sinks) == 2
    logger.remove(sinks[1])
    content = log_file.read_text()
    assert "synchronized 3 files" in content
    assert "hidden at INFO" not in content


def test_configure_logging_invalid_env_level(monkeypatch, restore_logger):
    monkeypatch.setenv("PROJECTSYNC_LOG_LEVEL", "chatty")
    monkeypatch.delenv("PROJECTSYNC_DEBUG", raising=False)
    sinks = configure_logging()
    assert len(sinks) == 1
