import logging

from hydramorph.logging_utils import (
    DEBUG_ENV,
    LOG_DIR_ENV,
    configure_logging,
    debug_enabled,
    get_log_dir,
    get_log_path,
    log_exception,
)


def test_log_path_uses_env_override(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    assert get_log_dir() == tmp_path
    assert get_log_path() == tmp_path / "hydramorph.log"


def test_debug_flag_reads_env(monkeypatch) -> None:
    monkeypatch.delenv(DEBUG_ENV, raising=False)
    assert not debug_enabled()
    monkeypatch.setenv(DEBUG_ENV, "1")
    assert debug_enabled()


def test_configure_logging_creates_file_handler(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    configure_logging(force=True)
    logger = logging.getLogger("hydramorph")
    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    assert [h.baseFilename for h in file_handlers] == [str(tmp_path / "hydramorph.log")]
    assert logger.propagate


def test_log_exception_appends_traceback(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    try:
        raise ValueError("boom")
    except ValueError as exc:
        path = log_exception("demo", exc)
    assert path == tmp_path / "hydramorph.log"
    text = path.read_text(encoding="utf-8")
    assert "demo failed: ValueError: boom" in text
    assert "Traceback" in text


def test_log_exception_returns_none_when_dir_is_unusable(tmp_path, monkeypatch) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setenv(LOG_DIR_ENV, str(blocker))
    assert log_exception("demo", ValueError("boom")) is None
