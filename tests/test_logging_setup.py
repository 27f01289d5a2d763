import logging

from pinanchor import logging_setup


def _fresh_logger(monkeypatch) -> None:
    logger = logging.getLogger(logging_setup.LOGGER_NAME)
    monkeypatch.setattr(logger, "handlers", [])


def test_build_logger_writes_to_log_dir(tmp_path, monkeypatch) -> None:
    _fresh_logger(monkeypatch)
    monkeypatch.setenv("PINANCHOR_LOG_LEVEL", "debug")

    logger = logging_setup.build_logger(tmp_path / "logs")

    assert logger.level == logging.DEBUG
    assert isinstance(logger.handlers[0], logging.FileHandler)
    assert (tmp_path / "logs" / "pinanchor.log").exists()
    logger.handlers[0].close()


def test_build_logger_falls_back_to_stderr(tmp_path, monkeypatch) -> None:
    _fresh_logger(monkeypatch)
    monkeypatch.setenv("PINANCHOR_LOG_LEVEL", "nonsense")
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    logger = logging_setup.build_logger(blocker / "logs")

    assert logger.level == logging.INFO
    assert type(logger.handlers[0]) is logging.StreamHandler


def test_build_logger_is_idempotent(tmp_path, monkeypatch) -> None:
    _fresh_logger(monkeypatch)

    first = logging_setup.build_logger(tmp_path)
    second = logging_setup.build_logger(tmp_path)

    assert first is second
    assert len(first.handlers) == 1
    first.handlers[0].close()
