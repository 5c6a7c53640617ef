import logging

from affinities.logging_config import level_from_env, setup_logging

def test_level_from_env(monkeypatch):
    monkeypatch.setenv("AFFINITIES_LOG_LEVEL", "debug")
    assert level_from_env() == logging.DEBUG
    monkeypatch.setenv("AFFINITIES_LOG_LEVEL", "chatty")
    assert level_from_env(logging.WARNING) == logging.WARNING
    monkeypatch.delenv("AFFINITIES_LOG_LEVEL")
    assert level_from_env() == logging.INFO

def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "cloud.log"
    setup_logging(logging.DEBUG, str(log_file))
    logger = logging.getLogger("affinities")
    setup_logging(logging.DEBUG, str(log_file))
    assert len(logger.handlers) == 2
    logging.getLogger("affinities.layout").debug("fallback corner used")
    for handler in logger.handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "affinities.layout - DEBUG - fallback corner used" in text
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
