import logging

from dungeon_crawler.logging_config import configure_logging, resolve_level


def test_resolve_level():
    assert resolve_level(None, logging.INFO) == logging.INFO
    assert resolve_level("debug", logging.INFO) == logging.DEBUG
    assert resolve_level("30", logging.INFO) == 30
    assert resolve_level("chatty", logging.WARNING) == logging.WARNING


def test_env_level_wins(monkeypatch):
    monkeypatch.setenv("DC_LOG_LEVEL", "error")
    assert configure_logging(logging.DEBUG) == logging.ERROR
    assert logging.getLogger("dungeon_crawler").level == logging.ERROR
    logging.getLogger("dungeon_crawler").setLevel(logging.NOTSET)
