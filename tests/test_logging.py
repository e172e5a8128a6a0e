from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from chainhash import HashMap, log
from chainhash.config import AppConfig, LoggingPolicy


def test_json_formatter_with_exc_and_stack() -> None:
    formatter = log.JsonFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("test").makeRecord(
            "test", logging.ERROR, __file__, 0, "failure", (), sys.exc_info(), func="func"
        )
    record.stack_info = "trace info"
    payload = json.loads(formatter.format(record))
    assert payload["level"] == "ERROR"
    assert payload["msg"] == "failure"
    assert "exc_info" in payload
    assert payload["stack"]


def test_configure_logging_json_and_file(tmp_path: Path) -> None:
    log_file = tmp_path / "chainhash.log"
    log.configure_logging(use_json=True, log_file=str(log_file), level="debug")
    logger = logging.getLogger("chainhash")
    assert logger.level == logging.DEBUG
    assert any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers)

    m: HashMap[int, int] = HashMap()
    m.insert(1, 1)
    for handler in logger.handlers:
        handler.flush()
    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line]
    assert lines
    payload = json.loads(lines[-1])
    assert payload["logger"] == "chainhash"
    assert "16 -> 4 buckets" in payload["msg"]


def test_configure_logging_replaces_handlers() -> None:
    log.configure_logging()
    log.configure_logging()
    logger = logging.getLogger("chainhash")
    streams = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    assert len(streams) == 1


def test_configure_from_config(tmp_path: Path) -> None:
    cfg = AppConfig(logging=LoggingPolicy(level="ERROR", log_file=str(tmp_path / "x.log")))
    log.configure_from_config(cfg)
    logger = logging.getLogger("chainhash")
    assert logger.level == logging.ERROR
    assert any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers)
