"""Logging setup: file sink, module names, stdlib forwarding."""

import logging

import pytest
from loguru import logger

from crudserver.server.logger import get_logger, setup_logger


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "logs" / "app.log"
    setup_logger(level="INFO", to_console=False, to_file=True, file_path=str(path))
    yield path
    setup_logger()


def _read(path):
    # removing the sinks closes the file
    logger.remove()
    return path.read_text(encoding="utf-8")


def test_module_logger_writes_its_name(log_file):
    get_logger("Database").info("created")

    text = _read(log_file)
    assert "Database" in text
    assert "created" in text


def test_level_filters_lower_records(log_file):
    get_logger("Database").debug("hidden")
    get_logger("Database").warning("shown")

    text = _read(log_file)
    assert "hidden" not in text
    assert "shown" in text


def test_uvicorn_records_are_forwarded(log_file):
    logging.getLogger("uvicorn.error").warning("from uvicorn")

    text = _read(log_file)
    assert "uvicorn.error" in text
    assert "from uvicorn" in text
