import json
import logging

import pytest
import structlog

from bindable_codegen.logging_config import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_json_lines(capsys):
    configure_logging(level="INFO", json_format=True)
    get_logger("tests").info("file_written", path="out/bindings.py")

    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["event"] == "file_written"
    assert record["path"] == "out/bindings.py"
    assert record["level"] == "info"
    assert record["logger"] == "tests"
    assert "timestamp" in record


def test_level_filters(capsys):
    configure_logging(level="WARNING", json_format=True)
    logger = get_logger()
    logger.info("hidden")
    logger.warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err


def test_unknown_level_falls_back_to_info(capsys):
    configure_logging(level="chatty")
    get_logger().debug("hidden")
    get_logger().info("visible")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "visible" in err
