import json
import logging
import logging.handlers

import pytest

from utils import InvalidArgument, load_config, setup_logging, validate_bounds, validate_range


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_load_config_reads_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"particle_field": {"particle_count": 7}}))
    assert load_config(str(path)) == {"particle_field": {"particle_count": 7}}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_setup_logging_adds_console_and_rotating_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "field.log"

    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert log_file.exists()


def test_validate_bounds():
    assert validate_bounds((800, 600)) == (800.0, 600.0)
    for bad in [(0, 1), (1, -1), (1,), None, ("wide", 2)]:
        with pytest.raises(InvalidArgument):
            validate_bounds(bad)


def test_validate_range():
    assert validate_range("size_range", [1, 5]) == (1.0, 5.0)
    with pytest.raises(InvalidArgument):
        validate_range("size_range", [5, 1])
