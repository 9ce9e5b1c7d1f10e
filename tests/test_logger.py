import sys

import pytest
from loguru import logger

from workload_report.config.settings import settings
from workload_report.core.logger import setup_logger
from workload_report.db.session import get_session


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_file_sink_defaults_to_settings(tmp_path, monkeypatch, restore_logger):
    log_path = tmp_path / "logs" / "report.log"
    monkeypatch.setattr(settings, "log_file", str(log_path))

    setup_logger(level="INFO")
    logger.info("report engine ready")
    logger.remove()

    content = log_path.read_text()
    assert "report engine ready" in content
    assert f"log_file={log_path}" in content


def test_session_debug_lines_are_capped_at_info(tmp_path, db_engine, restore_logger):
    log_path = tmp_path / "debug.log"

    setup_logger(level="DEBUG", log_file=str(log_path))
    logger.debug("engine debug line")
    with get_session():
        pass
    logger.remove()

    content = log_path.read_text()
    assert "engine debug line" in content
    assert "Creating new database session" not in content


def test_module_levels_can_be_overridden(tmp_path, db_engine, restore_logger):
    log_path = tmp_path / "debug.log"

    setup_logger(level="DEBUG", log_file=str(log_path), module_levels={})
    with get_session():
        pass
    logger.remove()

    assert "Creating new database session" in log_path.read_text()
