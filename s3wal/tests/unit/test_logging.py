"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from s3wal.utils.config import Config
from s3wal.utils.logging import (
    add_app_context,
    configure_logging,
    configure_logging_from_config,
    get_logger,
)


class TestLogging:
    """Test structlog configuration."""
    
    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
    
    def test_app_context_processor(self):
        """Test that entries are tagged with the app name."""
        event = add_app_context(None, "info", {"event": "hello"})
        
        assert event == {"event": "hello", "app": "s3wal"}
    
    def test_json_format(self):
        """Test that json format ends with the JSON renderer."""
        configure_logging(log_level="INFO", log_format="json")
        
        processors = structlog.get_config()["processors"]
        
        assert add_app_context in processors
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    
    def test_console_format(self):
        """Test that console format ends with the console renderer."""
        configure_logging(log_level="DEBUG", log_format="console")
        
        processors = structlog.get_config()["processors"]
        
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    
    def test_get_logger(self):
        """Test that get_logger returns a usable logger."""
        configure_logging(log_level="DEBUG", log_format="json")
        logger = get_logger("s3wal.test")
        
        logger.debug("debug event", key="wal/00000000000000000001")
    
    def test_file_output_from_config(self, tmp_path):
        """Test that the logging section of the config picks the destination."""
        log_file = tmp_path / "wal.log"
        config = Config()
        config.set("logging.level", "INFO")
        config.set("logging.format", "json")
        config.set("logging.output", str(log_file))
        
        configure_logging_from_config(config)
        get_logger("s3wal.test").info("Appended to log", offset=3)
        
        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        
        assert entry["event"] == "Appended to log"
        assert entry["offset"] == 3
        assert entry["app"] == "s3wal"
        assert entry["level"] == "info"
    
    def test_console_to_file_disables_colors(self, tmp_path):
        """Test that console output to a file is rendered without colors."""
        log_file = tmp_path / "wal.log"
        
        configure_logging(log_format="console", log_output=str(log_file))
        get_logger("s3wal.test").warning("Offset already written", offset=2)
        
        assert "\x1b[" not in log_file.read_text()
