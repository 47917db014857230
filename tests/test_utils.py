"""
Unit tests for utils module.
"""

import logging
import stat

import pytest
from pathlib import Path
from unittest.mock import patch

from jiranch.utils import (
    ensure_private_dir,
    expand_path,
    get_default_config_dir,
    get_log_path,
    mask_secret,
    setup_logging,
)


@pytest.fixture
def clean_logger():
    """Yield the package logger and drop its handlers afterwards."""
    logger = logging.getLogger("jiranch")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestPaths:
    """Tests for path utility functions."""

    @patch("pathlib.Path.home")
    def test_get_default_config_dir(self, mock_home):
        """Test the default data directory."""
        mock_home.return_value = Path("/home/testuser")

        with patch.object(Path, "mkdir") as mock_mkdir:
            config_dir = get_default_config_dir()

        assert config_dir == Path("/home/testuser/.local/share/jiranch")
        mock_mkdir.assert_not_called()

    def test_ensure_private_dir_creates(self, tmp_path):
        """Test creating a private directory with parents."""
        target = tmp_path / "a" / "b"

        result = ensure_private_dir(target)

        assert result == target
        assert target.is_dir()
        assert stat.S_IMODE(target.stat().st_mode) == 0o700

    def test_ensure_private_dir_tightens(self, tmp_path):
        """Test that an existing open directory is tightened."""
        target = tmp_path / "open"
        target.mkdir(mode=0o755)
        target.chmod(0o755)

        ensure_private_dir(target)

        assert stat.S_IMODE(target.stat().st_mode) == 0o700

    @patch.dict("os.environ", {"JIRANCH_TEST_DIR": "/opt/data"})
    def test_expand_path_env(self):
        """Test expanding environment variables."""
        assert expand_path("$JIRANCH_TEST_DIR/jiranch") == Path("/opt/data/jiranch").resolve()

    @patch("os.path.expanduser")
    def test_expand_path_home(self, mock_expanduser):
        """Test expanding ~."""
        mock_expanduser.return_value = "/home/testuser/data"

        assert expand_path("~/data") == Path("/home/testuser/data").resolve()

    def test_get_log_path(self):
        """Test the error log location."""
        assert get_log_path(Path("/data/jiranch")) == Path("/data/jiranch/logs/jiranch.log")


class TestMaskSecret:
    """Tests for mask_secret."""

    def test_mask_long_secret(self):
        """Test masking keeps the last four characters."""
        assert mask_secret("abcdefgh1234") == "********1234"

    def test_mask_short_secret(self):
        """Test that short secrets are fully masked."""
        assert mask_secret("abc") == "***"
        assert mask_secret("abcd") == "****"

    def test_mask_empty(self):
        """Test masking an empty string."""
        assert mask_secret("") == ""


class TestSetupLogging:
    """Tests for logging configuration."""

    def test_file_handler_for_errors(self, tmp_path, clean_logger):
        """Test that errors are written to the log file."""
        setup_logging(tmp_path)

        logging.getLogger("jiranch.test").error("something broke")
        logging.getLogger("jiranch.test").info("routine detail")

        text = (tmp_path / "logs" / "jiranch.log").read_text()
        assert "ERROR - something broke" in text
        assert "routine detail" not in text

    def test_verbose_adds_stream_handler(self, tmp_path, clean_logger):
        """Test that verbose mode logs debug output to stderr."""
        logger = setup_logging(tmp_path, verbose=True)

        stream_handlers = [
            h for h in logger.handlers
            if type(h) is logging.StreamHandler
        ]
        assert len(stream_handlers) == 1
        assert stream_handlers[0].level == logging.DEBUG

    def test_quiet_has_no_stream_handler(self, clean_logger):
        """Test that without verbose nothing goes to stderr."""
        logger = setup_logging(None)

        assert not any(type(h) is logging.StreamHandler for h in logger.handlers)
        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_repeated_setup_replaces_handlers(self, tmp_path, clean_logger):
        """Test that calling twice does not duplicate handlers."""
        setup_logging(tmp_path, verbose=True)
        logger = setup_logging(tmp_path, verbose=True)

        assert len(logger.handlers) == 2

    def test_missing_config_dir_skips_file_log(self, tmp_path, clean_logger):
        """Test that no directory is created for a data dir that does not exist."""
        config_dir = tmp_path / "absent"

        logger = setup_logging(config_dir)

        assert not config_dir.exists()
        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_log_file_created_on_first_error(self, tmp_path, clean_logger):
        """Test that the log file is opened lazily."""
        setup_logging(tmp_path)
        log_path = tmp_path / "logs" / "jiranch.log"

        logging.getLogger("jiranch.test").info("routine detail")
        assert not log_path.exists()

        logging.getLogger("jiranch.test").error("something broke")
        assert log_path.exists()

    def test_unwritable_log_dir(self, tmp_path, clean_logger):
        """Test that a log directory that cannot be created is tolerated."""
        with patch("jiranch.utils.ensure_private_dir", side_effect=PermissionError("denied")):
            logger = setup_logging(tmp_path)

        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)
