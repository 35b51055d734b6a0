"""Tests for the structured provider logger."""

import logging

from essecurity.logging import ProviderLogger


class TestProviderLogger:
    """Test structured context and file output."""

    def test_context_appended_as_json(self, caplog):
        logger = ProviderLogger("essecurity-test-context")
        with caplog.at_level(logging.INFO, logger="essecurity-test-context"):
            logger.info("Created API key", id="abc", roles=["reader"])
        assert 'Created API key {"id": "abc", "roles": ["reader"]}' in caplog.text

    def test_plain_message(self, caplog):
        logger = ProviderLogger("essecurity-test-plain")
        with caplog.at_level(logging.WARNING, logger="essecurity-test-plain"):
            logger.warning("No credentials")
        assert caplog.records[-1].getMessage() == "No credentials"

    def test_file_handler_and_shutdown(self, tmp_path):
        logger = ProviderLogger("essecurity-test-file", str(tmp_path))
        logger.error("Request failed", kind="transport")
        logger.shutdown()

        contents = (tmp_path / "essecurity-test-file.log").read_text()
        assert 'Request failed {"kind": "transport"}' in contents
        assert logger._file_handler is None
