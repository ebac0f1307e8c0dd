import logging

import pytest


@pytest.fixture(autouse=True)
def reset_image_scraper_logger():
    """Drop handlers added by setup_logger so each test starts clean."""
    yield
    logger = logging.getLogger("image_scraper")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def png_bytes() -> bytes:
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def write_source(tmp_path):
    """Write a source file into tmp_path and return its path."""

    def _write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
