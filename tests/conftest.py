"""Test configuration and fixtures"""

import logging
from pathlib import Path

import pytest

from tagfill.agents import CoverResolver, MetadataResolver, ReconciliationEngine
from tagfill.utilities.logger import get_logger

from fakes import FakeTagStore


@pytest.fixture
def logger():
    return get_logger("test")


@pytest.fixture
def tag_store():
    return FakeTagStore()


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "covers"


@pytest.fixture
def make_engine(tag_store, cache_dir, logger):
    """Build an engine around scripted metadata and cover sources"""

    def _make(metadata_sources=None, cover_sources=None, **kwargs):
        resolver = MetadataResolver(metadata_sources or [], logger=logger)
        covers = CoverResolver(cover_sources or [], cache_dir=str(cache_dir), logger=logger)
        return ReconciliationEngine(tag_store, resolver, covers, logger=logger, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def reset_tagfill_logger():
    """Undo setup_logging() so caplog keeps seeing records"""
    yield
    root = logging.getLogger("tagfill")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)
