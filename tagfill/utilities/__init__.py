# Utilities
# File discovery, tag access, filename parsing and logging setup

from .catalog import FileCatalog
from .filename_parser import ParsedFilenameGuess, parse_filename
from .tag_store import TagSnapshot, TagStore
from .logger import setup_logging, get_logger

__all__ = [
    'FileCatalog',
    'ParsedFilenameGuess',
    'parse_filename',
    'TagSnapshot',
    'TagStore',
    'setup_logging',
    'get_logger'
]
