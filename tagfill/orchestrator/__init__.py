# Orchestration
# Configuration, processed-file state and the resumable catalog runner

from .config import ConfigManager
from .state import ProcessedSet
from .runner import ResumableRunner, RunSummary, create_runner, create_sources

__all__ = [
    'ConfigManager',
    'ProcessedSet',
    'ResumableRunner',
    'RunSummary',
    'create_runner',
    'create_sources'
]
