# Processing Agents
# Metadata resolution, cover resolution and per-file reconciliation

from .base import BaseAgent
from .metadata_resolver import MetadataResolver
from .cover_resolver import CoverResolver
from .reconciler import ReconciliationEngine, ReconcileResult, Outcome

__all__ = [
    'BaseAgent',
    'MetadataResolver',
    'CoverResolver',
    'ReconciliationEngine',
    'ReconcileResult',
    'Outcome'
]
