#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Resumable Runner - drives the reconciliation engine over a whole catalog.

Usage:
    from tagfill.orchestrator import create_runner, ConfigManager

    runner = create_runner(ConfigManager('tagfill.yaml'))
    summary = runner.run_catalog('/path/to/music')

A pass walks the catalog in order and marks every file that reaches a
terminal outcome as processed. If anything escapes a pass (tag I/O error,
network outage, vanished library), the runner waits a cooldown, rescans
and starts another pass, skipping files already processed. Cooldowns grow
by backoff_factor up to max_cooldown_seconds; after max_restarts faulted
passes in a row it gives up.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..agents import CoverResolver, MetadataResolver, Outcome, ReconciliationEngine
from ..errors import ConfigError, RetriesExhaustedError
from ..sources import DataSource, MusicBrainzSource, iTunesSource
from ..utilities.catalog import FileCatalog
from ..utilities.logger import get_logger
from ..utilities.tag_store import TagStore
from .config import ConfigManager
from .state import ProcessedSet


@dataclass
class RunSummary:
    """Counts for one run_catalog call"""
    total: int = 0
    attempts: int = 0
    already_processed: int = 0
    outcomes: Dict[str, int] = field(
        default_factory=lambda: {outcome.value: 0 for outcome in Outcome}
    )

    @property
    def processed(self) -> int:
        return sum(self.outcomes.values())


class ResumableRunner:
    """
    Sequential catalog driver with a bounded-backoff fault boundary.

    Args:
        catalog: File enumerator
        engine: Per-file reconciliation engine
        processed: Set of settled paths (may be journal-backed)
        cooldown_seconds: Wait before the first restart
        backoff_factor: Cooldown multiplier after each further fault
        max_cooldown_seconds: Upper bound for the cooldown
        max_restarts: Faulted passes allowed before giving up (None = unbounded)
        sleep: Sleep function, replaceable in tests
        logger: Injected logger
    """

    def __init__(self, catalog: FileCatalog, engine: ReconciliationEngine,
                 processed: Optional[ProcessedSet] = None,
                 cooldown_seconds: float = 300, backoff_factor: float = 2.0,
                 max_cooldown_seconds: float = 3600, max_restarts: Optional[int] = 10,
                 sleep: Callable[[float], None] = time.sleep,
                 logger: Optional[logging.Logger] = None):
        self.catalog = catalog
        self.engine = engine
        self.processed = processed if processed is not None else ProcessedSet()
        self.cooldown_seconds = cooldown_seconds
        self.backoff_factor = backoff_factor
        self.max_cooldown_seconds = max_cooldown_seconds
        self.max_restarts = max_restarts
        self.sleep = sleep
        self.logger = logger or get_logger("runner")

    def run_catalog(self, root: str) -> RunSummary:
        """
        Process every file under root until one pass completes cleanly.

        Args:
            root: Library root path

        Returns:
            RunSummary of the run

        Raises:
            CatalogError: root is invalid at startup
            RetriesExhaustedError: too many faulted passes
        """
        summary = RunSummary()

        self.logger.info(f"Scanning: {root}")
        files = self.catalog.scan(root)
        self.logger.info(f"Found {len(files)} audio files")

        faults = 0
        while True:
            summary.attempts += 1
            try:
                if faults:
                    files = self.catalog.scan(root)
                self._run_pass(files, summary)
                break
            except Exception as e:
                faults += 1
                self.logger.error(f"Pass {summary.attempts} aborted: {e}")
                if self.max_restarts is not None and faults > self.max_restarts:
                    raise RetriesExhaustedError(faults, e) from e

                delay = self.cooldown_for(faults)
                self.logger.info(
                    f"Restarting in {delay:.0f}s ({len(self.processed)} files already settled)"
                )
                self.sleep(delay)

        self.logger.info(
            "Pass complete: "
            + ", ".join(f"{name}={count}" for name, count in summary.outcomes.items())
            + f", already processed={summary.already_processed}"
        )
        return summary

    def cooldown_for(self, faults: int) -> float:
        """Cooldown before restart number `faults` (1-based)"""
        delay = self.cooldown_seconds * (self.backoff_factor ** (faults - 1))
        return min(delay, self.max_cooldown_seconds)

    def _run_pass(self, files: List[str], summary: RunSummary) -> None:
        summary.total = len(files)
        summary.already_processed = 0

        for i, path in enumerate(files, 1):
            if path in self.processed:
                summary.already_processed += 1
                continue

            self.logger.info(f"({i}/{len(files)}) Processing: {path}")
            result = self.engine.reconcile(path)

            self.processed.add(path, result.outcome.value)
            summary.outcomes[result.outcome.value] += 1


def create_sources(config: ConfigManager, names: List[str],
                   logger: Optional[logging.Logger] = None,
                   built: Optional[Dict[str, DataSource]] = None) -> List[DataSource]:
    """
    Build source adapters by name, sharing one instance per name.

    Args:
        config: Loaded configuration
        names: Source names in priority order
        logger: Injected logger
        built: Instances to reuse, filled in as new ones are created

    Raises:
        ConfigError: unknown source name
    """
    built = {} if built is None else built
    sources = []

    for name in names:
        if name not in built:
            settings = config.get_api_settings(name)
            if name == 'musicbrainz':
                built[name] = MusicBrainzSource(
                    user_agent=settings.get('user_agent', 'tagfill/1.0'),
                    rate_limit=float(settings.get('rate_limit', 1.0)),
                    timeout=float(settings.get('timeout', 30)),
                    logger=logger
                )
            elif name == 'itunes':
                built[name] = iTunesSource(
                    country=settings.get('country', 'us'),
                    rate_limit=float(settings.get('rate_limit', 0.05)),
                    timeout=float(settings.get('timeout', 30)),
                    artwork_size=config.cover_size,
                    logger=logger
                )
            else:
                raise ConfigError(f"Unknown source: {name}")
        sources.append(built[name])

    return sources


def create_runner(config: ConfigManager, logger: Optional[logging.Logger] = None,
                  sleep: Callable[[float], None] = time.sleep) -> ResumableRunner:
    """Wire up a runner and its collaborators from configuration"""
    logger = logger or get_logger()

    # One adapter per provider: rate limits span both chains
    built: Dict[str, DataSource] = {}
    metadata_sources = create_sources(config, config.metadata_sources, logger, built)
    cover_sources = create_sources(config, config.cover_sources, logger, built)

    engine = ReconciliationEngine(
        tag_store=TagStore(),
        resolver=MetadataResolver(metadata_sources, logger=logger),
        cover_resolver=CoverResolver(cover_sources, config.cover_cache_dir, logger=logger),
        check_image_first=config.check_image_first,
        dry_run=config.dry_run,
        logger=logger
    )

    # A dry run settles nothing for good
    processed = ProcessedSet(config.journal_path, logger=logger, read_only=config.dry_run)
    processed.load()

    return ResumableRunner(
        catalog=FileCatalog(config.extensions),
        engine=engine,
        processed=processed,
        cooldown_seconds=config.cooldown_seconds,
        backoff_factor=config.backoff_factor,
        max_cooldown_seconds=config.max_cooldown_seconds,
        max_restarts=config.max_restarts,
        sleep=sleep,
        logger=logger
    )
