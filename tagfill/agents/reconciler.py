#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Reconciliation Engine - brings one file's tags and artwork to a settled state.

Per-file flow:
    1. Read current tags
    2. (check_image_first only) Existing cover -> Skipped
    3. Artist or album missing -> parse filename -> resolve -> write -> re-read
    4. Artist or album still missing -> Unresolved
    5. Existing cover -> Skipped
    6. Resolve cover -> embed -> Enriched, or Unresolved if none found

Nothing is retried here. Tag I/O errors and network outages propagate to
the runner; every other "metadata not available" case ends in an outcome.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..sources.base import CanonicalMetadata
from ..utilities.filename_parser import ParsedFilenameGuess, parse_filename
from ..utilities.tag_store import TagSnapshot, TagStore
from .base import BaseAgent
from .cover_resolver import CoverResolver
from .metadata_resolver import MetadataResolver


class Outcome(Enum):
    """Terminal state of a file within a run"""
    SKIPPED = "skipped"
    ENRICHED = "enriched"
    UNRESOLVED = "unresolved"


@dataclass
class ReconcileResult:
    """What happened to one file"""
    path: str
    outcome: Outcome
    reason: str
    snapshot: TagSnapshot
    tags_written: bool = False
    cover_embedded: bool = False
    metadata: Optional[CanonicalMetadata] = None


class ReconciliationEngine(BaseAgent):
    """
    Settles a single file: fills missing tags, then embeds a cover.

    Args:
        tag_store: Tag reader/writer
        resolver: Metadata fallback chain
        cover_resolver: Cover image lookup
        check_image_first: Skip files with an embedded image before
            looking at their text tags
        dry_run: Resolve everything but write nothing
        parser: Filename heuristic, parse_filename by default
        logger: Injected logger
    """

    def __init__(self, tag_store: TagStore, resolver: MetadataResolver,
                 cover_resolver: CoverResolver, check_image_first: bool = False,
                 dry_run: bool = False,
                 parser: Callable[[str], ParsedFilenameGuess] = parse_filename,
                 logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.tag_store = tag_store
        self.resolver = resolver
        self.cover_resolver = cover_resolver
        self.check_image_first = check_image_first
        self.dry_run = dry_run
        self.parser = parser

    @property
    def name(self) -> str:
        return "Reconcile"

    def reconcile(self, path: str) -> ReconcileResult:
        """
        Run one file through the pipeline.

        Args:
            path: Audio file path

        Returns:
            ReconcileResult with the terminal outcome

        Raises:
            TagStoreError: tags could not be read or written
            NetworkUnavailableError: no lookup source was reachable
        """
        tag = self.tag_store.read(path)

        if self.check_image_first and tag.has_embedded_image:
            self.log("Cover already exists")
            return ReconcileResult(path, Outcome.SKIPPED, "cover_exists", tag)

        metadata = None
        tags_written = False

        if not tag.has_artist_and_album:
            self.log("Missing metadata, attempting to fetch from filename")
            parsed = self.parser(path)

            if parsed.title:
                metadata = self.resolver.resolve(parsed.artist, parsed.title)
                if metadata:
                    tags_written = self._write_tags(path, metadata)
                    # The store is authoritative, not what was requested
                    tag = self.tag_store.read(path)
            else:
                self.log_warning("Could not parse title from filename")
                return self._finish(path, Outcome.UNRESOLVED, "no_title", tag)

        if not tag.has_artist_and_album:
            self.log_warning("Still missing metadata, skipping cover search")
            return self._finish(path, Outcome.UNRESOLVED, "missing_metadata", tag,
                                tags_written=tags_written, metadata=metadata)

        if tag.has_embedded_image:
            self.log("Cover already exists")
            return self._finish(path, Outcome.SKIPPED, "cover_exists", tag,
                                tags_written=tags_written, metadata=metadata)

        cover_path = self.cover_resolver.resolve(tag.artist, tag.album)
        if not cover_path:
            self.log_warning("No cover found")
            return self._finish(path, Outcome.UNRESOLVED, "no_cover", tag,
                                tags_written=tags_written, metadata=metadata)

        if self.dry_run:
            self.log(f"[dry run] Would embed cover {cover_path}")
            return self._finish(path, Outcome.UNRESOLVED, "dry_run", tag,
                                tags_written=tags_written, metadata=metadata)

        with open(cover_path, 'rb') as f:
            image_data = f.read()

        self.tag_store.write_cover(path, image_data)
        self.log("Cover embedded")
        return self._finish(path, Outcome.ENRICHED, "cover_embedded", tag,
                            tags_written=tags_written, cover_embedded=True,
                            metadata=metadata)

    def _write_tags(self, path: str, metadata: CanonicalMetadata) -> bool:
        if self.dry_run:
            self.log(
                f"[dry run] Would write: {metadata.artist} - {metadata.title} "
                f"({metadata.album or 'no album'})"
            )
            return False

        self.tag_store.write_tags(
            path,
            artist=metadata.artist,
            album=metadata.album or None,
            title=metadata.title
        )
        return True

    def _finish(self, path: str, outcome: Outcome, reason: str, tag: TagSnapshot,
                **details) -> ReconcileResult:
        self.logger.debug(f"[{self.name}] {path}: {outcome.value} ({reason})")
        return ReconcileResult(path, outcome, reason, tag, **details)
