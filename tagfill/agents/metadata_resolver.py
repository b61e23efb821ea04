#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Metadata Resolver - ordered fallback chain over lookup sources.

Sources are asked in order with the same (artist guess, title guess).
The first Match wins. NoMatch and LookupFailed both move on to the next
source; they differ only in how they are logged. If every source failed
at the connection level the network itself is considered down and
NetworkUnavailableError is raised for the runner to handle.
"""

import logging
from typing import List, Optional, Sequence

from ..errors import NetworkUnavailableError, SourceLookupError
from ..sources.base import CanonicalMetadata, DataSource, LookupFailed, Match, NoMatch
from .base import BaseAgent


class MetadataResolver(BaseAgent):
    """Resolves canonical artist/album/title through a chain of sources"""

    def __init__(self, sources: Sequence[DataSource], logger: Optional[logging.Logger] = None):
        """
        Args:
            sources: Lookup sources in priority order (primary first)
            logger: Injected logger
        """
        super().__init__(logger)
        self.sources: List[DataSource] = list(sources)

    @property
    def name(self) -> str:
        return "Resolver"

    def resolve(self, artist_guess: Optional[str], title_guess: Optional[str]) -> Optional[CanonicalMetadata]:
        """
        Resolve metadata for a guessed artist and title.

        Args:
            artist_guess: Artist from the filename, may be None
            title_guess: Title from the filename; required

        Returns:
            CanonicalMetadata from the first source that matched, or None

        Raises:
            NetworkUnavailableError: every source failed transiently
        """
        if not title_guess or not title_guess.strip():
            self.log_warning("No title to search for, skipping lookup")
            return None

        unreachable = []

        for source in self.sources:
            query = f"{artist_guess} - {title_guess}" if artist_guess else title_guess
            self.log(f"Searching {source.name} for: {query}")

            try:
                result = source.search_recording(artist_guess, title_guess)
            except SourceLookupError as e:
                result = LookupFailed(e.reason, transient=e.transient)

            if isinstance(result, Match):
                metadata = result.metadata
                self.log(
                    f"Found metadata on {source.name}: {metadata.artist} - "
                    f"{metadata.title} ({metadata.album or 'no album'})"
                )
                return metadata

            if isinstance(result, LookupFailed):
                self.log_warning(f"{source.name} lookup failed: {result.reason}")
                if result.transient:
                    unreachable.append(source.name)
            elif isinstance(result, NoMatch):
                self.log(f"No match on {source.name}")
            else:
                raise TypeError(f"{source.name} returned {result!r}")

        if self.sources and len(unreachable) == len(self.sources):
            raise NetworkUnavailableError(unreachable)

        self.log_warning("Could not find metadata on any source")
        return None
