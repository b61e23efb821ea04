#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
iTunes Search API adapter.
Free, no authentication required.

API Documentation:
https://developer.apple.com/library/archive/documentation/AudioVideo/Conceptual/iTuneSearchAPI/

Rate Limits: ~20 requests per minute recommended
"""

import logging
from typing import Optional

import requests

from ..errors import SourceLookupError
from .base import CanonicalMetadata, DataSource, LookupFailed, LookupResult, Match, NoMatch


class iTunesSource(DataSource):
    """
    iTunes Search API data source.

    Fallback source for track metadata, and first choice for album artwork.
    No authentication required.
    """

    BASE_URL = "https://itunes.apple.com"

    def __init__(self, country: str = "us", rate_limit: float = 0.05,
                 timeout: float = 30, artwork_size: int = 1000,
                 session: Optional[requests.Session] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize iTunes source.

        Args:
            country: Two-letter country code for regional content
            rate_limit: Seconds between requests (default 0.05 = 20/sec)
            timeout: Per-request timeout in seconds
            artwork_size: Edge length in pixels for artwork URLs
        """
        super().__init__(rate_limit, timeout=timeout, session=session, logger=logger)
        self.country = country
        self.artwork_size = artwork_size

    @property
    def name(self) -> str:
        return "itunes"

    def search_recording(self, artist: Optional[str], title: str) -> LookupResult:
        """Search for a single song; the first result wins"""
        term = f"{artist} {title}" if artist else title
        params = {
            "term": term,
            "entity": "song",
            "country": self.country,
            "limit": 1
        }

        try:
            data = self._get_json(f"{self.BASE_URL}/search", params)
        except SourceLookupError as e:
            return LookupFailed(e.reason, transient=e.transient)

        results = data.get("results")
        if not isinstance(results, list):
            return LookupFailed("Malformed response: missing 'results'")

        for item in results:
            if not isinstance(item, dict):
                return LookupFailed("Malformed response: result is not an object")
            if item.get("wrapperType", "track") != "track":
                continue
            track_name = self._text(item.get("trackName"))
            artist_name = self._text(item.get("artistName"))
            if not track_name or not artist_name:
                continue
            return Match(CanonicalMetadata(
                artist=artist_name,
                title=track_name,
                album=self._text(item.get("collectionName")) or None,
                source=self.name
            ))

        return NoMatch()

    def find_cover_url(self, artist: str, album: str) -> Optional[str]:
        """
        Search albums and return the first result's artwork URL.

        Raises:
            SourceLookupError: if the search API fails
        """
        params = {
            "term": f"{artist} {album}",
            "entity": "album",
            "country": self.country,
            "limit": 1
        }
        data = self._get_json(f"{self.BASE_URL}/search", params)

        results = data.get("results", [])
        if not isinstance(results, list):
            raise SourceLookupError(self.name, "Malformed response: 'results' is not a list")

        for item in results:
            if not isinstance(item, dict):
                raise SourceLookupError(self.name, "Malformed response: result is not an object")
            url = self._get_large_artwork(self._text(item.get("artworkUrl100")))
            if url:
                return url

        return None

    def _get_large_artwork(self, url: Optional[str]) -> Optional[str]:
        """
        Convert thumbnail URL to larger artwork.

        iTunes returns 100x100 by default, but supports up to 3000x3000.
        """
        if url:
            size = self.artwork_size
            return url.replace("100x100bb", f"{size}x{size}bb")
        return None
