#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base class for lookup source adapters.
All sources (MusicBrainz, iTunes) inherit from this.

A metadata lookup answers with one of three variants:
    Match(metadata)           - best candidate from the provider
    NoMatch()                 - provider reached, nothing found
    LookupFailed(reason, ..)  - provider unreachable or response unusable
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests

from ..errors import SourceLookupError
from ..utilities.logger import get_logger


@dataclass(frozen=True)
class CanonicalMetadata:
    """Authoritative tag data returned by a lookup source"""
    artist: str
    title: str
    album: Optional[str] = None
    source: str = ""


@dataclass(frozen=True)
class Match:
    metadata: CanonicalMetadata


@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class LookupFailed:
    reason: str
    transient: bool = False


LookupResult = Union[Match, NoMatch, LookupFailed]


class DataSource(ABC):
    """
    Abstract base class for lookup sources.

    Sources wrap a public, read-only web API:
    - MusicBrainz: Primary recording metadata, Cover Art Archive images
    - iTunes: Fallback metadata and album artwork
    """

    USER_AGENT = "tagfill/1.0"

    def __init__(self, rate_limit: float = 1.0, timeout: float = 30,
                 session: Optional[requests.Session] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize data source with rate limiting.

        Args:
            rate_limit: Minimum seconds between requests
            timeout: Per-request timeout in seconds
            session: Optional requests session (shared or mocked)
            logger: Logger to report through (defaults to "tagfill.sources")
        """
        self.rate_limit = rate_limit
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or get_logger("sources")
        self._last_request: float = 0

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name identifier"""
        pass

    @abstractmethod
    def search_recording(self, artist: Optional[str], title: str) -> LookupResult:
        """
        Find the best matching recording for a title and optional artist.

        Args:
            artist: Artist guess, may be None
            title: Track title guess

        Returns:
            Match, NoMatch or LookupFailed
        """
        pass

    @abstractmethod
    def find_cover_url(self, artist: str, album: str) -> Optional[str]:
        """
        Locate a front cover image for an album.

        Args:
            artist: Confirmed artist name
            album: Confirmed album title

        Returns:
            Image URL or None if the source has no cover

        Raises:
            SourceLookupError: if the source cannot be queried
        """
        pass

    def download_cover(self, url: str) -> Optional[bytes]:
        """
        Download cover art from URL.

        Args:
            url: Cover art URL

        Returns:
            Image data as bytes, or None if the URL does not serve an image

        Raises:
            SourceLookupError: on transport failure
        """
        response = self._request(url, timeout=max(self.timeout, 60))
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise SourceLookupError(self.name, f"HTTP {response.status_code} for {url}")

        # Verify it's an image
        content_type = response.headers.get('content-type', '')
        if 'image' not in content_type:
            self.log(f"Response is not an image ({content_type})", logging.WARNING)
            return None

        return response.content

    def _get_json(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET a JSON document.

        Raises:
            SourceLookupError: transport failure, error status or bad JSON
        """
        response = self._request(url, params=params)
        if response.status_code >= 400:
            raise SourceLookupError(
                self.name, f"HTTP {response.status_code}",
                transient=response.status_code == 503
            )
        try:
            data = response.json()
        except ValueError as e:
            raise SourceLookupError(self.name, f"Malformed response: {e}")
        if not isinstance(data, dict):
            raise SourceLookupError(self.name, "Malformed response: expected an object")
        return data

    def _text(self, value: Any) -> str:
        """Stripped string field; any other type reads as empty"""
        return value.strip() if isinstance(value, str) else ""

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None,
                 timeout: Optional[float] = None) -> requests.Response:
        """Rate limited GET that maps transport failures to SourceLookupError"""
        self._rate_limit_wait()
        try:
            return self.session.get(url, params=params, timeout=timeout or self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise SourceLookupError(self.name, f"Connection failed: {e}", transient=True)
        except requests.RequestException as e:
            raise SourceLookupError(self.name, f"Request failed: {e}")

    def _rate_limit_wait(self) -> None:
        """Wait if necessary to respect rate limits"""
        if self._last_request > 0:
            elapsed = time.time() - self._last_request
            if elapsed < self.rate_limit:
                time.sleep(self.rate_limit - elapsed)
        self._last_request = time.time()

    def log(self, message: str, level: int = logging.INFO) -> None:
        """Log a message with the source name prefix"""
        self.logger.log(level, f"[{self.name}] {message}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rate_limit={self.rate_limit})"
