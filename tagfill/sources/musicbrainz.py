#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MusicBrainz API adapter.
Free, no authentication required, but needs user agent.

API Documentation:
https://musicbrainz.org/doc/MusicBrainz_API

Rate Limits: 1 request per second per IP
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import SourceLookupError
from .base import CanonicalMetadata, DataSource, LookupFailed, LookupResult, Match, NoMatch


class MusicBrainzSource(DataSource):
    """
    MusicBrainz API data source.

    Primary source for recording metadata. Cover images come from the
    Cover Art Archive, keyed by MusicBrainz release ID.
    """

    BASE_URL = "https://musicbrainz.org/ws/2"
    COVER_ART_URL = "https://coverartarchive.org"

    def __init__(self, user_agent: str = "tagfill/1.0", rate_limit: float = 1.0,
                 timeout: float = 30, cover_size: int = 1200,
                 session: Optional[requests.Session] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize MusicBrainz source.

        Args:
            user_agent: User agent string (required by API)
            rate_limit: Seconds between requests (1.0 required by API)
            timeout: Per-request timeout in seconds
            cover_size: Cover Art Archive thumbnail size (250, 500 or 1200)
        """
        super().__init__(rate_limit, timeout=timeout, session=session, logger=logger)
        self.user_agent = user_agent
        self.cover_size = cover_size
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json"
        })

    @property
    def name(self) -> str:
        return "musicbrainz"

    def search_recording(self, artist: Optional[str], title: str) -> LookupResult:
        """
        Search recordings by title and optional artist.

        Only the top-scored recording is requested; its first official
        release (or first release of any status) supplies the album.
        """
        query = f'recording:"{self._escape(title)}"'
        if artist:
            query += f' AND artist:"{self._escape(artist)}"'

        params = {
            "query": query,
            "fmt": "json",
            "limit": 1
        }

        try:
            data = self._get_json(f"{self.BASE_URL}/recording", params)
        except SourceLookupError as e:
            return LookupFailed(e.reason, transient=e.transient)

        recordings = data.get("recordings")
        if not isinstance(recordings, list):
            return LookupFailed("Malformed response: missing 'recordings'")
        if not recordings:
            return NoMatch()

        recording = recordings[0]
        if not isinstance(recording, dict):
            return LookupFailed("Malformed response: recording is not an object")

        artist_credit = recording.get("artist-credit", [])
        if not isinstance(artist_credit, list):
            return LookupFailed("Malformed response: 'artist-credit' is not a list")

        found_title = self._text(recording.get("title"))
        found_artist = self._credit_name(artist_credit)
        if not found_title or not found_artist:
            return NoMatch()

        return Match(CanonicalMetadata(
            artist=found_artist,
            title=found_title,
            album=self._pick_album(recording.get("releases", [])),
            source=self.name
        ))

    def find_cover_url(self, artist: str, album: str) -> Optional[str]:
        """
        Find the release for artist/album and return its front cover URL.

        Raises:
            SourceLookupError: if MusicBrainz or the Cover Art Archive fails
        """
        params = {
            "query": f'release:"{self._escape(album)}" AND artist:"{self._escape(artist)}"',
            "fmt": "json",
            "limit": 1
        }
        data = self._get_json(f"{self.BASE_URL}/release", params)

        releases = data.get("releases", [])
        if not isinstance(releases, list):
            raise SourceLookupError(self.name, "Malformed response: 'releases' is not a list")
        if not releases:
            return None
        if not isinstance(releases[0], dict):
            raise SourceLookupError(self.name, "Malformed response: release is not an object")

        release_id = self._text(releases[0].get("id"))
        if not release_id:
            return None

        return self.get_cover_url(release_id)

    def get_cover_url(self, release_id: str) -> Optional[str]:
        """
        Get cover art URL from Cover Art Archive.

        Args:
            release_id: MusicBrainz release ID

        Returns:
            URL to front cover image, or None if the release has no art
        """
        response = self._request(f"{self.COVER_ART_URL}/release/{release_id}")
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise SourceLookupError("coverartarchive", f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise SourceLookupError("coverartarchive", f"Malformed response: {e}")

        images = data.get("images", []) if isinstance(data, dict) else None
        if not isinstance(images, list):
            raise SourceLookupError("coverartarchive", "Malformed response: expected an image list")

        for image in images:
            if not isinstance(image, dict):
                raise SourceLookupError("coverartarchive", "Malformed response: image is not an object")
            if image.get("front"):
                # Get sized thumbnail or original
                thumbnails = image.get("thumbnails")
                if not isinstance(thumbnails, dict):
                    thumbnails = {}
                return (
                    self._text(thumbnails.get(str(self.cover_size))) or
                    self._text(thumbnails.get("large")) or
                    self._text(image.get("image")) or
                    None
                )

        return None

    def _credit_name(self, artist_credit: List[Dict[str, Any]]) -> str:
        """Join an artist-credit list into a display name"""
        parts = []
        for credit in artist_credit:
            if isinstance(credit, dict):
                parts.append(self._text(credit.get("name")))
                joinphrase = credit.get("joinphrase")
                parts.append(joinphrase if isinstance(joinphrase, str) else "")
        return "".join(parts).strip()

    def _pick_album(self, releases: List[Dict[str, Any]]) -> Optional[str]:
        """Prefer the first official release, else the first listed"""
        if not isinstance(releases, list):
            return None
        titled = [r for r in releases if isinstance(r, dict) and self._text(r.get("title"))]
        if not titled:
            return None
        for release in titled:
            if release.get("status") == "Official":
                return self._text(release["title"])
        return self._text(titled[0]["title"])

    def _escape(self, value: str) -> str:
        """Escape characters that break a quoted Lucene term"""
        return value.replace("\\", "\\\\").replace('"', '\\"')
