#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Cover Resolver - finds a front cover image for a confirmed artist/album.

Priority: local cover cache -> iTunes (high quality) -> Cover Art Archive

Downloaded images are kept in the cache directory so that every track of
an album after the first reuses the same file without touching the network.
"""

import hashlib
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import NetworkUnavailableError, SourceLookupError
from ..sources.base import DataSource
from .base import BaseAgent


PNG_MAGIC = b'\x89PNG\r\n\x1a\n'


class CoverResolver(BaseAgent):
    """Locates cover art by artist and album, caching downloads on disk"""

    def __init__(self, sources: Sequence[DataSource], cache_dir: str = ".cover-cache",
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            sources: Cover sources in priority order
            cache_dir: Directory for downloaded images
            logger: Injected logger
        """
        super().__init__(logger)
        self.sources: List[DataSource] = list(sources)
        self.cache_dir = Path(cache_dir)

    @property
    def name(self) -> str:
        return "Cover"

    def resolve(self, artist: str, album: str) -> Optional[Path]:
        """
        Find a cover image file for the album.

        Args:
            artist: Confirmed artist tag
            album: Confirmed album tag

        Returns:
            Path to a local image file, or None if no source has one

        Raises:
            NetworkUnavailableError: every source failed transiently
            OSError: the image could not be written to the cache
        """
        cached = self._find_cached(artist, album)
        if cached:
            self.log(f"Using cached cover: {cached.name}")
            return cached

        unreachable = []

        for source in self.sources:
            try:
                url = source.find_cover_url(artist, album)
                if not url:
                    self.log(f"No cover on {source.name}")
                    continue

                image_data = source.download_cover(url)
            except SourceLookupError as e:
                self.log_warning(f"{source.name} cover lookup failed: {e.reason}")
                if e.transient:
                    unreachable.append(source.name)
                continue

            if not image_data:
                self.log_warning(f"Could not download cover from {source.name}")
                continue

            path = self._store(artist, album, image_data)
            self.log(f"Downloaded cover from {source.name} ({len(image_data) // 1024}KB)")
            return path

        if self.sources and len(unreachable) == len(self.sources):
            raise NetworkUnavailableError(unreachable)

        return None

    def cache_key(self, artist: str, album: str) -> str:
        """Stable file stem for an artist/album pair"""
        key = f"{artist.strip().lower()}|{album.strip().lower()}"
        return hashlib.md5(key.encode('utf-8')).hexdigest()[:12]

    def _find_cached(self, artist: str, album: str) -> Optional[Path]:
        stem = self.cache_key(artist, album)
        for ext in ('.jpg', '.png'):
            path = self.cache_dir / f"{stem}{ext}"
            if path.is_file() and path.stat().st_size > 0:
                return path
        return None

    def _store(self, artist: str, album: str, image_data: bytes) -> Path:
        ext = '.png' if image_data[:8] == PNG_MAGIC else '.jpg'
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.cache_dir / f"{self.cache_key(artist, album)}{ext}"

        # Cache entries appear only once fully written
        tmp_path = path.with_suffix(ext + '.part')
        with open(tmp_path, 'wb') as f:
            f.write(image_data)
        tmp_path.replace(path)
        return path
