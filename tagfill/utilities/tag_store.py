#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ID3 tag access for MP3 files.

Text fields go through EasyID3; cover art is read and written as APIC
frames on the raw ID3 tag. Files without an ID3 header read as empty and
get a header on first write.
"""

import errno
from dataclasses import dataclass
from typing import Optional

from mutagen import MutagenError
from mutagen.easyid3 import EasyID3
from mutagen.id3 import APIC, ID3, ID3NoHeaderError

from ..errors import TagStoreError


@dataclass(frozen=True)
class TagSnapshot:
    """Tag state of one file at the moment it was read"""
    artist: Optional[str] = None
    album: Optional[str] = None
    title: Optional[str] = None
    has_embedded_image: bool = False

    @property
    def has_artist_and_album(self) -> bool:
        return bool(self.artist) and bool(self.album)


PNG_MAGIC = b'\x89PNG\r\n\x1a\n'


class TagStore:
    """Reads and writes artist/album/title and the front cover of MP3 files"""

    def read(self, path: str) -> TagSnapshot:
        """
        Read the current tag snapshot.

        Raises:
            TagStoreError: if the file or its tag cannot be read
        """
        try:
            audio = EasyID3(path)
            tags = ID3(path)
        except ID3NoHeaderError:
            return TagSnapshot()
        except (MutagenError, OSError) as e:
            raise TagStoreError(errno.EIO, f"Cannot read tags: {e}", path)

        return TagSnapshot(
            artist=self._get_first(audio.get('artist')),
            album=self._get_first(audio.get('album')),
            title=self._get_first(audio.get('title')),
            has_embedded_image=bool(tags.getall('APIC'))
        )

    def write_tags(self, path: str, artist: Optional[str] = None,
                   album: Optional[str] = None, title: Optional[str] = None) -> None:
        """
        Update text fields; fields passed as None are left untouched.

        Raises:
            TagStoreError: on write failure
        """
        updates = {'artist': artist, 'album': album, 'title': title}
        updates = {k: v for k, v in updates.items() if v}
        if not updates:
            return

        try:
            try:
                audio = EasyID3(path)
            except ID3NoHeaderError:
                audio = EasyID3()
            for key, value in updates.items():
                audio[key] = value
            audio.save(path)
        except (MutagenError, OSError) as e:
            raise TagStoreError(errno.EIO, f"Cannot write tags: {e}", path)

    def write_cover(self, path: str, image_data: bytes) -> None:
        """
        Replace any embedded pictures with a single front cover.

        Raises:
            TagStoreError: on write failure
        """
        mime_type = 'image/png' if image_data[:8] == PNG_MAGIC else 'image/jpeg'

        try:
            try:
                tags = ID3(path)
            except ID3NoHeaderError:
                tags = ID3()

            # Remove existing cover art
            tags.delall('APIC')
            tags.add(
                APIC(
                    encoding=3,  # UTF-8
                    mime=mime_type,
                    type=3,  # Front cover
                    desc='Cover',
                    data=image_data
                )
            )
            tags.save(path)
        except (MutagenError, OSError) as e:
            raise TagStoreError(errno.EIO, f"Cannot write cover: {e}", path)

    def _get_first(self, value) -> Optional[str]:
        """First element of a tag list, with blanks treated as missing"""
        if isinstance(value, list):
            value = value[0] if value else None
        if value is None:
            return None
        value = str(value).strip()
        return value or None
