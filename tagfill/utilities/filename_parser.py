#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Derive an (artist, title) guess from an audio filename.

Handles names like:
    "Daft Punk - One More Time.mp3"       -> artist + title
    "01 - Daft Punk - One More Time.mp3"  -> artist + title
    "07. One More Time.mp3"               -> title only
    "311 - Amber.mp3"                     -> artist + title
    "track07.mp3"                         -> nothing
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ParsedFilenameGuess:
    """Best guess from a filename; either field may be None"""
    artist: Optional[str] = None
    title: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.artist and not self.title


# Leading track number patterns, tried in order. A bare unpadded number
# followed by a space is left alone: "50 Cent", "2 Unlimited".
TRACK_PREFIX_PATTERNS = [
    r'^\d+-\d+\s+',               # "1-01 Song"
    r'^track\s*\d+\s*[-.]?\s*',   # "Track 01 Song", "track07"
    r'^\d{1,3}\s*[.)]\s*',        # "01. Song", "1) Song"
    r'^0\d{1,2}\s+',              # "01 Song", "01 - Song"
]

# Left of a separator, this reads as a track number rather than an artist
TRACK_NUMBER = re.compile(r'^0?\d{1,2}$')

# Parenthesised suffixes that are never part of a title
NOISE_WORDS = r'official|audio|video|lyrics?|visualizer|hd|hq'

SEPARATOR = re.compile(r'\s+[-–—]\s+')


def parse_filename(path) -> ParsedFilenameGuess:
    """
    Parse artist and title from a file path.

    Never raises; worst case is an empty guess.

    Args:
        path: File path (str or Path)

    Returns:
        ParsedFilenameGuess
    """
    try:
        name = Path(str(path)).stem
    except (TypeError, ValueError):
        return ParsedFilenameGuess()

    name = _clean(name)
    name = _strip_track_prefix(name)

    parts = SEPARATOR.split(name, maxsplit=1)
    if len(parts) == 2 and TRACK_NUMBER.match(_tidy(parts[0])):
        # "7 - Title" or "7 - Artist - Title"
        name = parts[1]
        parts = SEPARATOR.split(name, maxsplit=1)

    if len(parts) == 2:
        artist, title = _tidy(parts[0]), _tidy(parts[1])
        if _has_name(artist) and _has_text(title):
            return ParsedFilenameGuess(artist=artist, title=title)
        # One side empty: fall through and use whatever text is left
        name = artist if _has_name(artist) else title

    title = _tidy(name)
    if not _has_text(title):
        return ParsedFilenameGuess()
    return ParsedFilenameGuess(title=title)


def _clean(name: str) -> str:
    """Normalise separators and drop bracketed noise"""
    name = name.replace("_", " ")
    name = re.sub(r'\s*\[[^\]]*\]', '', name)
    name = re.sub(rf'\s*\((?:[^)]*\b(?:{NOISE_WORDS})\b[^)]*)\)', '', name, flags=re.IGNORECASE)
    return ' '.join(name.split())


def _strip_track_prefix(name: str) -> str:
    for pattern in TRACK_PREFIX_PATTERNS:
        stripped = re.sub(pattern, '', name, count=1, flags=re.IGNORECASE)
        if stripped != name:
            return stripped
    return name


def _tidy(value: str) -> str:
    return value.strip(" -.–—")


def _has_text(value: Optional[str]) -> bool:
    """A usable title needs at least one letter"""
    return bool(value) and any(ch.isalpha() for ch in value)


def _has_name(value: Optional[str]) -> bool:
    """Artists may be all digits ("311")"""
    return bool(value) and any(ch.isalnum() for ch in value)
