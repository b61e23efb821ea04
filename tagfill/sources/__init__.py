# Lookup Source Adapters
# Adapters for MusicBrainz and iTunes

from .base import (
    DataSource, CanonicalMetadata, Match, NoMatch, LookupFailed, LookupResult
)
from .musicbrainz import MusicBrainzSource
from .itunes import iTunesSource

__all__ = [
    'DataSource',
    'CanonicalMetadata',
    'Match',
    'NoMatch',
    'LookupFailed',
    'LookupResult',
    'MusicBrainzSource',     # Priority 1 - open recording database
    'iTunesSource',          # Priority 2 - storefront search, good artwork
]
