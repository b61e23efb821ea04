# tagfill
# Fills missing MP3 tags and cover art from MusicBrainz and iTunes.

__version__ = "1.0.0"
