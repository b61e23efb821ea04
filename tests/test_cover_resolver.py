"""Tests for cover lookup and the cover cache"""

import pytest

from tagfill.agents import CoverResolver
from tagfill.errors import NetworkUnavailableError

from fakes import JPEG_BYTES, PNG_BYTES, ScriptedSource, lookup_error


class TestCoverResolver:

    def test_downloads_and_caches_first_hit(self, cache_dir, logger):
        itunes = ScriptedSource("itunes", cover_url="http://itunes/art.jpg")
        mb = ScriptedSource("musicbrainz", cover_url="http://caa/front.jpg")
        resolver = CoverResolver([itunes, mb], cache_dir=str(cache_dir), logger=logger)

        path = resolver.resolve("Daft Punk", "Discovery")

        assert path.parent == cache_dir
        assert path.suffix == ".jpg"
        assert path.read_bytes() == JPEG_BYTES
        assert itunes.download_calls == ["http://itunes/art.jpg"]
        assert mb.total_calls == 0

    def test_cached_cover_needs_no_network(self, cache_dir, logger):
        source = ScriptedSource("itunes", cover_url="http://itunes/art.jpg")
        resolver = CoverResolver([source], cache_dir=str(cache_dir), logger=logger)

        first = resolver.resolve("Daft Punk", "Discovery")
        second = resolver.resolve("daft punk ", "DISCOVERY")

        assert first == second
        assert len(source.cover_calls) == 1

    def test_png_is_stored_with_png_suffix(self, cache_dir, logger):
        source = ScriptedSource("itunes", cover_url="http://x", cover_data=PNG_BYTES)
        resolver = CoverResolver([source], cache_dir=str(cache_dir), logger=logger)

        assert resolver.resolve("A", "B").suffix == ".png"

    def test_falls_through_missing_and_failing_sources(self, cache_dir, logger):
        broken = ScriptedSource("itunes", cover_error=lookup_error("itunes"))
        empty = ScriptedSource("musicbrainz", cover_url="http://caa", cover_data=None)
        last = ScriptedSource("other", cover_url="http://ok")
        resolver = CoverResolver([broken, empty, last], cache_dir=str(cache_dir), logger=logger)

        path = resolver.resolve("A", "B")

        assert path is not None
        assert empty.download_calls == ["http://caa"]

    def test_not_found_returns_none(self, cache_dir, logger):
        resolver = CoverResolver([ScriptedSource("itunes")], cache_dir=str(cache_dir), logger=logger)

        assert resolver.resolve("A", "B") is None
        assert not cache_dir.exists()

    def test_all_sources_unreachable_raises(self, cache_dir, logger):
        sources = [
            ScriptedSource("itunes", cover_error=lookup_error("itunes", transient=True)),
            ScriptedSource("musicbrainz", cover_error=lookup_error("musicbrainz", transient=True)),
        ]
        resolver = CoverResolver(sources, cache_dir=str(cache_dir), logger=logger)

        with pytest.raises(NetworkUnavailableError):
            resolver.resolve("A", "B")

    def test_cache_key_ignores_case_and_padding(self, cache_dir):
        resolver = CoverResolver([], cache_dir=str(cache_dir))

        assert resolver.cache_key("Air", "Moon Safari") == resolver.cache_key(" air", "MOON SAFARI ")
        assert resolver.cache_key("Air", "Moon Safari") != resolver.cache_key("Air", "Talkie Walkie")
