"""Tests for the per-file reconciliation engine"""

import pytest

from tagfill.agents import Outcome
from tagfill.errors import NetworkUnavailableError, TagStoreError
from tagfill.utilities.tag_store import TagSnapshot

from fakes import JPEG_BYTES, ScriptedSource, failed, lookup_error, match

DAFT = "/music/Daft Punk - One More Time.mp3"


class TestEndToEndScenarios:
    """Full walks through the state machine"""

    def test_empty_file_is_enriched_from_filename(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time", "Discovery"))
        secondary = ScriptedSource("itunes")
        covers = ScriptedSource("itunes-covers", cover_url="http://img/discovery.jpg")
        engine = make_engine([primary, secondary], [covers])

        result = engine.reconcile(DAFT)

        assert result.outcome == Outcome.ENRICHED
        assert primary.search_calls == [("Daft Punk", "One More Time")]
        assert secondary.search_calls == []
        assert tag_store.tag_writes == [(DAFT, "Daft Punk", "Discovery", "One More Time")]
        assert covers.cover_calls == [("Daft Punk", "Discovery")]
        assert tag_store.covers[DAFT] == JPEG_BYTES
        assert result.snapshot == TagSnapshot("Daft Punk", "Discovery", "One More Time", False)
        assert result.tags_written and result.cover_embedded

    def test_complete_file_with_cover_is_skipped(self, make_engine, tag_store):
        tag_store.files["/music/a.mp3"] = TagSnapshot("X", "Y", None, True)
        primary = ScriptedSource("musicbrainz")
        covers = ScriptedSource("itunes", cover_url="http://img")
        engine = make_engine([primary], [covers])

        result = engine.reconcile("/music/a.mp3")

        assert result.outcome == Outcome.SKIPPED
        assert result.reason == "cover_exists"
        assert tag_store.writes == 0
        assert primary.total_calls == 0
        assert covers.total_calls == 0

    def test_unparsable_filename_is_unresolved_without_lookups(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz", match("A", "B", "C"))
        engine = make_engine([primary])

        result = engine.reconcile("/music/track07.mp3")

        assert result.outcome == Outcome.UNRESOLVED
        assert result.reason == "no_title"
        assert primary.total_calls == 0
        assert tag_store.writes == 0

    def test_primary_error_falls_back_to_secondary(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz", lookup_error("musicbrainz"))
        secondary = ScriptedSource("itunes", match("Daft Punk", "One More Time", "Discovery"))
        engine = make_engine([primary, secondary], [ScriptedSource("c", cover_url="http://x")])

        result = engine.reconcile(DAFT)

        assert len(primary.search_calls) == 1
        assert len(secondary.search_calls) == 1
        assert tag_store.tag_writes == [(DAFT, "Daft Punk", "Discovery", "One More Time")]
        assert result.outcome == Outcome.ENRICHED
        assert result.metadata.artist == "Daft Punk"


class TestMetadataStage:

    def test_snapshot_comes_from_reread_not_request(self, make_engine, tag_store):
        """The store may normalise what it is given; the engine must see that"""
        tag_store.transform = lambda value: value.upper()
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time", "Discovery"))
        engine = make_engine([primary])

        result = engine.reconcile(DAFT)

        assert result.snapshot == tag_store.read(DAFT)
        assert result.snapshot.artist == "DAFT PUNK"
        assert tag_store.reads.count(DAFT) >= 2

    def test_match_without_album_stays_unresolved(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time"))
        covers = ScriptedSource("c", cover_url="http://x")
        engine = make_engine([primary], [covers])

        result = engine.reconcile(DAFT)

        assert tag_store.tag_writes == [(DAFT, "Daft Punk", None, "One More Time")]
        assert result.outcome == Outcome.UNRESOLVED
        assert result.reason == "missing_metadata"
        assert result.tags_written
        assert covers.total_calls == 0

    def test_existing_album_survives_partial_write(self, make_engine, tag_store):
        tag_store.files[DAFT] = TagSnapshot(album="Discovery")
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time"))
        engine = make_engine([primary], [ScriptedSource("c", cover_url="http://x")])

        result = engine.reconcile(DAFT)

        assert result.snapshot.album == "Discovery"
        assert result.outcome == Outcome.ENRICHED

    def test_no_match_anywhere_is_unresolved(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz", failed("bad json"))
        secondary = ScriptedSource("itunes")
        engine = make_engine([primary, secondary])

        result = engine.reconcile(DAFT)

        assert result.outcome == Outcome.UNRESOLVED
        assert result.reason == "missing_metadata"
        assert tag_store.writes == 0
        assert len(secondary.search_calls) == 1

    def test_title_only_filename_searches_without_artist(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz")
        engine = make_engine([primary])

        engine.reconcile("/music/03. Harder Better Faster Stronger.mp3")

        assert primary.search_calls == [(None, "Harder Better Faster Stronger")]

    def test_dry_run_writes_nothing(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time", "Discovery"))
        engine = make_engine([primary], dry_run=True)

        result = engine.reconcile(DAFT)

        assert tag_store.writes == 0
        assert result.outcome == Outcome.UNRESOLVED
        assert not result.tags_written


class TestOrderingFlag:
    """Image-first vs. metadata-first ordering"""

    def test_baseline_fills_tags_even_when_cover_exists(self, make_engine, tag_store):
        tag_store.files[DAFT] = TagSnapshot(has_embedded_image=True)
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time", "Discovery"))
        covers = ScriptedSource("c", cover_url="http://x")
        engine = make_engine([primary], [covers])

        result = engine.reconcile(DAFT)

        assert result.outcome == Outcome.SKIPPED
        assert result.tags_written
        assert len(tag_store.tag_writes) == 1
        assert covers.total_calls == 0

    def test_image_first_skips_before_metadata(self, make_engine, tag_store):
        tag_store.files[DAFT] = TagSnapshot(has_embedded_image=True)
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time", "Discovery"))
        engine = make_engine([primary], check_image_first=True)

        result = engine.reconcile(DAFT)

        assert result.outcome == Outcome.SKIPPED
        assert primary.total_calls == 0
        assert tag_store.writes == 0

    @pytest.mark.parametrize("image_first", [True, False])
    def test_complete_file_with_cover_skipped_in_both_orders(self, make_engine, tag_store, image_first):
        tag_store.files["/m/a.mp3"] = TagSnapshot("X", "Y", "Z", True)
        primary = ScriptedSource("musicbrainz")
        engine = make_engine([primary], check_image_first=image_first)

        assert engine.reconcile("/m/a.mp3").outcome == Outcome.SKIPPED
        assert primary.total_calls == 0


class TestCoverStage:

    def test_second_pass_over_enriched_file_is_skipped(self, make_engine, tag_store):
        primary = ScriptedSource("musicbrainz", match("Daft Punk", "One More Time", "Discovery"))
        covers = ScriptedSource("c", cover_url="http://x")
        engine = make_engine([primary], [covers])

        assert engine.reconcile(DAFT).outcome == Outcome.ENRICHED
        writes_before = tag_store.writes

        second = engine.reconcile(DAFT)

        assert second.outcome == Outcome.SKIPPED
        assert tag_store.writes == writes_before
        assert len(primary.search_calls) == 1

    def test_no_cover_found_is_unresolved(self, make_engine, tag_store):
        tag_store.files["/m/a.mp3"] = TagSnapshot("X", "Y")
        covers = ScriptedSource("c", cover_url=None)
        engine = make_engine([], [covers])

        result = engine.reconcile("/m/a.mp3")

        assert result.outcome == Outcome.UNRESOLVED
        assert result.reason == "no_cover"
        assert tag_store.cover_writes == []

    def test_complete_tags_skip_metadata_lookup(self, make_engine, tag_store):
        tag_store.files["/m/a.mp3"] = TagSnapshot("X", "Y")
        primary = ScriptedSource("musicbrainz")
        engine = make_engine([primary], [ScriptedSource("c", cover_url="http://x")])

        result = engine.reconcile("/m/a.mp3")

        assert primary.total_calls == 0
        assert result.outcome == Outcome.ENRICHED


class TestFaultPropagation:

    def test_tag_read_error_propagates(self, make_engine, tag_store):
        tag_store.fail_on["/m/bad.mp3"] = TagStoreError(5, "Cannot read tags", "/m/bad.mp3")
        engine = make_engine()

        with pytest.raises(TagStoreError):
            engine.reconcile("/m/bad.mp3")

    def test_total_outage_propagates(self, make_engine):
        primary = ScriptedSource("musicbrainz", failed("refused", transient=True))
        secondary = ScriptedSource("itunes", lookup_error("itunes", transient=True))
        engine = make_engine([primary, secondary])

        with pytest.raises(NetworkUnavailableError):
            engine.reconcile(DAFT)
