"""
Stream pool tests: TTL, cached-stream picks, sequential replenishment.
"""

import asyncio
import json
import random
import pytest

from music_on_done.core.cache.models import PlaylistEntry, StreamCacheRecord, now_ms
from music_on_done.core.cache.stream_cache import (
    STREAM_POOL_TARGET,
    STREAM_TTL_MINUTES,
    get_valid_stream_entries,
    is_stream_entry_valid,
    load_stream_cache,
    pick_track_with_cached_stream,
    read_stream_cache,
    replenish_stream_pool,
    stream_cache_for,
    write_stream_cache,
)
from music_on_done.core.errors import CacheReadError

from conftest import FakeResolver, PLAYLIST_URL, MINUTE_MS, make_entries, make_stream


TTL_MS = STREAM_TTL_MINUTES * MINUTE_MS


class TestStreamPersistence:

    def test_round_trip(self, tmp_path, entries):
        path = tmp_path / "streams.json"
        record = StreamCacheRecord(
            entries=[make_stream(t, resolved_at=1700000000000 + i) for i, t in enumerate(entries[:3])],
            playlist_url=PLAYLIST_URL,
        )

        write_stream_cache(path, record)

        assert read_stream_cache(path) == record

    def test_file_is_human_readable_json(self, tmp_path, entries):
        path = tmp_path / "streams.json"
        write_stream_cache(path, StreamCacheRecord(entries=[make_stream(entries[0], 5)], playlist_url=PLAYLIST_URL))

        raw = json.loads(path.read_text())
        assert raw["playlistUrl"] == PLAYLIST_URL
        assert raw["entries"][0] == {
            "trackId": "t1",
            "trackUrl": entries[0].url,
            "streamUrl": f"{entries[0].url}#stream",
            "resolvedAt": 5,
        }

    def test_duplicate_track_ids_collapse_on_read(self, tmp_path, entries):
        path = tmp_path / "streams.json"
        stream = make_stream(entries[0], 5).to_dict()
        path.write_text(json.dumps({"entries": [stream, dict(stream, streamUrl="other")], "playlistUrl": PLAYLIST_URL}))

        record = read_stream_cache(path)
        assert len(record.entries) == 1
        assert record.entries[0].stream_url == stream["streamUrl"]

    def test_missing_or_corrupt_is_none(self, tmp_path):
        assert read_stream_cache(tmp_path / "nope.json") is None
        corrupt = tmp_path / "bad.json"
        corrupt.write_text("nope")
        assert read_stream_cache(corrupt) is None
        assert isinstance(load_stream_cache(corrupt).error, CacheReadError)

    @pytest.mark.parametrize("resolved_at", ["Infinity", "-Infinity", "1e400"])
    def test_non_finite_timestamp_is_none(self, tmp_path, resolved_at):
        path = tmp_path / "streams.json"
        path.write_text(
            '{"entries": [{"trackId": "t1", "trackUrl": "u", "streamUrl": "s", '
            f'"resolvedAt": {resolved_at}}}], "playlistUrl": "x"}}'
        )

        assert read_stream_cache(path) is None
        assert isinstance(load_stream_cache(path).error, CacheReadError)


class TestStreamValidity:

    def test_exactly_ttl_invalid(self, entries):
        now = 10_000_000_000
        assert not is_stream_entry_valid(make_stream(entries[0], now - TTL_MS), now=now)

    def test_just_under_ttl_valid(self, entries):
        now = 10_000_000_000
        assert is_stream_entry_valid(make_stream(entries[0], now - TTL_MS + 1), now=now)
        assert is_stream_entry_valid(make_stream(entries[0], now - TTL_MS + MINUTE_MS), now=now)

    def test_valid_entries_filters_expired(self, entries):
        now = 10_000_000_000
        fresh = make_stream(entries[0], now)
        stale = make_stream(entries[1], now - TTL_MS - 1)
        record = StreamCacheRecord(entries=[fresh, stale], playlist_url=PLAYLIST_URL)

        assert get_valid_stream_entries(record, now=now) == [fresh]

    def test_stream_cache_for_matching_playlist(self, entries):
        record = StreamCacheRecord(entries=[make_stream(entries[0])], playlist_url=PLAYLIST_URL)
        assert stream_cache_for(record, PLAYLIST_URL) is record

    def test_stream_cache_for_other_playlist_is_empty(self, entries):
        record = StreamCacheRecord(entries=[make_stream(entries[0])], playlist_url="https://example.com/old")
        fresh = stream_cache_for(record, PLAYLIST_URL)
        assert fresh.entries == []
        assert fresh.playlist_url == PLAYLIST_URL

    def test_stream_cache_for_none(self):
        assert stream_cache_for(None, PLAYLIST_URL) == StreamCacheRecord(entries=[], playlist_url=PLAYLIST_URL)


class TestPickTrackWithCachedStream:

    def test_empty_pool_returns_none(self, entries, empty_pool):
        assert pick_track_with_cached_stream(entries, empty_pool) is None

    def test_disjoint_ids_return_none(self, entries):
        """Unexpired streams for tracks no longer in the playlist are never served."""
        gone = [PlaylistEntry(id=f"gone-{t.id}", title=t.title, duration=t.duration, url=t.url) for t in make_entries(3)]
        record = StreamCacheRecord(entries=[make_stream(t) for t in gone], playlist_url=PLAYLIST_URL)

        assert pick_track_with_cached_stream(entries, record) is None

    def test_expired_only_returns_none(self, entries):
        record = StreamCacheRecord(
            entries=[make_stream(entries[0], now_ms() - TTL_MS - 1)],
            playlist_url=PLAYLIST_URL,
        )
        assert pick_track_with_cached_stream(entries, record) is None

    def test_pick_returns_matching_pair(self, entries):
        record = StreamCacheRecord(entries=[make_stream(entries[2])], playlist_url=PLAYLIST_URL)

        pick = pick_track_with_cached_stream(entries, record)

        assert pick.track == entries[2]
        assert pick.stream.track_id == entries[2].id

    def test_pick_only_from_intersection(self, entries):
        outsider = make_stream(PlaylistEntry(id="zz", title="", duration=0, url="u"))
        inside = [make_stream(entries[1]), make_stream(entries[4])]
        record = StreamCacheRecord(entries=[outsider, *inside], playlist_url=PLAYLIST_URL)
        rng = random.Random(7)

        picked = {pick_track_with_cached_stream(entries, record, rng=rng).track.id for _ in range(50)}

        assert picked == {"t2", "t5"}


class TestReplenishStreamPool:

    @pytest.mark.asyncio
    async def test_fills_empty_pool_to_target(self, entries, empty_pool):
        resolver = FakeResolver()

        updated = await replenish_stream_pool(entries, empty_pool, PLAYLIST_URL, resolver=resolver)

        assert len(updated.entries) == STREAM_POOL_TARGET
        assert [e.track_id for e in updated.entries] == ["t1", "t2", "t3", "t4", "t5"]
        assert resolver.calls == [t.url for t in entries[:5]]

    @pytest.mark.asyncio
    async def test_failures_skipped_scenario(self):
        """Tracks 1-2 fail, 3-7 succeed: exactly 5 entries, none for 1-2."""
        tracks = make_entries(7)
        resolver = FakeResolver(fail_urls={tracks[0].url, tracks[1].url})

        updated = await replenish_stream_pool(
            tracks, StreamCacheRecord(playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=resolver,
        )

        ids = [e.track_id for e in updated.entries]
        assert ids == ["t3", "t4", "t5", "t6", "t7"]
        assert "t1" not in ids and "t2" not in ids

    @pytest.mark.asyncio
    async def test_six_uncached_two_failures(self):
        """Six uncached tracks, two failing: pool stops below target, no error."""
        tracks = make_entries(6)
        resolver = FakeResolver(fail_urls={tracks[0].url, tracks[1].url})

        updated = await replenish_stream_pool(
            tracks, StreamCacheRecord(playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=resolver,
        )

        assert [e.track_id for e in updated.entries] == ["t3", "t4", "t5", "t6"]

    @pytest.mark.asyncio
    async def test_valid_entries_not_re_resolved(self, entries):
        existing = [make_stream(entries[0]), make_stream(entries[3])]
        resolver = FakeResolver()

        updated = await replenish_stream_pool(
            entries, StreamCacheRecord(entries=existing, playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=resolver,
        )

        assert entries[0].url not in resolver.calls
        assert entries[3].url not in resolver.calls
        assert len(resolver.calls) == 3
        assert len(updated.entries) == STREAM_POOL_TARGET
        assert updated.entries[:2] == existing

    @pytest.mark.asyncio
    async def test_full_pool_resolves_nothing(self, entries):
        existing = [make_stream(t) for t in entries[:5]]
        resolver = FakeResolver()

        updated = await replenish_stream_pool(
            entries, StreamCacheRecord(entries=existing, playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=resolver,
        )

        assert resolver.calls == []
        assert updated.entries == existing

    @pytest.mark.asyncio
    async def test_expired_entries_dropped_and_not_preferred(self, entries):
        stale = make_stream(entries[6], now_ms() - TTL_MS - 1)
        resolver = FakeResolver()

        updated = await replenish_stream_pool(
            entries, StreamCacheRecord(entries=[stale], playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=resolver,
        )

        # t7 is last in playlist order, so the target is reached before it
        assert [e.track_id for e in updated.entries] == ["t1", "t2", "t3", "t4", "t5"]
        assert stale not in updated.entries

    @pytest.mark.asyncio
    async def test_never_exceeds_target(self):
        tracks = make_entries(20)
        updated = await replenish_stream_pool(
            tracks, StreamCacheRecord(playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=FakeResolver(),
        )
        assert len(updated.entries) == STREAM_POOL_TARGET

    @pytest.mark.asyncio
    async def test_small_playlist_stabilizes_below_target(self):
        tracks = make_entries(2)
        updated = await replenish_stream_pool(
            tracks, StreamCacheRecord(playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=FakeResolver(),
        )
        assert len(updated.entries) == 2

    @pytest.mark.asyncio
    async def test_identity_stamped_fresh(self, entries):
        old = StreamCacheRecord(entries=[], playlist_url="https://example.com/old")
        updated = await replenish_stream_pool(entries, old, PLAYLIST_URL, resolver=FakeResolver())
        assert updated.playlist_url == PLAYLIST_URL

    @pytest.mark.asyncio
    async def test_resolution_is_sequential(self, entries, empty_pool):
        in_flight = 0
        peak = 0

        class SlowResolver:
            async def resolve(self, track_url):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0)
                in_flight -= 1
                return track_url + "#s"

        await replenish_stream_pool(entries, empty_pool, PLAYLIST_URL, resolver=SlowResolver())

        assert peak == 1

    @pytest.mark.asyncio
    async def test_input_record_not_mutated(self, entries):
        record = StreamCacheRecord(entries=[make_stream(entries[0])], playlist_url=PLAYLIST_URL)
        await replenish_stream_pool(entries, record, PLAYLIST_URL, resolver=FakeResolver())
        assert len(record.entries) == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_skips_only_that_track(self):
        """A resolver blowing up with a non-ResolveError on t2 still fills the pool."""
        tracks = make_entries(7)

        class NullByteResolver(FakeResolver):
            async def resolve(self, track_url):
                if track_url == tracks[1].url:
                    self.calls.append(track_url)
                    raise ValueError("embedded null byte")
                return await super().resolve(track_url)

        updated = await replenish_stream_pool(
            tracks, StreamCacheRecord(playlist_url=PLAYLIST_URL), PLAYLIST_URL, resolver=NullByteResolver(),
        )

        assert [e.track_id for e in updated.entries] == ["t1", "t3", "t4", "t5", "t6"]

    @pytest.mark.asyncio
    async def test_cancellation_still_propagates(self, entries, empty_pool):
        class CancelledResolver:
            async def resolve(self, track_url):
                raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await replenish_stream_pool(entries, empty_pool, PLAYLIST_URL, resolver=CancelledResolver())
