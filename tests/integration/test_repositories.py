"""Repository tests against a seeded in-memory DuckDB."""

import duckdb
import pytest

from app.errors import StorageError
from app.repositories import BaseRepository
from app.repositories.common.query import Page, build_filter_spec
from app.repositories.players import PLAYER_FILTERS
from app.repositories.scores import SCORE_FILTERS

T0 = 1_700_000_000_000
DAY = 86_400_000


class TestPlayerRepository:
    def test_exact_match_preferred(self, players):
        assert players.find_player("alpha")["username"] == "Alpha"

    def test_substring_fallback(self, players):
        assert players.find_player("harl")["username"] == "Charlie"

    def test_missing(self, players):
        assert players.find_player("zzz") is None

    def test_wildcards_literal(self, players):
        assert players.find_player("%") is None

    def test_skill_averages(self, players):
        assert players.get_skill_averages("bravo") == {"aim": 5.0}

    def test_top_scores(self, players):
        rows = players.get_top_scores("Alpha", 2)
        assert [r["pp"] for r in rows] == [700.0, 600.0]

    def test_search_excludes_inactive(self, players):
        rows = players.search("alpha", "pp", Page())
        assert [r["username"] for r in rows] == ["Alpha"]

    def test_search_sort(self, players):
        rows = players.search("a", "name", Page())
        assert [r["username"] for r in rows] == ["Alpha", "Bravo", "Charlie"]

    def test_search_injection_is_data(self, players, conn):
        assert players.search("x'; DROP TABLE player_stats; --", "pp", Page()) == []
        assert conn.execute("SELECT COUNT(*) FROM player_stats").fetchone()[0] == 4

    def test_records_are_json_ready(self, players):
        assert players.search("Alpha", "pp", Page(), extended=True)[0]["last_seen"] == "2024-01-02T12:00:00"

    def test_advanced(self, players):
        spec = build_filter_spec({"min_pp": 5000, "max_accuracy": 0.975}, PLAYER_FILTERS)
        rows = players.advanced_search(spec, Page())
        assert [r["username"] for r in rows] == ["Bravo"]

    def test_suggestions_prefix(self, players):
        assert [r["username"] for r in players.suggestions("b", 10)] == ["Bravo"]


class TestScoreRepository:
    def test_get_score(self, scores):
        assert scores.get_score("ALPHA", 100)["rank"] == 1
        assert scores.get_score("Charlie", 100) is None

    def test_common_beatmaps(self, scores):
        rows = scores.get_common_beatmaps("Alpha", "Bravo", 10)
        assert [r["beatmap_id"] for r in rows] == [100, 300, 200]

    def test_search_literal_wildcards(self, scores):
        rows = scores.search("100%_", Page())
        assert [r["beatmap_id"] for r in rows] == [400]

    def test_advanced_dates(self, scores):
        spec = build_filter_spec({"date_from": T0 - DAY, "date_to": T0 - DAY}, SCORE_FILTERS)
        rows = scores.advanced_search(spec, Page())
        assert [(r["beatmap_id"], r["username"]) for r in rows] == [(100, "Bravo")]

    def test_advanced_pagination(self, scores):
        spec = build_filter_spec({"query": "xi"}, SCORE_FILTERS)
        first = scores.advanced_search(spec, Page.of(2, 0))
        second = scores.advanced_search(spec, Page.of(2, 2))
        assert [r["pp"] for r in first + second] == [700.0, 650.0, 550.0, 500.0]

    def test_advanced_difficulty(self, scores):
        spec = build_filter_spec({"min_difficulty": 7}, SCORE_FILTERS)
        assert {r["beatmap_id"] for r in scores.advanced_search(spec, Page())} == {100}


class TestBeatmapRepository:
    def test_get(self, beatmaps):
        assert beatmaps.get_beatmap(200)["title"] == "Freedom Dive"
        assert beatmaps.get_beatmap(999) is None

    def test_search_popularity(self, beatmaps):
        rows = beatmaps.search("xi", "popularity", Page())
        assert [r["beatmap_id"] for r in rows] == [100, 200]
        assert rows[0]["player_count"] == 2

    def test_search_alphabetical(self, beatmaps):
        rows = beatmaps.search("e", "alphabetical", Page())
        assert [r["artist"] for r in rows] == sorted(r["artist"] for r in rows)

    def test_artist_suggestions(self, beatmaps):
        assert [r["artist"] for r in beatmaps.artist_suggestions("x", 5)] == ["xi"]

    def test_popular(self, beatmaps):
        assert len(beatmaps.popular(2)) == 2


class TestAnalyticsRepository:
    def test_totals(self, analytics):
        totals = analytics.get_totals()
        assert totals["total_players"] == 3
        assert totals["total_beatmaps"] == 4

    def test_mod_usage_excludes_nomod(self, analytics):
        mods = {r["mods"]: r["usage_count"] for r in analytics.get_mod_usage()}
        assert "None" not in mods
        assert mods["DT"] == 2

    def test_skill_distribution_latest_value(self, analytics):
        rows = analytics.get_skill_distribution("aim")
        assert {r["skill_range"]: r["player_count"] for r in rows} == {"6.0-7.99": 2}

    def test_category_counts(self, analytics):
        assert analytics.get_category_counts() == {"players": 3, "beatmaps": 4, "scores": 7, "artists": 3}

    def test_timeline_buckets(self, analytics):
        rows = analytics.get_timeline(T0 - 4 * DAY, "day")
        assert sum(r["score_count"] for r in rows) == 6

    def test_new_players(self, analytics):
        rows = analytics.get_new_players(T0 - 10 * DAY, "day")
        assert sum(r["new_players"] for r in rows) == 2
        assert analytics.count_players_before(T0 - 10 * DAY) == 1


class TestStorageErrors:
    def test_duckdb_error_wrapped(self, players):
        with pytest.raises(StorageError) as exc:
            players.fetchall("SELECT * FROM missing_table")
        assert exc.value.message == "Storage query failed"


class RecordingRepository(BaseRepository):
    def execute(self, query, params=None):
        self.last_cursor = super().execute(query, params)
        return self.last_cursor


class TestCursors:
    @pytest.mark.parametrize("method", ["fetchone", "fetchall", "fetch_records"])
    def test_cursor_closed_after_fetch(self, conn, method):
        repo = RecordingRepository(conn)
        getattr(repo, method)("SELECT 1 AS one")
        with pytest.raises(duckdb.Error):
            repo.last_cursor.execute("SELECT 1")

    def test_connection_still_usable(self, conn):
        repo = RecordingRepository(conn)
        repo.fetchone("SELECT 1")
        assert repo.fetchone("SELECT COUNT(*) FROM player_stats") == (4,)
