"""Tests for API views: envelope, validation and error mapping."""

import pytest
import pytest_asyncio

from app.cache import MemoryCacheBackend
from app.container import container
from app.errors import StorageError
from web.api import analytics as analytics_api
from web.api import compare as compare_api
from web.api import search as search_api
from web.api.errors import INTERNAL_ERROR


@pytest_asyncio.fixture
async def app(conn):
    container.init(conn=conn, backend=MemoryCacheBackend())
    yield container
    await container.close()


class TestEnvelope:
    @pytest.mark.asyncio
    async def test_success(self, app):
        result = await compare_api.compare_players("Alpha", "Bravo")
        assert result.success is True
        assert result.error is None
        assert result.status == 200
        assert result.data["stat_comparison"]["country_rank"]["difference"] == 15

    @pytest.mark.asyncio
    async def test_envelope_fields(self, app):
        result = await search_api.stats()
        assert set(result.model_dump()) == {"success", "data", "error", "status"}

    @pytest.mark.asyncio
    async def test_not_found(self, app):
        result = await compare_api.compare_players("Alpha", "Nobody")
        assert (result.success, result.status) == (False, 404)
        assert result.error == "One or both players not found"

    @pytest.mark.asyncio
    async def test_storage_failure_is_generic(self, app, monkeypatch):
        async def broken():
            raise StorageError("SELECT secret FROM internals")

        monkeypatch.setattr(app.search, "stats", broken)
        result = await search_api.stats()
        assert (result.status, result.error) == (500, INTERNAL_ERROR)
        assert "SELECT" not in result.model_dump_json()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic(self, app, monkeypatch):
        async def broken():
            raise RuntimeError("boom")

        monkeypatch.setattr(app.analytics, "mods", broken)
        result = await analytics_api.mods()
        assert (result.status, result.error) == (500, INTERNAL_ERROR)


class TestValidation:
    @pytest.mark.asyncio
    async def test_short_username(self, app):
        result = await compare_api.compare_players("A", "Bravo")
        assert result.status == 400

    @pytest.mark.asyncio
    async def test_beatmap_id_not_numeric(self, app):
        result = await compare_api.compare_on_beatmap("Alpha", "Bravo", "abc")
        assert result.status == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("usernames", [["Alpha"], ["p1", "p2", "p3", "p4", "p5", "p6"]])
    async def test_multiple_bounds(self, app, usernames):
        result = await compare_api.compare_multiple({"usernames": usernames})
        assert result.status == 400

    @pytest.mark.asyncio
    async def test_multiple_five_ok(self, app):
        body = {"usernames": ["Alpha", "Bravo", "Charlie", "Alpha", "Bravo"], "metrics": ["weighted_pp"]}
        result = await compare_api.compare_multiple(body)
        assert result.success is True
        assert [r["entity_id"] for r in result.data["rankings"]["weighted_pp"]] == ["Alpha", "Bravo", "Charlie"]

    @pytest.mark.asyncio
    async def test_query_too_short(self, app):
        assert (await search_api.search("x")).status == 400

    @pytest.mark.asyncio
    async def test_bad_search_type(self, app):
        assert (await search_api.search("xi", type="everything")).status == 400

    @pytest.mark.asyncio
    async def test_negative_limit(self, app):
        assert (await search_api.search_players("al", limit=-1)).status == 400

    @pytest.mark.asyncio
    async def test_advanced_bad_filter(self, app):
        result = await search_api.advanced_search({"filters": {"min_pp": "lots"}})
        assert result.status == 400
        assert "min_pp" in result.error

    @pytest.mark.asyncio
    async def test_bad_period(self, app):
        assert (await analytics_api.growth("decade")).status == 400

    @pytest.mark.asyncio
    async def test_bad_skill(self, app):
        assert (await analytics_api.skills("luck")).status == 400


class TestViews:
    @pytest.mark.asyncio
    async def test_advanced_search(self, app):
        body = {"query": "", "filters": {"type": "scores", "min_pp": 600, "mods": ["HD", "DT"]}}
        result = await search_api.advanced_search(body)
        assert result.success is True
        pps = [s["pp"] for s in result.data["results"]["scores"]]
        assert pps == [700.0, 600.0, 600.0]
        assert "players" not in result.data["results"]

    @pytest.mark.asyncio
    async def test_head_to_head(self, app):
        result = await compare_api.head_to_head("Alpha", "Bravo")
        assert result.data["summary"] == {"total_beatmaps": 3, "player1_wins": 1, "player2_wins": 1, "ties": 1}

    @pytest.mark.asyncio
    async def test_overview(self, app):
        result = await analytics_api.overview()
        assert result.data["total_stats"]["total_scores"] == 7
        assert [p["username"] for p in result.data["top_performers"]] == ["Alpha", "Bravo", "Charlie"]

    @pytest.mark.asyncio
    async def test_beatmap_compare_partial_names(self, app):
        result = await compare_api.compare_on_beatmap("alph", "brav", 100)
        assert result.success is True
        assert (result.data["winner"], result.data["winner_username"]) == ("player1", "Alpha")

    @pytest.mark.asyncio
    async def test_head_to_head_partial_names(self, app):
        result = await compare_api.head_to_head("alph", "brav")
        assert result.data["summary"]["total_beatmaps"] == 3
        assert result.data["players"] == {"player1": "Alpha", "player2": "Bravo"}

    @pytest.mark.asyncio
    async def test_beatmap_compare_unknown_player(self, app):
        result = await compare_api.compare_on_beatmap("Alpha", "Nobody", 100)
        assert (result.status, result.error) == (404, "One or both players not found")
