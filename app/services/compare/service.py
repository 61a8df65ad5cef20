"""Compare service - player vs player comparisons."""

import asyncio
from collections.abc import Sequence

from loguru import logger

from app.cache import ReadThrough
from app.cache.domains import COMPARE
from app.errors import NotFoundError
from app.models.compare import Direction, Outcome
from app.repositories.beatmaps import BeatmapRepository
from app.repositories.common.query import Page
from app.repositories.players import PlayerRepository
from app.repositories.scores import ScoreRepository
from app.services.compare import engine
from app.services.compare.metrics import SCORE_METRICS, SKILL_METRICS, STAT_METRICS, resolve_metrics
from settings import COMPARE_MAX_ENTITIES, HEAD_TO_HEAD_LIMIT, RANK_TIE_POLICY, TOP_SCORES_LIMIT

_SCORE_RANK = SCORE_METRICS[0]


class CompareService:
    """Player comparisons with read-through caching."""

    def __init__(
        self,
        players: PlayerRepository,
        scores: ScoreRepository,
        beatmaps: BeatmapRepository,
        cache: ReadThrough,
        tie_policy: str = RANK_TIE_POLICY,
        max_entities: int = COMPARE_MAX_ENTITIES,
    ):
        self._players = players
        self._scores = scores
        self._beatmaps = beatmaps
        self._cache = cache
        self._tie_policy = tie_policy
        self._max_entities = max_entities
        logger.debug("CompareService initialized")

    async def _find_players(self, usernames: Sequence[str]) -> list[dict | None]:
        return list(await asyncio.gather(*(asyncio.to_thread(self._players.find_player, u) for u in usernames)))

    async def _resolve_pair(self, username1: str, username2: str) -> tuple[str, str]:
        """Canonical usernames of two players; NotFound if either is unknown."""
        player1, player2 = await self._find_players([username1, username2])
        if player1 is None or player2 is None:
            raise NotFoundError("One or both players not found")
        return player1["username"], player2["username"]

    async def compare_players(self, username1: str, username2: str) -> dict:
        """Stats, skills and top scores of two players side by side."""

        async def compute() -> dict:
            player1, player2 = await self._find_players([username1, username2])
            if player1 is None or player2 is None:
                raise NotFoundError("One or both players not found")

            name1, name2 = player1["username"], player2["username"]
            skills1, skills2, scores1, scores2 = await asyncio.gather(
                asyncio.to_thread(self._players.get_skill_averages, name1),
                asyncio.to_thread(self._players.get_skill_averages, name2),
                asyncio.to_thread(self._players.get_top_scores, name1, TOP_SCORES_LIMIT),
                asyncio.to_thread(self._players.get_top_scores, name2, TOP_SCORES_LIMIT),
            )

            logger.info("Compared {} vs {}", name1, name2)
            return {
                "player1": {**player1, "top_scores": scores1},
                "player2": {**player2, "top_scores": scores2},
                "skill_comparison": engine.side_by_side(skills1, skills2, SKILL_METRICS),
                "stat_comparison": engine.side_by_side(player1, player2, STAT_METRICS),
            }

        return await self._cache.get_or_compute(COMPARE, ["players", username1, username2], compute)

    async def compare_on_beatmap(self, username1: str, username2: str, beatmap_id: int) -> dict:
        """Both players' scores on one beatmap and who wins it."""
        username1, username2 = await self._resolve_pair(username1, username2)
        score1, score2, beatmap = await asyncio.gather(
            asyncio.to_thread(self._scores.get_score, username1, beatmap_id),
            asyncio.to_thread(self._scores.get_score, username2, beatmap_id),
            asyncio.to_thread(self._beatmaps.get_beatmap, beatmap_id),
        )
        if score1 is None and score2 is None:
            raise NotFoundError("Neither player has a score on this beatmap")

        outcome = engine.decide_winner(
            engine.metric_value(score1, _SCORE_RANK) if score1 else None,
            engine.metric_value(score2, _SCORE_RANK) if score2 else None,
            Direction.LOWER,
        )

        result = {
            "beatmap": beatmap,
            "player1": {"username": username1, "score": score1, "has_score": score1 is not None},
            "player2": {"username": username2, "score": score2, "has_score": score2 is not None},
            "winner": outcome.value,
            "winner_username": {Outcome.PLAYER1: username1, Outcome.PLAYER2: username2}.get(outcome),
        }
        if score1 and score2:
            result["differences"] = {m.name: engine.differential(score1, score2, m) for m in SCORE_METRICS}
        return result

    async def compare_multiple(self, usernames: Sequence[str], metrics: Sequence[str] | None = None) -> dict:
        """Rank 2..N players on the requested metrics."""
        engine.check_entity_count(len(usernames), self._max_entities)
        selected = resolve_metrics(metrics)

        async def compute() -> dict:
            found = await self._find_players(usernames)
            players = list({p["username"]: p for p in found if p is not None}.values())
            if len(players) < 2:
                raise NotFoundError("At least 2 valid players required")

            result = engine.compare(players, selected, tie_policy=self._tie_policy, max_entities=self._max_entities)
            logger.info("Compared {} players on {} metrics", len(players), len(selected))
            return {"players": players, **result.to_dict()}

        parts = ["multiple", len(usernames), *usernames, *(m.name for m in selected)]
        return await self._cache.get_or_compute(COMPARE, parts, compute)

    async def head_to_head(self, username1: str, username2: str, limit: int = HEAD_TO_HEAD_LIMIT) -> dict:
        """Common beatmaps with a per-beatmap winner and win counts."""
        page = Page.of(limit)

        async def compute() -> dict:
            name1, name2 = await self._resolve_pair(username1, username2)
            rows = await asyncio.to_thread(self._scores.get_common_beatmaps, name1, name2, page.limit)

            summary = {"total_beatmaps": 0, "player1_wins": 0, "player2_wins": 0, "ties": 0}
            for row in rows:
                outcome = engine.decide_winner(
                    engine.metric_value({"rank": row["player1_rank"]}, _SCORE_RANK),
                    engine.metric_value({"rank": row["player2_rank"]}, _SCORE_RANK),
                    Direction.LOWER,
                )
                row["winner"] = outcome.value
                summary["total_beatmaps"] += 1
                if outcome is Outcome.PLAYER1:
                    summary["player1_wins"] += 1
                elif outcome is Outcome.PLAYER2:
                    summary["player2_wins"] += 1
                else:
                    summary["ties"] += 1

            return {
                "common_beatmaps": rows,
                "summary": summary,
                "players": {"player1": name1, "player2": name2},
            }

        return await self._cache.get_or_compute(COMPARE, ["head_to_head", username1, username2, page.limit], compute)
