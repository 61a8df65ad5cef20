"""Score repository - top scores per beatmap and player."""

from loguru import logger

from app.repositories.base import BaseRepository
from app.repositories.common.query import (
    Comparison,
    FilterColumn,
    FilterSpec,
    Page,
    QueryBuilder,
    SortOptions,
    escape_like,
)

SCORE_SORTS = SortOptions(
    options={
        "pp": (("pp", "DESC"), ("beatmap_id", "ASC"), ("username", "ASC")),
        "score": (("score", "DESC"), ("beatmap_id", "ASC"), ("username", "ASC")),
        "recent": (("last_updated", "DESC"), ("beatmap_id", "ASC"), ("username", "ASC")),
    },
    default="pp",
)

SCORE_FILTERS = [
    FilterColumn("query", ("beatmap_title", "artist", "username"), Comparison.SUBSTRING),
    FilterColumn("min_pp", ("pp",), Comparison.RANGE_MIN),
    FilterColumn("max_pp", ("pp",), Comparison.RANGE_MAX),
    FilterColumn("min_accuracy", ("accuracy",), Comparison.RANGE_MIN),
    FilterColumn("max_accuracy", ("accuracy",), Comparison.RANGE_MAX),
    FilterColumn("min_difficulty", ("difficulty_rating",), Comparison.RANGE_MIN),
    FilterColumn("max_difficulty", ("difficulty_rating",), Comparison.RANGE_MAX),
    FilterColumn("mods", ("mods",), Comparison.MEMBERSHIP),
    FilterColumn("date_from", ("last_updated",), Comparison.DATE_FROM),
    FilterColumn("date_to", ("last_updated",), Comparison.DATE_TO),
]

_SEARCH_COLUMNS = """
    SELECT beatmap_id, beatmap_title, artist, difficulty_name, username,
           rank, score, accuracy, mods, pp, difficulty_rating, last_updated
    FROM top_scores
"""


class ScoreRepository(BaseRepository):
    """Repository for score data access."""

    def get_score(self, username: str, beatmap_id: int) -> dict | None:
        """One player's score on one beatmap."""
        return self.fetch_record(
            """
            SELECT * FROM top_scores
            WHERE lower(username) = lower($1) AND beatmap_id = $2
            ORDER BY rank ASC NULLS LAST
            LIMIT 1
            """,
            [username, beatmap_id],
        )

    def get_common_beatmaps(self, username1: str, username2: str, limit: int) -> list[dict]:
        """Beatmaps both players have a score on, side by side."""
        builder = QueryBuilder(
            """
            SELECT s1.beatmap_id, s1.beatmap_title, s1.artist, s1.difficulty_name, s1.difficulty_rating,
                   s1.username AS player1_username, s1.rank AS player1_rank, s1.score AS player1_score,
                   s1.accuracy AS player1_accuracy, s1.pp AS player1_pp, s1.mods AS player1_mods,
                   s2.username AS player2_username, s2.rank AS player2_rank, s2.score AS player2_score,
                   s2.accuracy AS player2_accuracy, s2.pp AS player2_pp, s2.mods AS player2_mods
            FROM top_scores s1
            JOIN top_scores s2 ON s1.beatmap_id = s2.beatmap_id
            """
        )
        builder.add_filter(True, "lower(s1.username) = lower({p})", username1)
        builder.add_filter(True, "lower(s2.username) = lower({p})", username2)
        prepared = builder.build(
            Page.of(limit),
            order_by=(("GREATEST(s1.pp, s2.pp)", "DESC"), ("s1.beatmap_id", "ASC")),
        )
        rows = self.fetch_prepared(prepared)
        logger.debug("get_common_beatmaps({}, {}): {} beatmaps", username1, username2, len(rows))
        return rows

    def search(self, term: str, page: Page) -> list[dict]:
        """Scores whose beatmap, artist or player contains term."""
        builder = QueryBuilder(_SEARCH_COLUMNS)
        builder.add_filter(
            True,
            "(beatmap_title ILIKE {p} ESCAPE '\\' OR artist ILIKE {p} ESCAPE '\\' OR username ILIKE {p} ESCAPE '\\')",
            f"%{escape_like(term)}%",
        )
        return self.fetch_prepared(builder.build(page, order_by=SCORE_SORTS.resolve("pp")))

    def advanced_search(self, spec: FilterSpec, page: Page, sort_by: str | None = None) -> list[dict]:
        """Scores matching every present filter."""
        builder = QueryBuilder(_SEARCH_COLUMNS).apply(spec, SCORE_FILTERS)
        prepared = builder.build(page, order_by=SCORE_SORTS.resolve(sort_by))
        logger.debug("advanced score search: {} params", len(prepared.params))
        return self.fetch_prepared(prepared)
