"""Player repository - player stats, skills and per-player scores."""

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

PLAYER_COLUMNS = """
    username, user_id, weighted_pp, accuracy_avg, first_places,
    total_scores, avatar_url, country_rank
"""

PLAYER_SORTS = SortOptions(
    options={
        "pp": (("weighted_pp", "DESC"), ("username", "ASC")),
        "accuracy": (("accuracy_avg", "DESC"), ("username", "ASC")),
        "scores": (("total_scores", "DESC"), ("username", "ASC")),
        "firsts": (("first_places", "DESC"), ("username", "ASC")),
        "name": (("username", "ASC"),),
    },
    default="pp",
)

PLAYER_FILTERS = [
    FilterColumn("query", ("username",), Comparison.SUBSTRING),
    FilterColumn("min_pp", ("weighted_pp",), Comparison.RANGE_MIN),
    FilterColumn("max_pp", ("weighted_pp",), Comparison.RANGE_MAX),
    FilterColumn("min_accuracy", ("accuracy_avg",), Comparison.RANGE_MIN),
    FilterColumn("max_accuracy", ("accuracy_avg",), Comparison.RANGE_MAX),
]


class PlayerRepository(BaseRepository):
    """Repository for player data access."""

    def find_player(self, username: str) -> dict | None:
        """Best match for a username: exact (case-insensitive) first, else highest pp substring match."""
        row = self.fetch_record(
            """
            SELECT * FROM player_stats
            WHERE username ILIKE $1 ESCAPE '\\'
            ORDER BY (lower(username) = lower($2)) DESC, weighted_pp DESC NULLS LAST, username ASC
            LIMIT 1
            """,
            [f"%{escape_like(username.strip())}%", username.strip()],
        )
        logger.debug("find_player({}): {}", username, "found" if row else "missing")
        return row

    def get_skill_averages(self, username: str) -> dict[str, float]:
        """Average skill value per skill type: {skill_type: avg}."""
        rows = self.fetchall(
            """
            SELECT skill_type, AVG(skill_value)
            FROM skill_tracking
            WHERE lower(username) = lower($1)
            GROUP BY skill_type
            """,
            [username],
        )
        return {r[0]: float(r[1]) for r in rows}

    def get_top_scores(self, username: str, limit: int) -> list[dict]:
        """Highest pp scores of one player."""
        return self.fetch_records(
            """
            SELECT * FROM top_scores
            WHERE lower(username) = lower($1)
            ORDER BY pp DESC NULLS LAST, beatmap_id ASC
            LIMIT $2
            """,
            [username, limit],
        )

    def search(self, term: str, sort_by: str | None, page: Page, extended: bool = False) -> list[dict]:
        """Active players whose name contains term."""
        columns = PLAYER_COLUMNS + (", last_seen" if extended else "")
        builder = QueryBuilder(f"SELECT {columns} FROM player_stats", conditions=["is_active = true"])
        builder.add_filter(True, "username ILIKE {p} ESCAPE '\\'", f"%{escape_like(term)}%")
        return self.fetch_prepared(builder.build(page, order_by=PLAYER_SORTS.resolve(sort_by)))

    def advanced_search(self, spec: FilterSpec, page: Page) -> list[dict]:
        """Active players matching every present filter."""
        builder = QueryBuilder(f"SELECT {PLAYER_COLUMNS} FROM player_stats", conditions=["is_active = true"])
        builder.apply(spec, PLAYER_FILTERS)
        prepared = builder.build(page, order_by=PLAYER_SORTS.resolve("pp"))
        logger.debug("advanced player search: {} params", len(prepared.params))
        return self.fetch_prepared(prepared)

    def suggestions(self, prefix: str, limit: int) -> list[dict]:
        """Active players whose name starts with prefix."""
        builder = QueryBuilder(
            "SELECT username, avatar_url, weighted_pp FROM player_stats",
            conditions=["is_active = true"],
        )
        builder.add_filter(True, "username ILIKE {p} ESCAPE '\\'", f"{escape_like(prefix)}%")
        return self.fetch_prepared(builder.build(Page.of(limit), order_by=PLAYER_SORTS.resolve("pp")))

    def top_players(self, limit: int) -> list[dict]:
        """Active players by weighted pp."""
        return self.fetch_records(
            """
            SELECT username, weighted_pp, first_places, avatar_url
            FROM player_stats
            WHERE is_active = true
            ORDER BY weighted_pp DESC NULLS LAST, username ASC
            LIMIT $1
            """,
            [limit],
        )
