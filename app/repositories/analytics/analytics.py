"""Analytics repository - aggregate queries over scores, players and skills."""

from loguru import logger

from app.repositories.base import BaseRepository
from app.repositories.common.query import SortOptions

# Bucket expressions per grouping; chosen from this table, never from input
TIME_BUCKETS = {
    "hour": "strftime(date_trunc('hour', epoch_ms(last_updated)), '%Y-%m-%d %H:00:00')",
    "day": "strftime(date_trunc('day', epoch_ms(last_updated)), '%Y-%m-%d')",
    "week": "strftime(date_trunc('week', epoch_ms(last_updated)), '%Y-%m-%d')",
    "month": "strftime(date_trunc('month', epoch_ms(last_updated)), '%Y-%m')",
}

POPULARITY_SORTS = SortOptions(
    options={
        "popularity": (("player_count", "DESC"), ("beatmap_id", "ASC")),
        "difficulty": (("difficulty_rating", "DESC"), ("beatmap_id", "ASC")),
        "pp": (("best_pp", "DESC"), ("beatmap_id", "ASC")),
        "accuracy": (("avg_accuracy", "DESC"), ("beatmap_id", "ASC")),
    },
    default="popularity",
)

_SKILL_RANGES = """
    CASE
        WHEN skill_value >= 8.0 THEN '8.0+'
        WHEN skill_value >= 6.0 THEN '6.0-7.99'
        WHEN skill_value >= 4.0 THEN '4.0-5.99'
        WHEN skill_value >= 2.0 THEN '2.0-3.99'
        ELSE '0.0-1.99'
    END
"""

_DIFFICULTY_CATEGORIES = """
    CASE
        WHEN difficulty_rating < 4.0 THEN 'Easy (< 4*)'
        WHEN difficulty_rating < 6.0 THEN 'Medium (4-6*)'
        WHEN difficulty_rating < 8.0 THEN 'Hard (6-8*)'
        ELSE 'Expert (8*+)'
    END
"""

_GRADE_CATEGORIES = """
    CASE
        WHEN accuracy >= 0.98 THEN 'SS (98%+)'
        WHEN accuracy >= 0.95 THEN 'S (95-98%)'
        WHEN accuracy >= 0.90 THEN 'A (90-95%)'
        WHEN accuracy >= 0.80 THEN 'B (80-90%)'
        ELSE 'C (< 80%)'
    END
"""


class AnalyticsRepository(BaseRepository):
    """Repository for aggregate analytics queries."""

    def get_totals(self) -> dict:
        """Score table totals."""
        return self.fetch_record(
            """
            SELECT COUNT(DISTINCT username) AS total_players,
                   COUNT(*) AS total_scores,
                   COUNT(DISTINCT beatmap_id) AS total_beatmaps,
                   AVG(accuracy) AS avg_accuracy,
                   MAX(score) AS highest_score,
                   SUM(pp) AS total_pp
            FROM top_scores
            """
        )

    def count_scores_since(self, since_ms: int) -> int:
        row = self.fetchone("SELECT COUNT(*) FROM top_scores WHERE last_updated > $1", [since_ms])
        return int(row[0])

    def count_scores(self) -> int:
        row = self.fetchone("SELECT COUNT(*) FROM top_scores")
        return int(row[0])

    def get_skill_statistics(self) -> list[dict]:
        """Per skill type: player count and value spread."""
        return self.fetch_records(
            """
            SELECT skill_type,
                   COUNT(DISTINCT username) AS player_count,
                   AVG(skill_value) AS avg_value,
                   MIN(skill_value) AS min_value,
                   MAX(skill_value) AS max_value
            FROM skill_tracking
            GROUP BY skill_type
            ORDER BY skill_type
            """
        )

    def get_skill_distribution(self, skill_type: str) -> list[dict]:
        """Players per value range, using each player's latest value."""
        return self.fetch_records(
            f"""
            WITH recent_skills AS (
                SELECT username, arg_max(skill_value, calculated_at) AS skill_value
                FROM skill_tracking
                WHERE skill_type = $1
                GROUP BY username
            )
            SELECT {_SKILL_RANGES} AS skill_range,
                   COUNT(*) AS player_count,
                   AVG(skill_value) AS avg_value
            FROM recent_skills
            GROUP BY skill_range
            ORDER BY skill_range
            """,
            [skill_type],
        )

    def get_mod_usage(self, limit: int | None = None) -> list[dict]:
        """Usage and performance per mod combination (NoMod excluded)."""
        query = """
            SELECT mods,
                   COUNT(*) AS usage_count,
                   AVG(accuracy) AS avg_accuracy,
                   AVG(pp) AS avg_pp,
                   MAX(pp) AS max_pp,
                   COUNT(DISTINCT username) AS unique_users,
                   COUNT(DISTINCT beatmap_id) AS unique_beatmaps
            FROM top_scores
            WHERE mods IS NOT NULL AND mods != 'None'
            GROUP BY mods
            ORDER BY usage_count DESC, mods ASC
        """
        if limit is None:
            return self.fetch_records(query)
        return self.fetch_records(query + " LIMIT $1", [limit])

    def get_difficulty_distribution(self) -> list[dict]:
        """Scores per whole-star difficulty."""
        return self.fetch_records(
            """
            SELECT CAST(FLOOR(difficulty_rating) AS INTEGER) AS difficulty_range,
                   COUNT(*) AS score_count,
                   AVG(accuracy) AS avg_accuracy
            FROM top_scores
            WHERE difficulty_rating > 0
            GROUP BY difficulty_range
            ORDER BY difficulty_range ASC
            """
        )

    def get_new_players(self, since_ms: int, bucket: str) -> list[dict]:
        """Players per bucket of their first recorded score."""
        expression = TIME_BUCKETS[bucket].replace("last_updated", "first_seen")
        return self.fetch_records(
            f"""
            WITH firsts AS (
                SELECT username, MIN(last_updated) AS first_seen
                FROM top_scores
                GROUP BY username
            )
            SELECT {expression} AS period, COUNT(*) AS new_players
            FROM firsts
            WHERE first_seen >= $1
            GROUP BY period
            ORDER BY period ASC
            """,
            [since_ms],
        )

    def count_players_before(self, before_ms: int) -> int:
        row = self.fetchone(
            "SELECT COUNT(*) FROM (SELECT username FROM top_scores GROUP BY username HAVING MIN(last_updated) < $1)",
            [before_ms],
        )
        return int(row[0])

    def get_pp_values(self) -> dict[str, list[float]]:
        """Raw pp values for distribution analysis."""
        players = self.fetchall(
            "SELECT weighted_pp FROM player_stats WHERE is_active = true AND weighted_pp IS NOT NULL"
        )
        scores = self.fetchall("SELECT pp FROM top_scores WHERE pp IS NOT NULL")
        return {"players": [float(r[0]) for r in players], "scores": [float(r[0]) for r in scores]}

    def get_timeline(self, since_ms: int, bucket: str) -> list[dict]:
        """Score activity per time bucket since since_ms."""
        rows = self.fetch_records(
            f"""
            SELECT {TIME_BUCKETS[bucket]} AS time_period,
                   COUNT(*) AS score_count,
                   COUNT(DISTINCT username) AS unique_players,
                   COUNT(DISTINCT beatmap_id) AS unique_beatmaps,
                   AVG(accuracy) AS avg_accuracy,
                   AVG(pp) AS avg_pp
            FROM top_scores
            WHERE last_updated > $1
            GROUP BY time_period
            ORDER BY time_period ASC
            """,
            [since_ms],
        )
        logger.debug("get_timeline({}, {}): {} buckets", since_ms, bucket, len(rows))
        return rows

    def get_beatmap_popularity(self, sort_by: str | None, limit: int) -> list[dict]:
        """Beatmaps by player count, difficulty, pp or accuracy."""
        order = ", ".join(f"{c} {d}" for c, d in POPULARITY_SORTS.resolve(sort_by))
        return self.fetch_records(
            f"""
            SELECT beatmap_id,
                   any_value(beatmap_title) AS beatmap_title,
                   any_value(artist) AS artist,
                   any_value(difficulty_name) AS difficulty_name,
                   MAX(difficulty_rating) AS difficulty_rating,
                   COUNT(DISTINCT username) AS player_count,
                   AVG(accuracy) AS avg_accuracy,
                   MAX(pp) AS best_pp
            FROM top_scores
            GROUP BY beatmap_id
            ORDER BY {order}
            LIMIT $1
            """,
            [limit],
        )

    def get_overall_stats(self) -> dict:
        return self.fetch_record(
            """
            SELECT COUNT(DISTINCT username) AS total_players,
                   AVG(accuracy) AS avg_accuracy,
                   AVG(difficulty_rating) AS avg_difficulty,
                   COUNT(*) AS total_scores
            FROM top_scores
            """
        )

    def get_difficulty_breakdown(self) -> list[dict]:
        return self.fetch_records(
            f"""
            SELECT {_DIFFICULTY_CATEGORIES} AS difficulty_category,
                   MIN(difficulty_rating) AS min_rating,
                   COUNT(*) AS score_count,
                   AVG(accuracy) AS avg_accuracy,
                   COUNT(DISTINCT username) AS player_count
            FROM top_scores
            WHERE difficulty_rating > 0
            GROUP BY difficulty_category
            ORDER BY min_rating ASC
            """
        )

    def get_accuracy_breakdown(self) -> list[dict]:
        return self.fetch_records(
            f"""
            SELECT {_GRADE_CATEGORIES} AS grade_category,
                   MAX(accuracy) AS max_accuracy,
                   COUNT(*) AS score_count,
                   COUNT(DISTINCT username) AS player_count
            FROM top_scores
            WHERE accuracy > 0
            GROUP BY grade_category
            ORDER BY max_accuracy DESC
            """
        )

    def get_category_counts(self) -> dict[str, int]:
        """Searchable entity counts per category."""
        rows = self.fetchall(
            """
            SELECT 'players' AS category, COUNT(*) FROM player_stats WHERE is_active = true
            UNION ALL
            SELECT 'beatmaps', COUNT(DISTINCT beatmap_id) FROM top_scores
            UNION ALL
            SELECT 'scores', COUNT(*) FROM top_scores
            UNION ALL
            SELECT 'artists', COUNT(DISTINCT artist) FROM beatmap_metadata
            """
        )
        return {r[0]: int(r[1]) for r in rows}
