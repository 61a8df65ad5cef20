"""Beatmap repository - beatmap metadata joined with score popularity."""

from app.repositories.base import BaseRepository
from app.repositories.common.query import Page, QueryBuilder, SortOptions, escape_like

BEATMAP_SORTS = SortOptions(
    options={
        "popularity": (("player_count", "DESC"), ("bm.difficulty_rating", "DESC"), ("bm.beatmap_id", "ASC")),
        "difficulty": (("bm.difficulty_rating", "DESC"), ("bm.beatmap_id", "ASC")),
        "alphabetical": (("bm.artist", "ASC"), ("bm.title", "ASC"), ("bm.beatmap_id", "ASC")),
        "pp": (("best_pp", "DESC"), ("bm.beatmap_id", "ASC")),
    },
    default="popularity",
)

_BEATMAP_SEARCH = """
    SELECT bm.beatmap_id, bm.artist, bm.title, bm.version, bm.difficulty_rating, bm.creator,
           bm.length, bm.bpm,
           COUNT(ts.username) AS player_count,
           AVG(ts.accuracy) AS avg_accuracy,
           MAX(ts.pp) AS best_pp,
           MAX(ts.score) AS best_score
    FROM beatmap_metadata bm
    LEFT JOIN top_scores ts ON bm.beatmap_id = ts.beatmap_id
"""

_BEATMAP_GROUP = "bm.beatmap_id, bm.artist, bm.title, bm.version, bm.difficulty_rating, bm.creator, bm.length, bm.bpm"

_TEXT_MATCH = (
    "(bm.artist ILIKE {p} ESCAPE '\\' OR bm.title ILIKE {p} ESCAPE '\\'"
    " OR bm.version ILIKE {p} ESCAPE '\\' OR bm.creator ILIKE {p} ESCAPE '\\')"
)


class BeatmapRepository(BaseRepository):
    """Repository for beatmap data access."""

    def get_beatmap(self, beatmap_id: int) -> dict | None:
        return self.fetch_record("SELECT * FROM beatmap_metadata WHERE beatmap_id = $1", [beatmap_id])

    def search(self, term: str, sort_by: str | None, page: Page) -> list[dict]:
        """Beatmaps whose artist, title, difficulty or mapper contains term."""
        builder = QueryBuilder(_BEATMAP_SEARCH)
        builder.add_filter(True, _TEXT_MATCH, f"%{escape_like(term)}%")
        return self.fetch_prepared(builder.build(page, order_by=BEATMAP_SORTS.resolve(sort_by), group_by=_BEATMAP_GROUP))

    def suggestions(self, prefix: str, limit: int) -> list[dict]:
        """Artist/title pairs starting with prefix, most played first."""
        builder = QueryBuilder(
            """
            SELECT concat(bm.artist, ' - ', bm.title) AS full_title, bm.artist, bm.title,
                   COUNT(ts.username) AS popularity
            FROM beatmap_metadata bm
            LEFT JOIN top_scores ts ON bm.beatmap_id = ts.beatmap_id
            """
        )
        builder.add_filter(True, "(bm.artist ILIKE {p} ESCAPE '\\' OR bm.title ILIKE {p} ESCAPE '\\')", f"{escape_like(prefix)}%")
        prepared = builder.build(
            Page.of(limit),
            order_by=(("popularity", "DESC"), ("full_title", "ASC")),
            group_by="bm.artist, bm.title",
        )
        return self.fetch_prepared(prepared)

    def artist_suggestions(self, prefix: str, limit: int) -> list[dict]:
        """Artists starting with prefix."""
        builder = QueryBuilder(
            """
            SELECT bm.artist, COUNT(DISTINCT bm.beatmap_id) AS beatmap_count, COUNT(ts.username) AS score_count
            FROM beatmap_metadata bm
            LEFT JOIN top_scores ts ON bm.beatmap_id = ts.beatmap_id
            """
        )
        builder.add_filter(True, "bm.artist ILIKE {p} ESCAPE '\\'", f"{escape_like(prefix)}%")
        prepared = builder.build(
            Page.of(limit),
            order_by=(("score_count", "DESC"), ("beatmap_count", "DESC"), ("bm.artist", "ASC")),
            group_by="bm.artist",
        )
        return self.fetch_prepared(prepared)

    def popular(self, limit: int) -> list[dict]:
        """Most played beatmaps."""
        return self.fetch_records(
            """
            SELECT bm.beatmap_id, bm.artist, bm.title, bm.version, bm.difficulty_rating,
                   COUNT(ts.username) AS player_count
            FROM beatmap_metadata bm
            LEFT JOIN top_scores ts ON bm.beatmap_id = ts.beatmap_id
            GROUP BY bm.beatmap_id, bm.artist, bm.title, bm.version, bm.difficulty_rating
            ORDER BY player_count DESC, bm.beatmap_id ASC
            LIMIT $1
            """,
            [limit],
        )
