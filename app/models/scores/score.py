"""Top scores model - best country scores per beatmap."""

TOP_SCORES_DDL = """
CREATE TABLE IF NOT EXISTS top_scores (
    beatmap_id INTEGER NOT NULL,
    beatmap_title VARCHAR,
    artist VARCHAR,
    difficulty_name VARCHAR,
    difficulty_rating DOUBLE,
    username VARCHAR NOT NULL,
    rank INTEGER,
    score BIGINT,
    accuracy DOUBLE,
    mods VARCHAR,
    pp DOUBLE,
    max_combo INTEGER,
    last_updated BIGINT
)
"""

TOP_SCORES_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_scores_beatmap ON top_scores(beatmap_id)",
    "CREATE INDEX IF NOT EXISTS idx_scores_username ON top_scores(username)",
]
