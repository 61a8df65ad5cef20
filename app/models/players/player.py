"""Player stats model - one row per tracked player."""

PLAYER_STATS_DDL = """
CREATE TABLE IF NOT EXISTS player_stats (
    username VARCHAR PRIMARY KEY,
    user_id INTEGER,
    total_pp DOUBLE,
    weighted_pp DOUBLE,
    accuracy_avg DOUBLE,
    first_places INTEGER,
    total_scores INTEGER,
    avg_rank DOUBLE,
    country_rank INTEGER,
    avatar_url VARCHAR,
    is_active BOOLEAN DEFAULT TRUE,
    last_seen TIMESTAMP
)
"""

PLAYER_STATS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_player_weighted_pp ON player_stats(weighted_pp)",
]
