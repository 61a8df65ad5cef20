"""Beatmap metadata model."""

BEATMAP_DDL = """
CREATE TABLE IF NOT EXISTS beatmap_metadata (
    beatmap_id INTEGER PRIMARY KEY,
    artist VARCHAR,
    title VARCHAR,
    version VARCHAR,
    difficulty_rating DOUBLE,
    creator VARCHAR,
    length INTEGER,
    bpm DOUBLE
)
"""
