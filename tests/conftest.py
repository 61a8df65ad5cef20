"""Shared fixtures: fake clock, seeded in-memory DuckDB, cache wiring."""

from datetime import datetime

import pytest

from app.cache import CacheStore, MemoryCacheBackend, ReadThrough
from app.repositories import (
    AnalyticsRepository,
    BeatmapRepository,
    PlayerRepository,
    ScoreRepository,
    connect_memory,
)

T0 = 1_700_000_000_000  # ms
DAY = 86_400_000

PLAYERS = [
    ("Alpha", 1, 9000.0, 8000.0, 0.98, 12, 300, 5.5, 5, "a.png", True, datetime(2024, 1, 2, 12, 0)),
    ("Bravo", 2, 7000.0, 6500.0, 0.97, 4, 200, 8.0, 20, "b.png", True, datetime(2024, 1, 3, 12, 0)),
    ("Charlie", 3, 5000.0, 4000.0, 0.95, 0, 100, None, None, "c.png", True, None),
    ("alpha_old", 4, 100.0, 90.0, 0.90, 0, 10, 40.0, 900, None, False, None),
]

SCORES = [
    (100, "Blue Zenith", "xi", "FOUR DIMENSIONS", 7.2, "Alpha", 1, 1_000_000, 0.99, "HD", 700.0, 2000, T0),
    (100, "Blue Zenith", "xi", "FOUR DIMENSIONS", 7.2, "Bravo", 2, 950_000, 0.97, "None", 650.0, 1990, T0 - DAY),
    (200, "Freedom Dive", "xi", "Another", 6.1, "Alpha", 3, 800_000, 0.96, "HDHR", 500.0, 1500, T0 - 2 * DAY),
    (200, "Freedom Dive", "xi", "Another", 6.1, "Bravo", 1, 900_000, 0.98, "HD", 550.0, 1600, T0 - 3 * DAY),
    (300, "Big Black", "The Quick Brown Fox", "WHO'S AFRAID", 6.8, "Alpha", 2, 700_000, 0.95, "DT", 600.0, 1400, T0),
    (300, "Big Black", "The Quick Brown Fox", "WHO'S AFRAID", 6.8, "Bravo", 2, 700_000, 0.95, "DT", 600.0, 1400, T0),
    (400, "100%_Mods", "Test_Artist", "Insane", 5.0, "Charlie", 1, 500_000, 0.92, "None", 300.0, 900, T0 - 40 * DAY),
]

BEATMAPS = [
    (100, "xi", "Blue Zenith", "FOUR DIMENSIONS", 7.2, "Asphyxia", 260, 200.0),
    (200, "xi", "Freedom Dive", "Another", 6.1, "Nakagawa-Kanon", 258, 222.22),
    (300, "The Quick Brown Fox", "Big Black", "WHO'S AFRAID", 6.8, "Blue Dragon", 120, 360.3),
    (400, "Test_Artist", "100%_Mods", "Insane", 5.0, "Mapper", 90, 180.0),
]

SKILLS = [
    ("Alpha", "aim", 7.0, datetime(2024, 1, 1)),
    ("Alpha", "speed", 6.0, datetime(2024, 1, 1)),
    ("Bravo", "aim", 4.0, datetime(2024, 1, 1)),
    ("Bravo", "aim", 6.0, datetime(2024, 1, 5)),
]


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return CacheStore(MemoryCacheBackend(max_entries=100, clock=clock), namespace="test")


@pytest.fixture
def read_through(store):
    return ReadThrough(store)


@pytest.fixture
def conn():
    db = connect_memory()
    db.executemany("INSERT INTO player_stats VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", PLAYERS)
    db.executemany("INSERT INTO top_scores VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", SCORES)
    db.executemany("INSERT INTO beatmap_metadata VALUES (?, ?, ?, ?, ?, ?, ?, ?)", BEATMAPS)
    db.executemany("INSERT INTO skill_tracking VALUES (?, ?, ?, ?)", SKILLS)
    yield db
    db.close()


@pytest.fixture
def players(conn):
    return PlayerRepository(conn)


@pytest.fixture
def scores(conn):
    return ScoreRepository(conn)


@pytest.fixture
def beatmaps(conn):
    return BeatmapRepository(conn)


@pytest.fixture
def analytics(conn):
    return AnalyticsRepository(conn)
