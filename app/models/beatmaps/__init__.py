"""Beatmap domain models."""

from app.models.beatmaps.beatmap import BEATMAP_DDL

__all__ = [
    "BEATMAP_DDL",
]
