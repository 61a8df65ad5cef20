"""Beatmap repositories."""

from app.repositories.beatmaps.beatmap import BEATMAP_SORTS, BeatmapRepository

__all__ = ["BEATMAP_SORTS", "BeatmapRepository"]
