"""Compare API."""

from web.api.compare.views import (
    compare_multiple,
    compare_on_beatmap,
    compare_players,
    head_to_head,
)

__all__ = [
    "compare_players",
    "compare_on_beatmap",
    "compare_multiple",
    "head_to_head",
]
