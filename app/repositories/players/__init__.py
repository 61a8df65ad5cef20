"""Player repositories."""

from app.repositories.players.player import PLAYER_FILTERS, PLAYER_SORTS, PlayerRepository

__all__ = ["PLAYER_FILTERS", "PLAYER_SORTS", "PlayerRepository"]
