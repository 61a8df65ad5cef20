"""Search API request schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from settings import DEFAULT_LIMIT


class AdvancedSearchFilters(BaseModel):
    """Optional constraints; unset ones do not filter."""

    type: Literal["all", "players", "scores"] = "all"
    min_pp: float | None = Field(default=None, ge=0)
    max_pp: float | None = Field(default=None, ge=0)
    min_accuracy: float | None = Field(default=None, ge=0, le=1)
    max_accuracy: float | None = Field(default=None, ge=0, le=1)
    min_difficulty: float | None = Field(default=None, ge=0)
    max_difficulty: float | None = Field(default=None, ge=0)
    mods: list[str] = Field(default_factory=list)
    date_from: datetime | None = None
    date_to: datetime | None = None


class AdvancedSearchRequest(BaseModel):
    """Body of an advanced search."""

    query: str = Field(default="", max_length=50)
    filters: AdvancedSearchFilters = Field(default_factory=AdvancedSearchFilters)
    limit: int = Field(default=DEFAULT_LIMIT, ge=0)
    offset: int = Field(default=0, ge=0)
