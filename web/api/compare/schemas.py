"""Compare API request schemas."""

from pydantic import BaseModel, Field

from app.services.compare.metrics import DEFAULT_METRICS


class MultipleCompareRequest(BaseModel):
    """Body of a multi-player comparison."""

    usernames: list[str] = Field(default_factory=list)
    metrics: list[str] = Field(default_factory=lambda: list(DEFAULT_METRICS))
