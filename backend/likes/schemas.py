# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the like endpoints."""

from pydantic import BaseModel, Field


class LikeRequest(BaseModel):
    target: str = Field(..., min_length=1)


class LikeCountResponse(BaseModel):
    # Counters are plain integers; they are never encrypted
    like_count: int
