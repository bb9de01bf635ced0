# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the tag endpoints."""

from typing import List

from pydantic import BaseModel, Field


# -- Requests --------------------------------------------------------------
# The client sends plaintext; the server encrypts both fields before they
# reach the database.


class AddTagRequest(BaseModel):
    target: str = Field(..., min_length=1)
    tag: str = Field(..., min_length=1)


# -- Responses -------------------------------------------------------------
# Always plaintext, decrypted with the caller's own credential.


class AddTagResponse(BaseModel):
    target: str
    tag: str


class TagListResponse(BaseModel):
    tags: List[str]


class TargetListResponse(BaseModel):
    targets: List[str]
