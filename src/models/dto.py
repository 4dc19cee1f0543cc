#!/usr/bin/env python
"""
Pydantic DTOs for request bodies accepted by the HTTP layer.

Field aliases mirror the camelCase JSON sent by the mobile client; the
snake_case names are accepted too so internal callers can build them directly.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _RequestModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SplitInstruction(_RequestModel):
    """Intent to materialize one genre split as a real playlist."""

    genre: str = ""
    name: str
    track_uris: List[str] = Field(default_factory=list, alias="trackUris")
    make_public: bool = Field(default=False, alias="makePublic")

    @field_validator("track_uris", mode="before")
    @classmethod
    def _drop_blank_uris(cls, value: object) -> List[str]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("trackUris must be an array")
        return [str(uri).strip() for uri in value if uri and str(uri).strip()]


class ApplySplitRequest(_RequestModel):
    splits: List[SplitInstruction] = Field(default_factory=list)
    description_template: Optional[str] = Field(default=None, alias="descriptionTemplate")


class FilterGenresRequest(_RequestModel):
    genres: List[str] = Field(default_factory=list)


class CreateMixRequest(_RequestModel):
    genres: List[str] = Field(default_factory=list)
    name: Optional[str] = None
    make_public: bool = Field(default=False, alias="makePublic")


class StartAuthRequest(_RequestModel):
    redirect_uri: Optional[str] = Field(default=None, alias="redirectUri")


class RefreshTokenRequest(_RequestModel):
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")


__all__ = [
    "SplitInstruction",
    "ApplySplitRequest",
    "FilterGenresRequest",
    "CreateMixRequest",
    "StartAuthRequest",
    "RefreshTokenRequest",
]
