"""Pydantic schemas for letters and the letter endpoints."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LockType(str, Enum):
    """How a letter is unlocked."""

    HONOR = "honor"
    TIME = "time"


class MediaKind(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while using snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MediaBlock(CamelModel):
    """A single image, audio or video attachment."""

    kind: MediaKind = Field(..., description="Media type: image, audio or video.")
    src: str = Field(..., description="Absolute http(s) URL of the media.")
    alt: str | None = Field(default=None, description="Optional alternative text.")


class LetterRecord(CamelModel):
    """A letter as stored and served.

    Time-locked letters always carry ``unlock_at``; honor-locked ones never do.
    Timestamps are kept as the ISO strings clients sent or the store stamped.
    """

    id: str = Field(..., description="Unique id, lowercase letters, digits and hyphens.")
    title: str
    preview: str
    content: str
    lock_type: LockType
    unlock_at: str | None = Field(
        default=None,
        description="ISO datetime after which a time-locked letter opens.",
    )
    media: list[MediaBlock] | None = None
    updated_at: str | None = Field(
        default=None,
        description="ISO datetime of the last CMS write.",
    )
    updated_by: str | None = Field(
        default=None,
        description="Actor id that performed the last CMS write.",
    )


class LetterListResponse(BaseModel):
    letters: list[LetterRecord]


class LetterUpdateResponse(BaseModel):
    accepted: bool = True
    letter: LetterRecord
