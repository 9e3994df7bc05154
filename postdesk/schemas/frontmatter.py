"""Front-matter record carried at the top of every post."""

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

KNOWN_FIELDS = (
    "title",
    "date",
    "tags",
    "draft",
    "layout",
    "summary",
    "lastmod",
    "images",
    "authors",
    "canonicalUrl",
)


class FrontMatter(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str
    date: datetime.date
    tags: List[str] = Field(default_factory=list)
    draft: StrictBool = False
    layout: Optional[str] = None
    summary: Optional[str] = None
    lastmod: Optional[datetime.date] = None
    images: List[str] = Field(default_factory=list)
    authors: List[str] = Field(default_factory=list)
    canonicalUrl: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

    @field_validator("date", "lastmod", mode="before")
    @classmethod
    def _date_part(cls, value):
        # YAML turns `2024-01-02 10:00` into a datetime; keep the day only
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, (int, float)):
            # pydantic would read a bare number as a unix timestamp
            raise ValueError("date must be written as YYYY-MM-DD")
        return value

    @field_validator("tags", "images", "authors", mode="before")
    @classmethod
    def _as_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return [
                item.strip() if isinstance(item, str) else item
                for item in value
                if item is not None
            ]
        return value

    @field_validator("tags", "images", "authors")
    @classmethod
    def _drop_blank(cls, value: List[str]) -> List[str]:
        return [item for item in value if item]

    @property
    def extra_fields(self) -> List[str]:
        return sorted((self.model_extra or {}).keys())
