from typing import List, Optional

from pydantic import BaseModel, Field


class PostSummary(BaseModel):
    slug: str
    path: str
    title: str
    date: Optional[str] = None
    lastmod: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    draft: bool = False
    layout: Optional[str] = None
    summary: Optional[str] = None
    readingTime: Optional[str] = None
    authors: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class PostDetail(PostSummary):
    content: str
    codeBlocks: int = 0


class TagCount(BaseModel):
    tag: str
    count: int
