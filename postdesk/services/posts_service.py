import datetime
import logging
import math
from collections import Counter
from typing import List, Optional

from pydantic import ValidationError

from postdesk.schemas.blog import PostDetail, PostSummary, TagCount
from postdesk.schemas.frontmatter import FrontMatter
from postdesk.services.content_parser import FrontMatterError, extract_code_blocks, split_document
from postdesk.services.image_service import process_image_references
from postdesk.settings import settings

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200


class PostsService:
    def __init__(self, repo, parser, base_image_url: Optional[str] = None):
        self.repo = repo
        self.parser = parser
        self.base_image_url = base_image_url or settings.image_base_url

    def list_posts(
        self, include_drafts: bool = False, tag: Optional[str] = None
    ) -> List[PostSummary]:
        posts = [p for p in self._load_all(include_drafts) if _has_tag(p, tag)]
        # Newest first; slug breaks ties so the order is stable
        posts.sort(key=lambda p: p["slug"])
        posts.sort(key=lambda p: p.get("date") or "0000-01-01", reverse=True)
        return [PostSummary(**p) for p in posts]

    def get_post(self, slug: str, include_drafts: bool = False) -> Optional[PostDetail]:
        doc = self.repo.get_blog_doc(slug)
        if not doc:
            return None
        post_data = parse_post_data(
            doc,
            doc.get("slug", slug),
            include_content=True,
            parser=self.parser,
            base_image_url=self.base_image_url,
        )
        if not post_data:
            return None
        if post_data["draft"] and not include_drafts:
            logger.info(f"Hiding draft post {slug}")
            return None
        return PostDetail(**post_data)

    def list_tags(self, include_drafts: bool = False) -> List[TagCount]:
        counts = Counter()
        for post in self._load_all(include_drafts):
            # a post counts once per tag, whatever the casing
            counts.update({t.lower() for t in post["tags"]})
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [TagCount(tag=tag, count=count) for tag, count in ranked]

    def _load_all(self, include_drafts: bool) -> List[dict]:
        posts = []
        for doc in self.repo.list_blog_docs():
            post_data = parse_post_data(
                doc,
                doc.get("slug") or doc["_id"],
                include_content=False,
                parser=self.parser,
                base_image_url=self.base_image_url,
            )
            if not post_data:
                continue
            if post_data["draft"] and not include_drafts:
                continue
            posts.append(post_data)
        return posts


def parse_post_data(
    doc: dict,
    slug: str,
    include_content: bool = False,
    *,
    parser,
    base_image_url: str,
) -> Optional[dict]:
    """Parse front-matter and return standardized post data"""
    markdown = parser.get_markdown_content(doc)
    if not markdown:
        logger.warning(f"No markdown content found for post {slug}")
        return None

    try:
        parsed = split_document(markdown)
        front = FrontMatter.model_validate(parsed.metadata)
    except FrontMatterError as e:
        logger.warning(f"Failed to parse front-matter of {slug} (line {e.line}): {e}")
        return None
    except ValidationError as e:
        logger.warning(f"Invalid front-matter in {slug}: {e.error_count()} error(s)")
        return None

    post_data = {
        "slug": _normalize_slug(slug),
        "path": doc.get("path") or doc.get("_id", slug),
        "title": front.title,
        "date": _convert_date(front.date),
        "lastmod": _convert_date(front.lastmod),
        "tags": front.tags,
        "draft": front.draft,
        "layout": front.layout,
        "summary": front.summary,
        "readingTime": calculate_reading_time(parsed.content),
        "authors": front.authors,
        "images": [_process_frontmatter_image(i, base_image_url) for i in front.images],
    }

    if include_content:
        post_data["content"] = process_image_references(parsed.content, base_image_url)
        post_data["codeBlocks"] = len(extract_code_blocks(parsed.content))

    return post_data


def _has_tag(post: dict, tag: Optional[str]) -> bool:
    if not tag:
        return True
    wanted = tag.lower()
    return any(t.lower() == wanted for t in post["tags"])


def _normalize_slug(slug: str) -> str:
    for ext in settings.POST_EXTENSIONS:
        if slug.endswith(ext):
            return slug[: -len(ext)]
    return slug


def _convert_date(value):
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


def _process_frontmatter_image(image_path: str, base_url: str) -> str:
    if image_path.startswith("/img/"):
        return f"{base_url}/{image_path[5:]}"
    return image_path


def calculate_reading_time(text: str) -> str:
    words = text.split()
    minutes = math.ceil(len(words) / WORDS_PER_MINUTE) or 1
    return f"{minutes} min"
