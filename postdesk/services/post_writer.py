import datetime
import logging
import re
import unicodedata
from pathlib import Path
from typing import Iterable, Optional

import frontmatter

from postdesk.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_BODY = "Write the post here.\n"


def slugify(title: str) -> str:
    ascii_title = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode()
    s = ascii_title.lower()
    s = re.sub(r"[^a-z0-9]+", "-", s).strip("-")
    return s[:80].rstrip("-")


def build_front_matter(
    title: str,
    tags: Optional[Iterable[str]] = None,
    summary: Optional[str] = None,
    layout: Optional[str] = None,
    draft: bool = False,
    on: Optional[datetime.date] = None,
) -> dict:
    """Front-matter for a new post, keys in the order authors expect to see them."""
    fm = {
        "title": title.strip(),
        "date": on or datetime.date.today(),
        "tags": [t.strip() for t in (tags or []) if t and t.strip()],
        "draft": draft,
    }
    if layout:
        fm["layout"] = layout
    fm["summary"] = summary or ""
    return fm


def render_post(front_matter: dict, body: str = DEFAULT_BODY) -> str:
    post = frontmatter.Post(body, **front_matter)
    return frontmatter.dumps(post, sort_keys=False).rstrip("\n") + "\n"


def create_post(
    title: str,
    content_dir: Optional[Path | str] = None,
    extension: str = ".mdx",
    body: str = DEFAULT_BODY,
    **fields,
) -> Path:
    slug = slugify(title)
    if not slug:
        raise ValueError(f"Cannot derive a slug from title {title!r}")

    blog_dir = Path(content_dir or settings.CONTENT_DIR) / settings.BLOG_PREFIX
    path = blog_dir / f"{slug}{extension}"
    if path.exists():
        raise FileExistsError(path)

    blog_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(render_post(build_front_matter(title, **fields), body), encoding="utf-8")
    logger.info(f"Created post {path}")
    return path
