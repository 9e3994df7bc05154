import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from postdesk.settings import settings

logger = logging.getLogger(__name__)


class FilesystemPostsRepo:
    def __init__(
        self,
        content_dir: Path | str,
        prefix: Optional[str] = None,
        extensions: Optional[Iterable[str]] = None,
    ):
        self.root = Path(content_dir)
        self.prefix = prefix if prefix is not None else settings.BLOG_PREFIX
        self.extensions = tuple(extensions or settings.POST_EXTENSIONS)

    @property
    def blog_dir(self) -> Path:
        return self.root / self.prefix

    def list_blog_docs(self) -> List[dict]:
        if not self.blog_dir.is_dir():
            logger.warning(f"Blog directory does not exist: {self.blog_dir}")
            return []
        docs = [
            self._to_doc(path)
            for path in self.blog_dir.rglob("*")
            if path.is_file() and self._is_valid(path)
        ]
        return sorted(docs, key=lambda doc: doc["_id"])

    def get_blog_doc(self, slug: str) -> Optional[dict]:
        if not self._is_safe_slug(slug):
            logger.warning(f"Rejected unsafe slug: {slug!r}")
            return None

        for ext in self.extensions:
            path = self.blog_dir / f"{slug}{ext}"
            if path.is_file() and self._is_valid(path):
                return self._to_doc(path)

        # Slugs are case-insensitive on some hosts; match the listing instead
        wanted = slug.lower()
        for doc in self.list_blog_docs():
            if doc["slug"].lower() == wanted:
                return doc
        return None

    def _to_doc(self, path: Path) -> dict:
        stat = path.stat()
        doc_id = path.relative_to(self.root).as_posix()
        slug = path.relative_to(self.blog_dir).with_suffix("").as_posix()
        return {
            "_id": doc_id,
            "path": doc_id,
            "slug": slug,
            "size": stat.st_size,
            "mtime": stat.st_mtime,
        }

    def _is_valid(self, path: Path) -> bool:
        if path.suffix not in self.extensions:
            return False
        relative = path.relative_to(self.blog_dir)
        # Hidden files and `_partials` are never posts
        return not any(part.startswith((".", "_")) for part in relative.parts)

    @staticmethod
    def _is_safe_slug(slug: str) -> bool:
        if not slug or "\\" in slug or "\x00" in slug:
            return False
        pure = PurePosixPath(slug)
        return not pure.is_absolute() and ".." not in pure.parts
