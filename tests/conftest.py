import textwrap

import pytest


class FakeRepo:
    """
    Minimal repo stand-in used in service tests.
    """

    def __init__(self, docs):
        self.docs = docs

    def list_blog_docs(self):
        return list(self.docs)

    def get_blog_doc(self, slug):
        for doc in self.docs:
            if doc.get("slug") == slug:
                return doc
        return None


class FakeParser:
    """
    Minimal content parser stand-in keyed by document id.
    """

    def __init__(self, content_by_id: dict[str, str]):
        self.content_by_id = content_by_id

    def get_markdown_content(self, doc: dict) -> str:
        raw = self.content_by_id.get(doc.get("_id"))
        if raw is None:
            return ""
        return textwrap.dedent(raw).lstrip()


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, list_posts_return=None, get_post_return=None, list_tags_return=None):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._list_tags_return = list_tags_return or []
        self.calls = []

    def list_posts(self, include_drafts=False, tag=None):
        self.calls.append(("list_posts", include_drafts, tag))
        return self._list_posts_return

    def get_post(self, slug: str, include_drafts=False):
        self.calls.append(("get_post", slug, include_drafts))
        return self._get_post_return

    def list_tags(self, include_drafts=False):
        self.calls.append(("list_tags", include_drafts))
        return self._list_tags_return


def make_doc(slug: str, ext: str = ".mdx") -> dict:
    doc_id = f"blog/{slug}{ext}"
    return {"_id": doc_id, "path": doc_id, "slug": slug}


def write_post(root, relative: str, text: str):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path):
    """A content directory with a published post, a draft and a partial."""
    write_post(
        tmp_path,
        "blog/hello-world.mdx",
        """
        ---
        title: Hello World
        date: 2024-05-01
        tags: [intro, Python]
        summary: First post.
        ---
        Hello there.
        """,
    )
    write_post(
        tmp_path,
        "blog/2023/older.md",
        """
        ---
        title: Older
        date: 2023-01-10
        tags: python
        summary: An older one.
        ---
        ```python
        print("hi")
        ```
        """,
    )
    write_post(
        tmp_path,
        "blog/wip.mdx",
        """
        ---
        title: Work in progress
        date: 2024-06-01
        draft: true
        ---
        Not ready.
        """,
    )
    write_post(tmp_path, "blog/_partials/footer.mdx", "Footer\n")
    write_post(tmp_path, "blog/notes.txt", "not a post\n")
    return tmp_path
