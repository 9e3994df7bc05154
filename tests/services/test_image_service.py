from postdesk.services.image_service import (
    get_content_type_from_filename,
    get_image,
    process_image_references,
)

BASE = "http://api/images"


def test_get_image_reads_bytes_and_type(tmp_path):
    (tmp_path / "hero.png").write_bytes(b"\x89PNG")

    data, content_type = get_image("hero.png", root=tmp_path)

    assert data == b"\x89PNG"
    assert content_type == "image/png"


def test_get_image_missing_returns_none(tmp_path, caplog):
    with caplog.at_level("WARNING"):
        assert get_image("nope.png", root=tmp_path) == (None, None)

    assert any("Image not found" in rec.message for rec in caplog.records)


def test_get_image_rejects_escape(tmp_path):
    images = tmp_path / "img"
    images.mkdir()
    (tmp_path / "secret.png").write_bytes(b"x")

    assert get_image("../secret.png", root=images) == (None, None)


def test_get_image_empty_file_is_missing(tmp_path):
    (tmp_path / "empty.gif").write_bytes(b"")

    assert get_image("empty.gif", root=tmp_path) == (None, None)


def test_get_content_type_from_filename():
    assert get_content_type_from_filename("a.JPG") == "image/jpeg"
    assert get_content_type_from_filename("a.jpeg") == "image/jpeg"
    assert get_content_type_from_filename("a.gif") == "image/gif"
    assert get_content_type_from_filename("a.svg") == "image/svg+xml"
    assert get_content_type_from_filename("a.webp") == "image/webp"
    assert get_content_type_from_filename("a.bin") == "application/octet-stream"


def test_process_image_references_rewrites_both_styles():
    content = "![[diagram.png]]\n![ Alt text ](/img/pics/a.jpg)\n![ext](https://x/y.png)\n"

    result = process_image_references(content, BASE)

    assert result == (
        f"![]({BASE}/diagram.png)\n"
        f"![Alt text]({BASE}/pics/a.jpg)\n"
        "![ext](https://x/y.png)\n"
    )


def test_process_image_references_skips_code_blocks():
    content = "```md\n![a](/img/a.png)\n```\n![b](/img/b.png)\n"

    result = process_image_references(content, BASE)

    assert "![a](/img/a.png)" in result
    assert f"![b]({BASE}/b.png)" in result


def test_process_image_references_unclosed_fence_protects_rest():
    content = "![a](/img/a.png)\n```\n![b](/img/b.png)\n"

    result = process_image_references(content, BASE)

    assert result.startswith(f"![a]({BASE}/a.png)")
    assert "![b](/img/b.png)" in result


def test_process_image_references_keeps_fence_lines_with_form_feeds():
    # \x0c splits lines for str.splitlines but not for fence scanning
    content = "a\x0cb\x0cc\n```\n![[a.png]]\n```\n![[b.png]]\n"

    result = process_image_references(content, BASE)

    assert result.startswith("a\x0cb\x0cc\n```\n![[a.png]]\n```\n")
    assert result.endswith(f"![]({BASE}/b.png)\n")
