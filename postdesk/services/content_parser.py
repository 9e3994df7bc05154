import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import frontmatter
import yaml

logger = logging.getLogger(__name__)

_yaml_handler = frontmatter.YAMLHandler()

# Header delimiter: a line of three or more dashes
_BOUNDARY = re.compile(r"^-{3,}[ \t]*\r?$", re.MULTILINE)

# Up to three spaces of indentation, then at least three backticks or tildes
_FENCE_OPEN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")


class FrontMatterError(ValueError):
    """Raised when a document's metadata header can't be read."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class FrontMatterTypeError(FrontMatterError):
    """The header is valid YAML but not a key-value mapping."""


@dataclass
class ParsedDocument:
    metadata: dict
    content: str
    has_front_matter: bool
    body_start_line: int = 1
    header: str = ""
    header_start_line: int = 1


@dataclass
class CodeBlock:
    fence: str
    start_line: int
    language: Optional[str] = None
    info: str = ""
    end_line: Optional[int] = None
    lines: List[str] = field(default_factory=list)

    @property
    def closed(self) -> bool:
        return self.end_line is not None

    @property
    def code(self) -> str:
        return "\n".join(self.lines)


def split_document(text: str) -> ParsedDocument:
    """Split a post into its YAML header and body.

    Line numbers are 1-based and refer to the original text, so the body's
    first line is reported as ``body_start_line``.
    """
    text = text.removeprefix("\ufeff")
    if not _BOUNDARY.match(text):
        return ParsedDocument(metadata={}, content=text, has_front_matter=False)

    boundaries = list(_BOUNDARY.finditer(text))
    if len(boundaries) < 2:
        raise FrontMatterError("front-matter header is never closed", line=1)

    opening, closing = boundaries[0], boundaries[1]
    raw = text[opening.end() : closing.start()]
    body = text[closing.end() :]
    if body.startswith("\n"):
        body = body[1:]
    body_start_line = text.count("\n", 0, closing.end()) + 2
    header_start_line = text.count("\n", 0, opening.end()) + 1

    try:
        metadata = _yaml_handler.load(raw)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        # mark.line is 0-based and counts from where the header text starts
        line = header_start_line + mark.line if mark is not None else header_start_line
        problem = getattr(e, "problem", None) or str(e)
        raise FrontMatterError(f"invalid YAML in front-matter: {problem}", line=line) from e
    except ValueError as e:
        # Timestamps like 2024-13-45 match the YAML pattern but fail in the constructor
        raise FrontMatterError(
            f"invalid YAML in front-matter: {e}", line=header_start_line
        ) from e

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise FrontMatterTypeError(
            f"front-matter must be a mapping, got {type(metadata).__name__}",
            line=header_start_line + 1,
        )

    return ParsedDocument(
        metadata=metadata,
        content=body,
        has_front_matter=True,
        body_start_line=body_start_line,
        header=raw,
        header_start_line=header_start_line,
    )


def extract_code_blocks(content: str, line_offset: int = 0) -> List[CodeBlock]:
    """Find fenced code blocks in a markdown body.

    ``line_offset`` is added to every reported line, so callers passing a body
    that starts on line N of a file should pass N - 1.
    """
    blocks: List[CodeBlock] = []
    current: Optional[CodeBlock] = None
    closer: Optional[re.Pattern] = None

    for number, line in enumerate(content.split("\n"), start=1 + line_offset):
        if current is not None:
            if closer.match(line):
                current.end_line = number
                current = None
                closer = None
            else:
                current.lines.append(line)
            continue

        match = _FENCE_OPEN.match(line)
        if not match:
            continue
        fence = match.group("fence")
        info = match.group("info").strip()
        if fence[0] == "`" and "`" in info:
            # inline code such as ```foo``` is not a fence
            continue

        current = CodeBlock(
            fence=fence,
            start_line=number,
            language=info.split()[0] if info else None,
            info=info,
        )
        closer = re.compile(
            r"^ {0,3}" + re.escape(fence[0]) + "{" + str(len(fence)) + r",}\s*$"
        )
        blocks.append(current)

    return blocks


class ContentParser:
    def __init__(self, root: Path | str):
        self.root = Path(root)

    def get_markdown_content(self, doc: dict) -> str:
        """Get the full text of a repository document."""
        raw = self._get_raw_content(doc)
        if raw is None:
            return ""
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning(f"Undecodable bytes in {doc.get('_id')}, dropping them")
            return raw.decode("utf-8", errors="ignore")

    def parse(self, doc: dict) -> ParsedDocument:
        return split_document(self.get_markdown_content(doc))

    def _get_raw_content(self, doc: dict) -> bytes | None:
        if "content" in doc:
            content = doc["content"]
            return content.encode("utf-8") if isinstance(content, str) else content

        path = doc.get("path") or doc.get("_id")
        if not path:
            return None
        try:
            return (self.root / path).read_bytes()
        except FileNotFoundError:
            logger.warning(f"Document vanished before it could be read: {path}")
            return None
