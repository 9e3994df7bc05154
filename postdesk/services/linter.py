"""Hygiene checks for post files.

Front-matter checks (``FM*``) validate the metadata header against
:class:`~postdesk.schemas.frontmatter.FrontMatter`; body checks (``CB*``,
``BD*``) look at fenced code blocks and the body text. Every check reports a
:class:`LintIssue` instead of raising, so one bad file never stops a run.
"""

import datetime
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from pydantic import ValidationError

from postdesk.schemas.frontmatter import KNOWN_FIELDS, FrontMatter
from postdesk.schemas.lint import LintIssue, LintReport, Severity
from postdesk.services.content_parser import (
    FrontMatterError,
    FrontMatterTypeError,
    ParsedDocument,
    extract_code_blocks,
    split_document,
)
from postdesk.settings import Settings, settings

logger = logging.getLogger(__name__)

_HEADER_KEY = re.compile(r"^([A-Za-z_][\w-]*)\s*:")


class _LintFrontMatter(FrontMatter):
    # Required keys come from LintConfig, so nothing is required here
    title: Optional[str] = None
    date: Optional[datetime.date] = None


@dataclass
class LintConfig:
    required_fields: Tuple[str, ...] = ("title", "date")
    allowed_layouts: Tuple[str, ...] = ()
    require_code_language: bool = True

    @classmethod
    def from_settings(cls, current: Optional[Settings] = None) -> "LintConfig":
        current = current or settings
        return cls(
            required_fields=tuple(current.REQUIRED_FIELDS),
            allowed_layouts=tuple(current.ALLOWED_LAYOUTS),
            require_code_language=current.REQUIRE_CODE_LANGUAGE,
        )


@dataclass
class _Collector:
    issues: List[LintIssue] = field(default_factory=list)

    def error(self, code: str, message: str, **where):
        self._add(code, Severity.ERROR, message, where)

    def warning(self, code: str, message: str, **where):
        self._add(code, Severity.WARNING, message, where)

    def _add(self, code, severity, message, where):
        self.issues.append(LintIssue(code=code, severity=severity, message=message, **where))


def lint_text(
    text: str, path: str = "<string>", config: Optional[LintConfig] = None
) -> LintReport:
    config = config or LintConfig.from_settings()
    out = _Collector()

    try:
        parsed = split_document(text)
    except FrontMatterError as e:
        out.error(_header_error_code(e), str(e), line=e.line)
        parsed = _fallback_body(text)
    else:
        if not parsed.has_front_matter:
            out.error("FM001", "missing front-matter header", line=1)
        else:
            _check_front_matter(parsed, config, out)

    _check_body(parsed, config, out)

    issues = sorted(out.issues, key=lambda i: (i.line is not None, i.line or 0, i.code))
    return LintReport(path=path, issues=issues)


def lint_file(path: Path | str, config: Optional[LintConfig] = None) -> LintReport:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Undecodable bytes in {path}: {e}")
        text = path.read_bytes().decode("utf-8", errors="ignore")
    return lint_text(text, path=str(path), config=config)


def lint_directory(repo, parser, config: Optional[LintConfig] = None) -> List[LintReport]:
    """Lint every post the repository lists, in path order."""
    reports = []
    for doc in repo.list_blog_docs():
        text = parser.get_markdown_content(doc)
        reports.append(lint_text(text, path=doc["_id"], config=config))
    reports.sort(key=lambda r: r.path)
    return reports


def lint_paths(paths: Iterable[Path], extensions: Iterable[str], config=None) -> List[LintReport]:
    """Lint files and directories given on the command line."""
    extensions = tuple(extensions)
    files = set()
    for path in paths:
        if path.is_dir():
            files.update(
                p
                for p in path.rglob("*")
                if p.is_file()
                and p.suffix in extensions
                and not any(part.startswith((".", "_")) for part in p.relative_to(path).parts)
            )
        else:
            files.add(path)
    return [lint_file(p, config=config) for p in sorted(files)]


def _header_error_code(error: FrontMatterError) -> str:
    return "FM003" if isinstance(error, FrontMatterTypeError) else "FM002"


def _fallback_body(text: str) -> ParsedDocument:
    # Header is broken: drop everything up to the second delimiter if there is one
    lines = text.removeprefix("\ufeff").split("\n")
    for index, line in enumerate(lines[1:], start=1):
        if re.fullmatch(r"-{3,}", line.rstrip()):
            return ParsedDocument(
                metadata={},
                content="\n".join(lines[index + 1 :]),
                has_front_matter=True,
                body_start_line=index + 2,
            )
    # Never closed: everything after the opening delimiter is treated as body
    return ParsedDocument(
        metadata={}, content="\n".join(lines[1:]), has_front_matter=True, body_start_line=2
    )


def _check_front_matter(parsed: ParsedDocument, config: LintConfig, out: _Collector):
    metadata = {str(key): value for key, value in parsed.metadata.items()}
    field_lines = _field_lines(parsed)
    header_line = parsed.header_start_line

    missing = [name for name in config.required_fields if metadata.get(name) is None]
    for name in missing:
        out.error("FM010", f"required field '{name}' is missing", line=header_line, field=name)

    for name in sorted(set(metadata) - set(KNOWN_FIELDS)):
        out.warning("FM020", f"unknown field '{name}'", line=field_lines.get(name), field=name)

    try:
        front = _LintFrontMatter.model_validate(metadata)
    except ValidationError as e:
        for err in e.errors():
            name = str(err["loc"][0]) if err["loc"] else None
            if name in missing:
                continue  # already reported as FM010
            out.error(
                "FM011",
                f"field '{name}': {err['msg']}",
                line=field_lines.get(name),
                field=name,
            )
        _check_loose_fields(metadata, config, field_lines, out)
        return

    if not front.draft and not (front.summary or "").strip():
        out.warning(
            "FM030",
            "summary is missing or blank",
            line=field_lines.get("summary"),
            field="summary",
        )

    seen = set()
    for tag in front.tags:
        key = tag.lower()
        if key in seen:
            out.warning(
                "FM031", f"duplicate tag '{tag}'", line=field_lines.get("tags"), field="tags"
            )
        seen.add(key)

    _check_layout(front.layout, config, field_lines, out)

    if front.lastmod and front.date and front.lastmod < front.date:
        out.warning(
            "FM033",
            f"lastmod {front.lastmod.isoformat()} is earlier than date {front.date.isoformat()}",
            line=field_lines.get("lastmod"),
            field="lastmod",
        )


def _check_loose_fields(metadata: dict, config: LintConfig, field_lines: dict, out: _Collector):
    # Checks that still make sense when the record as a whole failed validation
    layout = metadata.get("layout")
    if isinstance(layout, str):
        _check_layout(layout, config, field_lines, out)


def _check_layout(layout: Optional[str], config: LintConfig, field_lines: dict, out: _Collector):
    if layout and config.allowed_layouts and layout not in config.allowed_layouts:
        out.warning(
            "FM032",
            f"layout '{layout}' is not one of: {', '.join(config.allowed_layouts)}",
            line=field_lines.get("layout"),
            field="layout",
        )


def _field_lines(parsed: ParsedDocument) -> dict:
    """Map top-level header keys to the file line they're declared on."""
    lines = {}
    for number, line in enumerate(parsed.header.splitlines(), start=parsed.header_start_line):
        match = _HEADER_KEY.match(line)
        if match:
            lines.setdefault(match.group(1), number)
    return lines


def _check_body(parsed: ParsedDocument, config: LintConfig, out: _Collector):
    if not parsed.content.strip():
        out.warning("BD001", "post body is empty", line=parsed.body_start_line)
        return

    for block in extract_code_blocks(parsed.content, line_offset=parsed.body_start_line - 1):
        if not block.closed:
            out.error("CB001", f"code fence '{block.fence}' is never closed", line=block.start_line)
            continue
        if config.require_code_language and not block.language:
            out.warning("CB002", "code block has no language tag", line=block.start_line)
        if not block.code.strip():
            out.warning("CB003", "code block is empty", line=block.start_line)
