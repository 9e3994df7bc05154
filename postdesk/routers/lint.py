import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from postdesk import dependencies as deps
from postdesk.schemas.lint import LintReport, LintRequest
from postdesk.services.linter import LintConfig, lint_directory, lint_text

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/lint", response_model=LintReport)
def lint_document(
    request: LintRequest,
    config: LintConfig = Depends(deps.get_lint_config),
):
    """Lint a document sent in the request body."""
    try:
        return lint_text(request.text, path=request.path, config=config)
    except Exception as e:
        logger.error(f"Unexpected error linting {request.path}: {e}")
        raise HTTPException(status_code=500, detail="Failed to lint document")


@router.get("/lint", response_model=List[LintReport])
def lint_all(
    repo=Depends(deps.get_posts_repo),
    parser=Depends(deps.get_content_parser),
    config: LintConfig = Depends(deps.get_lint_config),
):
    """Lint every post in the content directory."""
    try:
        reports = lint_directory(repo, parser, config=config)
    except Exception as e:
        logger.error(f"Unexpected error linting content: {e}")
        raise HTTPException(status_code=500, detail="Failed to lint content")
    failing = sum(1 for r in reports if not r.ok)
    logger.info(f"Linted {len(reports)} post(s), {failing} with errors")
    return reports
