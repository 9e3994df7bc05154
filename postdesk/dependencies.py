from fastapi import Depends

from postdesk.repos.posts_repo import FilesystemPostsRepo
from postdesk.services.content_parser import ContentParser
from postdesk.services.linter import LintConfig
from postdesk.services.posts_service import PostsService
from postdesk.settings import settings


def get_posts_repo():
    return FilesystemPostsRepo(settings.CONTENT_DIR)


def get_content_parser():
    return ContentParser(settings.CONTENT_DIR)


def get_lint_config():
    return LintConfig.from_settings(settings)


def get_posts_service(
    repo=Depends(get_posts_repo),
    parser=Depends(get_content_parser),
):
    return PostsService(repo=repo, parser=parser, base_image_url=settings.image_base_url)
