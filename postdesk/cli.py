"""Command line interface for postdesk."""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from postdesk.repos.posts_repo import FilesystemPostsRepo
from postdesk.schemas.lint import Severity
from postdesk.services.content_parser import ContentParser
from postdesk.services.linter import LintConfig, lint_paths
from postdesk.services.post_writer import create_post
from postdesk.services.posts_service import PostsService
from postdesk.settings import settings

app = typer.Typer(
    name="postdesk",
    help="Lint, list and scaffold MDX blog posts.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@app.command()
def lint(
    paths: Annotated[
        Optional[List[Path]],
        typer.Argument(help="Files or directories to lint. Defaults to the content directory."),
    ] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on warnings too.")] = False,
) -> None:
    """Check front-matter and code fences of posts."""
    targets = paths or [Path(settings.CONTENT_DIR) / settings.BLOG_PREFIX]
    missing = [p for p in targets if not p.exists()]
    if missing:
        for path in missing:
            console.print(f"[red]Error:[/red] No such file or directory: {path}")
        raise typer.Exit(2)

    reports = lint_paths(targets, settings.POST_EXTENSIONS, config=LintConfig.from_settings())
    if not reports:
        console.print("[yellow]No posts found.[/yellow]")
        return

    errors = warnings = 0
    for report in reports:
        errors += report.error_count
        warnings += report.warning_count
        for issue in report.issues:
            colour = "red" if issue.severity == Severity.ERROR else "yellow"
            location = f"{report.path}:{issue.line}" if issue.line else report.path
            console.print(
                f"{escape(location)}: [{colour}]{issue.code}[/{colour}] {escape(issue.message)}",
                highlight=False,
            )

    summary = f"{len(reports)} file(s) checked, {errors} error(s), {warnings} warning(s)"
    if errors or (strict and warnings):
        console.print(f"[red]{summary}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{summary}[/green]")


@app.command("list")
def list_posts(
    drafts: Annotated[bool, typer.Option("--drafts", help="Include draft posts.")] = False,
    tag: Annotated[
        Optional[str], typer.Option("--tag", "-t", help="Only posts with this tag.")
    ] = None,
) -> None:
    """Show published posts, newest first."""
    service = PostsService(
        repo=FilesystemPostsRepo(settings.CONTENT_DIR),
        parser=ContentParser(settings.CONTENT_DIR),
    )
    posts = service.list_posts(include_drafts=drafts, tag=tag)
    if not posts:
        console.print("[yellow]No posts found.[/yellow]")
        return

    table = Table(title=f"{len(posts)} post(s)")
    table.add_column("Date")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Tags")
    for post in posts:
        title = escape(post.title)
        if post.draft:
            title += " [dim](draft)[/dim]"
        table.add_row(post.date or "", post.slug, title, ", ".join(post.tags))
    console.print(table)


@app.command()
def new(
    title: Annotated[str, typer.Argument(help="Post title.")],
    tag: Annotated[
        Optional[List[str]], typer.Option("--tag", "-t", help="Tag, repeatable.")
    ] = None,
    summary: Annotated[Optional[str], typer.Option("--summary", "-s")] = None,
    layout: Annotated[Optional[str], typer.Option("--layout")] = None,
    draft: Annotated[bool, typer.Option("--draft", help="Mark the post as draft.")] = False,
) -> None:
    """Scaffold a new post with front-matter filled in."""
    try:
        path = create_post(
            title,
            content_dir=settings.CONTENT_DIR,
            tags=tag,
            summary=summary,
            layout=layout,
            draft=draft,
        )
    except FileExistsError as e:
        console.print(f"[red]Error:[/red] Post already exists: {e}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Created[/green] {path}")


if __name__ == "__main__":
    app()
