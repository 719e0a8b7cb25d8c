"""CLI command implementations"""

import logging
import sys
import uuid
from typing import Annotated, Optional

import typer

from mdnotion.config import Settings, load_config
from mdnotion.core.sync import HierarchySynchronizer
from mdnotion.core.utils.slug import compact_id, slugify
from mdnotion.errors import MdNotionError
from mdnotion.notion.client import NotionClient


Verbosity = Annotated[int, typer.Option("--verbose", "-v", count=True, help="Increase log output (-v info, -vv debug)")]
Parser = Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")]


def _configure_logging(verbosity: int) -> None:
    """Send mdnotion logs to stderr at WARNING, INFO (-v) or DEBUG (-vv)."""
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("mdnotion")
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    app_logger.addHandler(handler)


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, remote: bool = True) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        settings = load_config(overrides=overrides)
        return settings.require_remote() if remote else settings
    except (ValueError, MdNotionError) as e:
        _fail(str(e))


def workspace_url(settings: Settings, root_id: str) -> str:
    return f"https://{settings.workspace_host}/{slugify(settings.parent_page)}-{compact_id(root_id)}"


def ship_cmd(
    src: Annotated[str, typer.Argument(help="Markdown file or directory to publish")],
    simulate: Annotated[bool, typer.Option("--simulate", help="Create no pages and push nothing; validate only")] = False,
    parser: Parser = None,
    verbose: Verbosity = 0,
    ):
    """Create the page hierarchy for SRC under the root page, then push every document."""
    _configure_logging(verbose)
    settings = _settings(overrides={"parser_config": parser})
    client = NotionClient(settings)
    try:
        root_id = client.get_parent_id_by_name(settings.parent_page)
        sync = HierarchySynchronizer(
            client, root_id,
            simulate=simulate, host=settings.workspace_host, parser_config=settings.parser_config,
        )
        report = sync.ship(src)
    except MdNotionError as e:
        _fail(str(e))

    if simulate:
        typer.echo("Simulation only: no pages were created and nothing was pushed.")
    typer.echo(f"Workspace: {workspace_url(settings, root_id)}")
    typer.echo(
        f"Shipped {report.documents} document(s): "
        f"{report.pages_created} page(s) created, "
        f"{report.blocks_pushed} block(s) pushed"
    )


def clear_cmd(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Archive without asking for confirmation")] = False,
    verbose: Verbosity = 0,
    ):
    """Archive every child page and block under the root page."""
    _configure_logging(verbose)
    settings = _settings()
    client = NotionClient(settings)
    try:
        root_id = client.get_parent_id_by_name(settings.parent_page)
        children = client.get_children(root_id)
    except MdNotionError as e:
        _fail(str(e))

    if not children:
        typer.echo(f"Nothing to clear under '{settings.parent_page}'.")
        return
    typer.echo(f"'{settings.parent_page}' has {len(children)} child item(s).")
    if not yes:
        typer.confirm("Archive all of them?", abort=True)

    try:
        count = client.clear(root_id, children)
    except MdNotionError as e:
        _fail(str(e))
    typer.echo(f"Archived {count} item(s).")


def check_cmd(
    src: Annotated[str, typer.Argument(help="Markdown file or directory to validate")],
    parser: Parser = None,
    verbose: Verbosity = 0,
    ):
    """Parse and convert every document offline, resolving all links, without any remote call."""
    _configure_logging(verbose)
    settings = _settings(overrides={"parser_config": parser}, remote=False)
    sync = HierarchySynchronizer(
        None, str(uuid.uuid4()),
        simulate=True, host=settings.workspace_host, parser_config=settings.parser_config,
    )
    try:
        report = sync.ship(src)
    except MdNotionError as e:
        _fail(str(e))
    typer.echo(f"Checked {report.documents} document(s): {report.blocks_pushed} block(s) converted")
