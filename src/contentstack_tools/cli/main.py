"""
contentstack-tools CLI
=======================
Command-line interface for the contentstack-tools library.

Commands:
    validate    Validate an entry JSON file against a content type
    render      Render an entry as Markdown
    richtext    Render a bare JSON RTE document as Markdown
    version     Show version information

Usage::

    contentstack-tools validate cricketer.json sachin.json
    contentstack-tools validate blog_post.json draft.json --mode upsert --draft --json-output
    contentstack-tools render cricketer.json sachin.json --heading-level 2 -o sachin.md
    contentstack-tools richtext body.json
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from .. import __version__

console = Console()

logger = logging.getLogger(__name__)


def _load_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read {what} from {path}: {e}[/red]")
        sys.exit(2)


@click.group()
@click.version_option(version=__version__, prog_name="contentstack-tools")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """
    contentstack-tools – schema-driven validation and Markdown for Contentstack.

    CONTENT_TYPE files hold a content type as returned by the Content
    Management API (an object with a "schema" field list).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("content_type_path", metavar="CONTENT_TYPE", type=click.Path(exists=True, path_type=Path))
@click.argument("entry_path", metavar="ENTRY", type=click.Path(exists=True, path_type=Path))
@click.option("--mode", type=click.Choice(["read", "upsert"]), default="read",
              help="read: Delivery API shape; upsert: Management API payload")
@click.option("--draft", is_flag=True, help="Treat every field as optional")
@click.option("--json-output", is_flag=True, help="Output results as JSON")
def validate(
    content_type_path: Path,
    entry_path: Path,
    mode: str,
    draft: bool,
    json_output: bool,
) -> None:
    """Validate an entry against a content type."""
    from ..builder.validator_builder import ValidatorBuilder
    from ..exceptions import ContentTypeError

    content_type = _load_json(content_type_path, "content type")
    entry = _load_json(entry_path, "entry")

    try:
        validator = ValidatorBuilder(content_type).with_mode(mode).draft(draft).build()
    except ContentTypeError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)

    result = validator.check(entry)

    if json_output:
        output = {
            "file": str(entry_path),
            "content_type": validator.content_type.uid,
            "mode": mode,
            "draft": draft,
            "passed": result.ok,
            "missing_fields": result.missing_fields,
            "issues": [
                {"path": i.path, "kind": i.kind.value, "message": i.message}
                for i in result.issues
            ],
        }
        click.echo(json.dumps(output, indent=2))
    else:
        console.print()
        status_str = "[bold green]PASS[/bold green]" if result.ok else "[bold red]FAIL[/bold red]"
        console.print(Panel(
            f"[bold]{entry_path.name}[/bold]\n"
            f"Status: {status_str}  |  "
            f"Content type: {validator.content_type.uid or '—'}  |  "
            f"Mode: {mode}{' (draft)' if draft else ''}",
            title="contentstack-tools Validation",
            border_style="blue",
        ))

        if result.issues:
            t = Table(box=box.SIMPLE, title="Issues")
            t.add_column("#", style="dim")
            t.add_column("Path")
            t.add_column("Kind")
            t.add_column("Message")
            for n, issue in enumerate(result.issues, 1):
                color = "yellow" if issue.kind.value == "missing_required" else "red"
                t.add_row(
                    str(n),
                    issue.path or "<entry>",
                    f"[{color}]{issue.kind.value}[/{color}]",
                    issue.message,
                )
            console.print(t)

        if result.missing_fields:
            console.print(f"\n[bold]Missing fields:[/bold] {', '.join(result.missing_fields)}")
        console.print()

    sys.exit(0 if result.ok else 1)


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("content_type_path", metavar="CONTENT_TYPE", type=click.Path(exists=True, path_type=Path))
@click.argument("entry_path", metavar="ENTRY", type=click.Path(exists=True, path_type=Path))
@click.option("--heading-level", type=click.IntRange(1, 6), default=1, show_default=True,
              help="Heading level of the entry title")
@click.option("--include-system-fields", is_flag=True, help="Render uid, created_at, ...")
@click.option("--no-tables", is_flag=True, help="Render simple groups as headings instead of tables")
@click.option("--keep-empty", is_flag=True, help="Do not skip empty values")
@click.option("--title-field", default="title", show_default=True)
@click.option("--description-field", default="meta_description", show_default=True)
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write Markdown to a file instead of stdout")
def render(
    content_type_path: Path,
    entry_path: Path,
    heading_level: int,
    include_system_fields: bool,
    no_tables: bool,
    keep_empty: bool,
    title_field: str,
    description_field: str,
    output: Path | None,
) -> None:
    """Render an entry as Markdown."""
    from ..exceptions import ContentTypeError
    from ..markdown.entry import render_entry
    from ..models.options import RenderOptions

    content_type = _load_json(content_type_path, "content type")
    entry = _load_json(entry_path, "entry")

    options = RenderOptions(
        heading_level=heading_level,
        include_system_fields=include_system_fields,
        use_tables=not no_tables,
        skip_empty=not keep_empty,
        title_field=title_field,
        description_field=description_field,
    )

    try:
        markdown = render_entry(entry, content_type, options)
    except ContentTypeError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)

    if output is None:
        click.echo(markdown)
        return

    output.write_text(markdown + "\n", encoding="utf-8")
    logger.info("Wrote %d characters to %s", len(markdown), output)
    console.print(f"[green]✓[/green] Markdown written to [bold]{output}[/bold]")


# ---------------------------------------------------------------------------
# richtext
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("document_path", metavar="DOCUMENT", type=click.Path(exists=True, path_type=Path))
def richtext(document_path: Path) -> None:
    """Render a JSON RTE document as Markdown."""
    from ..markdown.richtext import render_rich_text

    document = _load_json(document_path, "rich text document")
    click.echo(render_rich_text(document))


# ---------------------------------------------------------------------------
# version info
# ---------------------------------------------------------------------------


@cli.command("version")
def show_version() -> None:
    """Show detailed version information."""
    console.print(Panel(
        f"[bold cyan]contentstack-tools[/bold cyan] v{__version__}\n\n"
        "Contentstack content type → entry validator and Markdown renderer\n"
        "Validation engine: pydantic v2\n"
        "Markdown flavour:  GitHub (GFM tables)",
        title="contentstack-tools",
        border_style="cyan",
    ))


if __name__ == "__main__":
    cli()
