"""scrapeweave CLI — work with scraping schemes from the shell.

Usage:
    scrapeweave new LIST                          # Print an empty scheme
    scrapeweave relativize scheme.json            # Make list paths relative
    scrapeweave interlace scheme.json data.json   # Merge content into a scheme
    scrapeweave extract scheme.json page.html     # Run a scheme against a page
    scrapeweave locate page.html "ul > li"        # Print structural paths

Scheme files hold either a bare scheme or instructions (``{"url", "scheme"}``);
commands that print a scheme keep the shape of their input.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click
from cssselect import SelectorError
from lxml import html

from scrapeweave.common.exceptions import SchemeException
from scrapeweave.common.path_locator import locate_path
from scrapeweave.extractor import extract
from scrapeweave.interlacer import InterlaceMode, interlace
from scrapeweave.relativizer import relativize
from scrapeweave.scheme import (
    Instructions,
    Scheme,
    SchemeType,
    dump_instructions,
    dump_scheme,
    empty_scheme,
    iter_source_urls,
    load_document,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(path: Path) -> Instructions | Scheme:
    """Read a scheme or instructions file.

    Raises:
        click.ClickException: If the file is not a valid document.
    """
    try:
        return load_document(path.read_bytes())
    except SchemeException as e:
        raise click.ClickException(f"{path}: {e}") from e


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_bytes())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path}: invalid JSON: {e}") from e


def _echo_document(document: Instructions | Scheme) -> None:
    if isinstance(document, Instructions):
        data = dump_instructions(document)
    else:
        data = dump_scheme(document)
    click.echo(json.dumps(data, indent=2))


def _scheme_of(document: Instructions | Scheme) -> Scheme:
    if isinstance(document, Instructions):
        return document.scheme
    return document


def _with_scheme(
    document: Instructions | Scheme, scheme: Scheme
) -> Instructions | Scheme:
    if isinstance(document, Instructions):
        return document.model_copy(update={"scheme": scheme})
    return scheme


_verbose_option = click.option(
    "-v", "--verbose", is_flag=True, help="Verbose logging."
)

_existing_file = click.Path(
    exists=True, dir_okay=False, readable=True, path_type=Path
)


@click.group()
@click.version_option(package_name="scrapeweave")
def cli() -> None:
    """Tools for scraping schemes."""


@cli.command("new")
@click.argument(
    "kind",
    type=click.Choice(
        [kind.value for kind in SchemeType], case_sensitive=False
    ),
)
def new_scheme(kind: str) -> None:
    """Print an empty scheme of KIND."""
    click.echo(json.dumps(dump_scheme(empty_scheme(kind.upper())), indent=2))


@cli.command("relativize")
@click.argument("scheme_file", type=_existing_file)
@_verbose_option
def relativize_command(scheme_file: Path, verbose: bool) -> None:
    """Rewrite list element paths relative to their list.

    Prints the rewritten scheme (or instructions) as JSON.
    """
    _configure_logging(verbose)
    document = _load(scheme_file)
    _echo_document(_with_scheme(document, relativize(_scheme_of(document))))


@cli.command("interlace")
@click.argument("scheme_file", type=_existing_file)
@click.argument("content_file", type=_existing_file)
@click.option(
    "--per-element",
    is_flag=True,
    help="Also interlace one element scheme per list item.",
)
@_verbose_option
def interlace_command(
    scheme_file: Path, content_file: Path, per_element: bool, verbose: bool
) -> None:
    """Merge scraped CONTENT_FILE into the scheme in SCHEME_FILE."""
    _configure_logging(verbose)
    document = _load(scheme_file)
    content = _load_json(content_file)
    mode = InterlaceMode.REPRESENTATIVE
    if per_element:
        mode = InterlaceMode.PER_ELEMENT

    populated = interlace(_scheme_of(document), content, mode)
    _echo_document(_with_scheme(document, populated))


@cli.command("extract")
@click.argument("scheme_file", type=_existing_file)
@click.argument("html_file", type=_existing_file)
@click.option(
    "--url",
    default=None,
    help="URL of the page (defaults to the instructions' url).",
)
@click.option(
    "--interlace",
    "interlace_result",
    is_flag=True,
    help="Print the scheme populated with the result instead.",
)
@_verbose_option
def extract_command(
    scheme_file: Path,
    html_file: Path,
    url: str | None,
    interlace_result: bool,
    verbose: bool,
) -> None:
    """Run the scheme in SCHEME_FILE against HTML_FILE."""
    _configure_logging(verbose)
    document = _load(scheme_file)
    scheme = _scheme_of(document)

    if isinstance(document, Instructions):
        if url is None:
            url = document.url
        sources = list(iter_source_urls(document))
        if len(sources) > 1:
            logger.warning(
                f"Scheme reads from {len(sources)} pages; only {html_file} "
                "is used for all of them"
            )

    try:
        content = extract(scheme, html_file.read_bytes(), url or "")
    except SchemeException as e:
        raise click.ClickException(str(e)) from e

    if interlace_result:
        _echo_document(_with_scheme(document, interlace(scheme, content)))
    else:
        click.echo(json.dumps(content, indent=2))


@cli.command("locate")
@click.argument("html_file", type=_existing_file)
@click.argument("selector")
@_verbose_option
def locate_command(html_file: Path, selector: str, verbose: bool) -> None:
    """Print the structural path of each element matching SELECTOR."""
    _configure_logging(verbose)
    doc = html.document_fromstring(html_file.read_bytes())

    try:
        elements = doc.cssselect(selector)
    except SelectorError as e:
        raise click.BadParameter(
            f"Invalid CSS selector '{selector}': {e}",
            param_hint="SELECTOR",
        ) from e

    if not elements:
        click.echo("No elements found.")
        return

    for element in elements:
        click.echo(locate_path(element))


if __name__ == "__main__":
    cli()
