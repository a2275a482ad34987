"""Command-line interface for wikilinks-plus."""

from pathlib import Path

import click

from . import __version__
from .config import ConfigError, WikilinksOptions, resolve_options
from .render import (
    ENGINES,
    MARKDOWN_IT,
    FrontmatterError,
    parse_markdown_file,
    render_markdown,
)


@click.group()
@click.version_option(version=__version__, prog_name="wikilinks-plus")
def main():
    """wikilinks-plus - Obsidian-style wikilinks and image embeds for markdown."""
    pass


@main.command()
@click.argument(
    "source", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Options file (default: nearest .wikilinks/config.toml)",
)
@click.option(
    "--engine",
    "-e",
    type=click.Choice(ENGINES),
    default=MARKDOWN_IT,
    show_default=True,
    help="Markdown parser to render with",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write HTML here instead of stdout",
)
@click.option("--absolute", "-a", is_flag=True, help="Force absolute link and image URLs")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors")
def render(
    source: Path,
    config_path: Path | None,
    engine: str,
    output: Path | None,
    absolute: bool,
    verbose: bool,
    quiet: bool,
):
    """Render a markdown file to HTML."""
    from .logging import debug, info, setup_logging

    setup_logging(verbose=verbose, quiet=quiet)

    if config_path is None:
        config_path = WikilinksOptions.find_config(source.parent)

    try:
        if config_path is not None:
            debug(f"Using options from {config_path}")
            options = WikilinksOptions.load(config_path)
        else:
            options = resolve_options()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if absolute:
        options = options.with_absolute_urls()

    try:
        metadata, content = parse_markdown_file(source, strict=True)
    except FrontmatterError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if metadata:
        debug(f"Skipped frontmatter keys: {', '.join(sorted(metadata))}")

    html = render_markdown(content, options, engine=engine)

    if output is None:
        click.echo(html, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    info(f"Wrote {output}")


if __name__ == "__main__":
    main()
