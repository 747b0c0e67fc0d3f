import logging
from pathlib import Path
from typing import Optional

import click

from . import config
from .catalog import CatalogError, load_catalog
from .indexer import IndexFileError, SearchIndex, build_index, load_or_build_index, save_index
from .matcher import answer

WELCOME_MESSAGE = "Welcome to the Thoughtful AI Customer Support Agent!"
PROMPT_HINT = "Ask a question about Thoughtful AI (type 'exit' to quit):"
FAREWELL_MESSAGE = "Thank you for using the Thoughtful AI Customer Support Agent. Goodbye!"
EXIT_KEYWORD = "exit"

data_option = click.option(
    "--data", "data_path",
    type=click.Path(path_type=Path),
    default=config.QA_DATA_PATH,
    show_default=True,
    help="Q&A catalog JSON file.",
)
index_option = click.option(
    "--index", "index_path",
    type=click.Path(path_type=Path),
    default=config.INDEX_PATH,
    help="Cached index written by build-index.",
)


def _startup_index(data_path: Path, index_path: Optional[Path]) -> SearchIndex:
    try:
        return load_or_build_index(data_path, index_path)
    except (CatalogError, IndexFileError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
def cli() -> None:
    """Thoughtful AI customer support agent."""
    logging.basicConfig(level=config.LOG_LEVEL)


@cli.command()
@data_option
@index_option
@click.option("--threshold", type=float, default=config.MATCH_THRESHOLD, show_default=True,
              help="Minimum similarity for a direct answer.")
def chat(data_path: Path, index_path: Optional[Path], threshold: float) -> None:
    """Answer questions interactively until 'exit'."""
    index = _startup_index(data_path, index_path)

    click.echo(WELCOME_MESSAGE)
    click.echo(PROMPT_HINT)

    while True:
        try:
            line = click.prompt(">", default="", show_default=False, prompt_suffix=" ")
        except click.Abort:
            # end of input or Ctrl-C
            click.echo()
            break

        text = line.strip()
        if text.lower() == EXIT_KEYWORD:
            break
        click.echo(answer(index, text, threshold))

    click.echo(FAREWELL_MESSAGE)


@cli.command()
@click.argument("question", nargs=-1, required=True)
@data_option
@index_option
@click.option("--threshold", type=float, default=config.MATCH_THRESHOLD, show_default=True,
              help="Minimum similarity for a direct answer.")
def ask(question: tuple, data_path: Path, index_path: Optional[Path], threshold: float) -> None:
    """Answer a single question and exit."""
    index = _startup_index(data_path, index_path)
    click.echo(answer(index, " ".join(question).strip(), threshold))


@cli.command("build-index")
@data_option
@click.option("--output", "output_path", type=click.Path(path_type=Path),
              default=config.INDEX_PATH or config.DEFAULT_INDEX_PATH, show_default=True,
              help="Where to write the index.")
def build_index_command(data_path: Path, output_path: Path) -> None:
    """Build the TF-IDF index from the catalog and cache it on disk."""
    try:
        catalog = load_catalog(data_path)
    except CatalogError as e:
        raise click.ClickException(str(e)) from e

    index = build_index(catalog)
    save_index(index, output_path)
    click.echo(click.style(
        f"✓ Indexed {len(index.catalog)} questions ({len(index.idf)} terms) → {output_path}",
        fg="green",
    ))


if __name__ == "__main__":
    cli()
