"""
CLI interface for the quote table converter.

Usage:
    quote-table convert quotes_a.csv quotes_b.csv --out dat_table_quote.json
"""

from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger

from .errors import DecodeError
from .logging_utils import setup_logging
from .models import ConvertRequest, CsvSource
from .service import convert as convert_sources
from .store import QuoteTableStore

app = typer.Typer(help="Convert quote/tag CSV files into a quote table.")


@app.callback()
def main(
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also log to this file"),
):
    setup_logging(level=log_level.upper(), log_file=log_file)


def _load_sources(paths: List[Path], encoding: str) -> List[Optional[CsvSource]]:
    """存在しないパスは None にしておき、変換側でスキップさせる"""
    sources: List[Optional[CsvSource]] = []
    for path in paths:
        if not path.is_file():
            logger.warning(f"Source not found, skipping: {path}")
            sources.append(None)
            continue
        sources.append(CsvSource(name=str(path), text=path.read_text(encoding=encoding)))
    return sources


@app.command()
def convert(
    sources: List[Path] = typer.Argument(..., help="Source CSV files, in merge order"),
    out: Path = typer.Option(..., "--out", "-o", help="Destination quote table JSON"),
    decoder: str = typer.Option("header", "--decoder", help="header | positional"),
    delimiter: str = typer.Option(",", "--delimiter", help="Field delimiter"),
    quote_char: str = typer.Option('"', "--quote-char", help="Quote character"),
    has_header: bool = typer.Option(
        True, "--header/--no-header", help="positional decoder: first row is a header"
    ),
    encoding: str = typer.Option("utf-8-sig", "--encoding", help="Source file encoding"),
):
    """
    Read every source CSV, convert the rows into quote records and write the
    quote table. The destination is left untouched when any source fails.
    """
    try:
        loaded = _load_sources(sources, encoding)
        request = ConvertRequest(
            sources=loaded,
            decoder=decoder,
            delimiter=delimiter,
            quote_char=quote_char,
            has_header=has_header,
        )
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.error(f"Could not prepare sources: {exc}")
        logger.error("Convert Failed.")
        raise typer.Exit(code=1)

    try:
        response = convert_sources(request)
    except DecodeError:
        raise typer.Exit(code=1)

    result = response.result
    try:
        QuoteTableStore(out).write(result)
    except OSError as exc:
        logger.error(f"Could not write {out}: {exc}")
        logger.error("Convert Failed.")
        raise typer.Exit(code=1)

    logger.info(
        f"Convert Completed. ({len(result.records)} records, {len(result.tag_index)} tags)"
    )
    typer.echo(f"{len(result.records)} records, {len(result.tag_index)} tags -> {out}")


if __name__ == "__main__":
    app()
