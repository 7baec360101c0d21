"""CLI entry point for tuipick. Uses Click for argument parsing."""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import contextmanager
from typing import Iterator

import click

from tuipick.config import (
    OPTION_CASE_MATCHING,
    OPTION_MATCH_PATHS,
    OPTION_START_IN_SEARCH_MODE,
    recognized_options,
)
from tuipick.entries import Entry
from tuipick.events import Select
from tuipick.fuzzy import CaseMatching
from tuipick.host import PickerSession
from tuipick.picker import Picker
from tuipick.render import DefaultPickerTheme, PlainPickerTheme
from tuipick.terminal import ProcessTerminal, Terminal

logger = logging.getLogger(__name__)

EXIT_NOTHING_TO_PICK = 1
EXIT_CANCELLED = 130


@contextmanager
def _open_terminal() -> Iterator[Terminal]:
    """Open the controlling terminal so stdin stays free for the entries."""
    try:
        fd = os.open("/dev/tty", os.O_RDWR | os.O_NOCTTY)
    except OSError as exc:
        raise click.ClickException(f"cannot open /dev/tty: {exc.strerror}") from exc
    try:
        yield ProcessTerminal(fd)
    finally:
        os.close(fd)


def _parse_override(value: str) -> tuple[str, str]:
    key, sep, raw = value.partition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint="'-o'")
    return key.strip(), raw


@click.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "--case",
    "case_matching",
    type=click.Choice([mode.value for mode in CaseMatching]),
    default=None,
    help="Case matching mode (default: smart)",
)
@click.option("--paths/--no-paths", default=None, help="Score entries as file paths")
@click.option("--search/--no-search", default=None, help="Start with the query focused")
@click.option("--query", default="", help="Initial query")
@click.option(
    "-o",
    "--option",
    "options",
    multiple=True,
    metavar="KEY=VALUE",
    help="Raw picker option, e.g. picker_match_paths=true",
)
@click.option("--color/--no-color", default=True, help="Use ANSI colors")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write debug logs to this file",
)
@click.pass_context
def main(ctx, source, case_matching, paths, search, query, options, color, log_file):
    """Pick one line from SOURCE (default: stdin) and print it."""
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    overrides: dict[str, str] = {}
    for value in options:
        key, raw = _parse_override(value)
        if key not in recognized_options():
            click.echo(f"warning: unknown option '{key}' ignored", err=True)
        overrides[key] = raw
    if case_matching is not None:
        overrides[OPTION_CASE_MATCHING] = case_matching
    if paths is not None:
        overrides[OPTION_MATCH_PATHS] = str(paths).lower()
    if search is not None:
        overrides[OPTION_START_IN_SEARCH_MODE] = str(search).lower()

    lines = [line.rstrip("\r\n") for line in source]
    if not lines:
        click.echo("nothing to pick", err=True)
        ctx.exit(EXIT_NOTHING_TO_PICK)

    theme = DefaultPickerTheme() if color else PlainPickerTheme()
    picker: Picker[int] = Picker(theme=theme)
    picker.load(overrides)
    picker.extend(Entry(text=line, payload=index) for index, line in enumerate(lines))
    if query:
        picker.set_query(query)
    logger.debug("picking from %d lines with %s", len(lines), picker.config)

    with _open_terminal() as terminal:
        response = asyncio.run(PickerSession(picker, terminal).run())

    if isinstance(response, Select):
        click.echo(lines[response.payload])
        return
    ctx.exit(EXIT_CANCELLED)


if __name__ == "__main__":
    main()
