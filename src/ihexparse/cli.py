# Copyright (c) 2013-2025, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -m ihexparse` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``ihexparse.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``ihexparse.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import logging
import sys
from collections import Counter
from typing import Optional
from typing import Sequence
from typing import Tuple

import click

from . import __version__
from .hexfile import HexFile
from .parser import ParseError
from .records import RecordKind
from .utils import parse_int


class BasedIntParamType(click.ParamType):
    name = 'integer'

    def convert(self, value, param, ctx):
        try:
            return parse_int(value)
        except ValueError:
            self.fail(f'invalid integer: {value!r}', param, ctx)


BASED_INT = BasedIntParamType()

FILE_PATH_IN = click.Path(dir_okay=False, allow_dash=True, readable=True, exists=True)

_logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------------

def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(str(__version__))
    ctx.exit()


def read_input(input_path: Optional[str]) -> Tuple[str, str]:
    r"""Reads the whole input text.

    Args:
        input_path (str):
            Path of the input file; ``None`` or ``-`` for standard input.

    Returns:
        str couple: Displayed input name, and decoded input text.
    """

    if input_path is None or input_path == '-':
        name = '<stdin>'
        data = sys.stdin.buffer.read()
    else:
        name = input_path
        with open(input_path, 'rb') as stream:
            data = stream.read()

    _logger.debug('read %d bytes from %s', len(data), name)
    return name, data.decode('utf-8', errors='replace')


def load_input(input_path: Optional[str]) -> HexFile:
    r"""Parses the input file, reporting errors with their location.

    Args:
        input_path (str):
            Path of the input file; ``None`` or ``-`` for standard input.

    Returns:
        :class:`HexFile`: Parsed file.

    Raises:
        click.ClickException: Invalid input, as ``name:line:column: message``.
    """

    name, text = read_input(input_path)
    try:
        return HexFile.from_text(text)
    except ParseError as exc:
        raise click.ClickException(format_error(name, text, exc)) from exc


def format_error(name: str, text: str, error: ParseError) -> str:

    line, column = error.locate(text)
    return f'{name}:{line}:{column}: {error.describe()}'


# ============================================================================

@click.group()
@click.option('-v', '--verbose', is_flag=True, help="""
    Logs debug messages onto standard error.
""")
@click.option('-V', '--version', is_flag=True, is_eager=True,
              expose_value=False, callback=print_version, help="""
    Print version and exit.
""")
def main(verbose: bool) -> None:
    """
    Command line utilities to inspect Intel HEX files.

    Being built with `Click <https://click.palletsprojects.com/en/stable/>`_, all the
    commands follow POSIX-like syntax rules, as well as reserving the virtual
    file path ``-`` for the standard input.
    """

    if verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(levelname)s:%(name)s:%(message)s')


# ----------------------------------------------------------------------------

@main.command()
@click.option('--color/--no-color', default=False, show_default=True, help="""
    Colorizes record fields with ANSI codes.
""")
@click.option('-s', '--start', type=BASED_INT, help="""
    Inclusive start record index. Negative values are referred to the end.
    By default it prints from the first record.
""")
@click.option('-e', '--stop', type=BASED_INT, help="""
    Exclusive end record index. Negative values are referred to the end.
    By default it prints till the last record.
""")
@click.argument('infile', type=FILE_PATH_IN, required=False)
def dump(
    color: bool,
    start: Optional[int],
    stop: Optional[int],
    infile: Optional[str],
) -> None:
    r"""Prints the records of a file.

    ``INFILE`` is the path of the input file.
    Set to ``-`` or leave empty to read from standard input.
    """

    file = load_input(infile)
    stream = sys.stdout.buffer
    file.print(stream=stream, color=color, start=start, stop=stop)
    stream.flush()


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN, required=False)
def info(
    infile: Optional[str],
) -> None:
    r"""Counts the records of a file, by record type.

    ``INFILE`` is the path of the input file.
    Set to ``-`` or leave empty to read from standard input.
    """

    file = load_input(infile)
    counts = Counter(record.kind for record in file)

    click.echo(str(file))
    for kind in RecordKind:
        if counts[kind]:
            click.echo(f'  {kind:02X} {kind.description}: {counts[kind]}')


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infiles', type=FILE_PATH_IN, nargs=-1)
@click.pass_context
def validate(
    ctx: click.Context,
    infiles: Sequence[str],
) -> None:
    r"""Checks that files are valid.

    ``INFILES`` are the paths of the input files.
    Set to ``-`` or leave empty to read from standard input.

    Each invalid file is reported as ``path:line:column: error`` onto standard
    error, and the exit status is 1.
    """

    failures = 0

    for infile in (infiles or ['-']):
        name, text = read_input(infile)
        try:
            file = HexFile.from_text(text)
        except ParseError as exc:
            failures += 1
            click.echo(format_error(name, text, exc), err=True)
        else:
            click.echo(f'{name}: OK ({len(file)} records)')

    if failures:
        ctx.exit(1)
