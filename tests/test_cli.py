import os
from pathlib import Path
from typing import cast as _cast

import pytest
from click.core import Command
from click.testing import CliRunner

from ihexparse import __version__ as _version
from ihexparse.__main__ import main as _main
from ihexparse.cli import *
from ihexparse.parser import ErrorKind
from ihexparse.parser import ParseError

main = _cast(Command, main)  # suppress warnings


@pytest.fixture
def tmppath(tmpdir):
    return Path(str(tmpdir))


@pytest.fixture(scope='module')
def datadir(request):
    dir_path, _ = os.path.splitext(request.module.__file__)
    assert os.path.isdir(str(dir_path))
    return dir_path


@pytest.fixture
def datapath(datadir):
    return Path(str(datadir))


def read_text(path):
    path = str(path)
    with open(path, 'rt') as file:
        data = file.read()
    data = data.replace('\r\n', '\n').replace('\r', '\n')  # normalize
    return data


def test_based_int():
    assert BASED_INT.convert('0x10', None, None) == 16
    assert BASED_INT.convert('-1', None, None) == -1
    assert BASED_INT.convert(7, None, None) == 7


def test_based_int_fail():
    runner = CliRunner()
    result = runner.invoke(main, 'dump --start xyz -'.split(), input=':00000001FF')
    assert result.exit_code == 2
    assert 'invalid integer' in result.output


def test_format_error():
    text = ':020000040000FA\n:00000001FE\n'
    error = ParseError(ErrorKind.INVALID_CHECKSUM, 25)
    assert format_error('bad.hex', text, error) == 'bad.hex:2:10: invalid checksum'


def test_main():
    _main('ihexparse.__main__')  # not the entry point, nothing happens


def test_help():
    runner = CliRunner()
    for command in ('dump', 'info', 'validate'):
        result = runner.invoke(main, [command, '--help'])
        assert result.exit_code == 0
        assert result.output.startswith('Usage:')


def test_version():
    runner = CliRunner()
    for option in ('--version', '-V'):
        result = runner.invoke(main, [option])
        assert result.exit_code == 0
        assert result.output.strip() == str(_version)


def test_verbose(datapath):
    runner = CliRunner()
    path_in = str(datapath / 'sample.hex')
    result = runner.invoke(main, ['-v', 'validate', path_in])
    assert result.exit_code == 0
    assert f'{path_in}: OK (7 records)' in result.output


def test_dump(datapath):
    runner = CliRunner()
    path_in = str(datapath / 'sample.hex')
    result = runner.invoke(main, ['dump', path_in])
    assert result.exit_code == 0
    assert result.stdout_bytes.decode() == read_text(datapath / 'sample.txt')


def test_dump_stdin(datapath):
    runner = CliRunner()
    data = (datapath / 'sample.hex').read_bytes()
    ans_ref = read_text(datapath / 'sample.txt')

    result = runner.invoke(main, ['dump', '-'], input=data)
    assert result.exit_code == 0
    assert result.stdout_bytes.decode() == ans_ref

    result = runner.invoke(main, ['dump'], input=data)
    assert result.exit_code == 0
    assert result.stdout_bytes.decode() == ans_ref


def test_dump_range(datapath):
    runner = CliRunner()
    path_in = str(datapath / 'sample.hex')
    lines = read_text(datapath / 'sample.txt').splitlines(keepends=True)

    result = runner.invoke(main, ['dump', '-s', '1', '-e', '3', path_in])
    assert result.exit_code == 0
    assert result.stdout_bytes.decode() == ''.join(lines[1:3])

    result = runner.invoke(main, ['dump', '--start', '-1', path_in])
    assert result.exit_code == 0
    assert result.stdout_bytes.decode() == '01 end of file\n'

    result = runner.invoke(main, ['dump', '--stop', '0x1', path_in])
    assert result.exit_code == 0
    assert result.stdout_bytes.decode() == lines[0]


def test_dump_color():
    runner = CliRunner()
    result = runner.invoke(main, ['dump', '--color'], input=':00000001FF\n')
    assert result.exit_code == 0
    assert result.stdout_bytes.decode() == '\x1b[0m\x1b[32m01\x1b[34m end of file\x1b[0m\n\x1b[0m'


def test_dump_error(datapath):
    runner = CliRunner()
    path_in = str(datapath / 'bad.hex')
    result = runner.invoke(main, ['dump', path_in])
    assert result.exit_code == 1
    assert f'Error: {path_in}:2:10: invalid checksum' in result.output
    assert isinstance(result.exception, SystemExit)


def test_dump_missing(tmppath):
    runner = CliRunner()
    result = runner.invoke(main, ['dump', str(tmppath / 'missing.hex')])
    assert result.exit_code == 2


def test_info(datapath):
    runner = CliRunner()
    path_in = str(datapath / 'sample.hex')
    result = runner.invoke(main, ['info', path_in])
    assert result.exit_code == 0
    ans_ref = (
        'HexFile (7 records)\n'
        '  00 data: 5\n'
        '  01 end of file: 1\n'
        '  04 extended linear address: 1\n'
    )
    assert result.output == ans_ref


def test_info_empty():
    runner = CliRunner()
    result = runner.invoke(main, ['info', '-'], input='')
    assert result.exit_code == 0
    assert result.output == 'HexFile (0 records)\n'


def test_info_error():
    runner = CliRunner()
    result = runner.invoke(main, ['info'], input=':00000006FA\n')
    assert result.exit_code == 1
    assert '<stdin>:1:8: invalid record type: 0x06' in result.output


def test_validate(datapath):
    runner = CliRunner()
    path_in = str(datapath / 'sample.hex')
    result = runner.invoke(main, ['validate', path_in])
    assert result.exit_code == 0
    assert result.output == f'{path_in}: OK (7 records)\n'


def test_validate_stdin():
    runner = CliRunner()
    result = runner.invoke(main, ['validate'], input=':00000001FF\r\n')
    assert result.exit_code == 0
    assert result.output == '<stdin>: OK (1 records)\n'


def test_validate_many(datapath):
    runner = CliRunner()
    path_good = str(datapath / 'sample.hex')
    path_bad = str(datapath / 'bad.hex')
    result = runner.invoke(main, ['validate', path_good, path_bad, path_good])
    assert result.exit_code == 1
    assert result.output.count(f'{path_good}: OK (7 records)\n') == 2
    assert f'{path_bad}:2:10: invalid checksum\n' in result.output


def test_validate_byte_count():
    runner = CliRunner()
    result = runner.invoke(main, ['validate', '-'], input=':020000040000FA\n:0100000212EB\n')
    assert result.exit_code == 1
    ans_ref = '<stdin>:2:2: expected different byte count: expected 2, actual 1\n'
    assert ans_ref in result.output
