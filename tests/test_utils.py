from typing import Any
from typing import Mapping
from typing import Type

import pytest

from ihexparse.utils import hexlify
from ihexparse.utils import locate_offset
from ihexparse.utils import parse_int

PARSE_INT_PASS: Mapping[Any, int] = {
    None: None,

    '123': 123,
    ' 123 ': 123,
    '\t123\t': 123,
    '+123': 123,
    '-123': -123,
    ' - 123 ': -123,

    '0xDEADBEEF': 0xDEADBEEF,
    '0XDEADBEEF': 0xDEADBEEF,
    'DEADBEEFh': 0xDEADBEEF,

    '0b101100111000': 0b101100111000,

    '01234567': 0o1234567,
    '0o1234567': 0o1234567,

    b'456': 456,
    123: 123,
    135.7: 135,
}

PARSE_INT_FAIL: Mapping[Any, Type[BaseException]] = {
    Ellipsis: TypeError,
    'x': ValueError,
    '0b1h': ValueError,
    '0o1h': ValueError,
    'ff': ValueError,
    (1,): TypeError,
}


def test_hexlify():
    assert hexlify(b'') == b''
    assert hexlify(b'\x12\xEF\xC7') == b'12EFC7'
    assert hexlify(b'\x12\xEF\xC7', sep=b' ') == b'12 EF C7'
    assert hexlify(b'\x12\xEF\xC7', sep=b'-', upper=False) == b'12-ef-c7'
    assert hexlify(bytearray(b'\xAB')) == b'AB'


def test_locate_offset():
    text = ':00000001FF\n:0000\r\n:00\r:'
    vector = [
        (0, (1, 1)),
        (11, (1, 12)),
        (12, (2, 1)),
        (16, (2, 5)),
        (19, (3, 1)),
        (22, (3, 4)),
        (23, (4, 1)),
        (24, (4, 2)),
    ]
    for offset, expected in vector:
        assert locate_offset(text, offset) == expected


def test_locate_offset_empty():
    assert locate_offset('', 0) == (1, 1)


def test_locate_offset_raises():
    with pytest.raises(IndexError, match='offset out of range'):
        locate_offset('abc', 4)
    with pytest.raises(IndexError, match='offset out of range'):
        locate_offset('abc', -1)


def test_parse_int_pass():
    for value, expected in PARSE_INT_PASS.items():
        actual = parse_int(value)
        assert actual == expected


def test_parse_int_fail():
    for value, raised_exception in PARSE_INT_FAIL.items():
        with pytest.raises(raised_exception):
            parse_int(value)
