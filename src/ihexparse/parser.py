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

r"""Intel HEX parser.

Record format::

    | Mark | Count (n) | Address  | Type     | Data      | Checksum |
    | ---- | --------- | -------- | -------- | --------- | -------- |
    | ':'  | 2 digits  | 4 digits | 2 digits | 2n digits | 2 digits |

Each record is terminated by ``\n``, ``\r``, ``\r\n``, or by the end of the
input text.

The parser stops at the first invalid record, raising :class:`ParseError`
with the offset of the offending field within the input text.

See Also:
    `<https://en.wikipedia.org/wiki/Intel_HEX>`_
"""

import enum
import re
from typing import List
from typing import Optional
from typing import Tuple

from .records import RECORD_TYPES
from .records import BaseRecord
from .records import RecordKind
from .utils import locate_offset

HEX_DIGITS_REGEX = re.compile(r'[0-9A-Fa-f]*')
r"""Plain hexadecimal digits, without sign, prefix, or separators."""


class ErrorKind(enum.IntEnum):
    r"""Parse error kind."""

    EXPECTED_COLON = 1
    r"""The record does not start with ``:``."""

    EXPECTED_HEX_DIGITS = 2
    r"""Not enough characters left, or they are not hexadecimal digits."""

    INVALID_RECORD_TYPE = 3
    r"""The record type is outside ``00``-``05``."""

    EXPECTED_LINE_BREAK = 4
    r"""The record is followed by something else than a line terminator."""

    INVALID_CHECKSUM = 5
    r"""The record byte sum is not zero."""

    EXPECTED_DIFFERENT_BYTE_COUNT = 6
    r"""The byte count does not match the one fixed for the record type."""

    @property
    def description(self) -> str:
        r"""str: Lowercase descriptive name."""

        return self.name.lower().replace('_', ' ')


class ParseError(ValueError):
    r"""Intel HEX parse error.

    Args:
        kind (:class:`ErrorKind`):
            See :attr:`kind` attribute.

        position (int):
            See :attr:`position` attribute.

        count (int):
            See :attr:`count` attribute.

        raw_type (int):
            See :attr:`raw_type` attribute.

        expected (int):
            See :attr:`expected` attribute.

        actual (int):
            See :attr:`actual` attribute.

    Attributes:
        kind (:class:`ErrorKind`):
            What went wrong.

        position (int):
            Offset within the input text where the offending field begins.

        count (int):
            Number of expected hexadecimal digits, for
            :attr:`ErrorKind.EXPECTED_HEX_DIGITS`.

        raw_type (int):
            Record type value, for :attr:`ErrorKind.INVALID_RECORD_TYPE`.

        expected (int):
            Byte count fixed by the record type, for
            :attr:`ErrorKind.EXPECTED_DIFFERENT_BYTE_COUNT`.

        actual (int):
            Declared byte count, for
            :attr:`ErrorKind.EXPECTED_DIFFERENT_BYTE_COUNT`.

    Examples:
        >>> from ihexparse.parser import parse
        >>> parse(':03000004000000F9\n')
        Traceback (most recent call last):
            ...
        ihexparse.parser.ParseError: expected different byte count: expected 2, actual 3 (at offset 1)
    """

    def __init__(
        self,
        kind: ErrorKind,
        position: int,
        count: Optional[int] = None,
        raw_type: Optional[int] = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ):

        self.kind: ErrorKind = ErrorKind(kind)
        self.position: int = position.__index__()
        self.count: Optional[int] = count
        self.raw_type: Optional[int] = raw_type
        self.expected: Optional[int] = expected
        self.actual: Optional[int] = actual
        super().__init__(f'{self.describe()} (at offset {self.position})')

    def __eq__(self, other: object) -> bool:

        if not isinstance(other, ParseError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:

        return hash(self._key())

    def __reduce__(self):

        return type(self), self._key()

    def _key(self) -> Tuple:

        return (self.kind, self.position, self.count, self.raw_type, self.expected, self.actual)

    def describe(self) -> str:
        r"""Describes the error kind along with its parameters.

        Returns:
            str: Error description, without position.

        Examples:
            >>> from ihexparse.parser import ErrorKind, ParseError
            >>> ParseError(ErrorKind.INVALID_RECORD_TYPE, 7, raw_type=6).describe()
            'invalid record type: 0x06'
        """

        kind = self.kind
        text = kind.description

        if kind == ErrorKind.EXPECTED_HEX_DIGITS:
            text = f'expected {self.count} hex digits'

        elif kind == ErrorKind.INVALID_RECORD_TYPE:
            text += f': 0x{self.raw_type:02X}'

        elif kind == ErrorKind.EXPECTED_DIFFERENT_BYTE_COUNT:
            text += f': expected {self.expected}, actual {self.actual}'

        return text

    def locate(self, text: str) -> Tuple[int, int]:
        r"""Line and column of the error.

        Args:
            text (str):
                The text being parsed when the error was raised.

        Returns:
            int couple: 1-based line and column numbers.

        See Also:
            :func:`ihexparse.utils.locate_offset`
        """

        return locate_offset(text, self.position)


class _Scanner:
    r"""Parse cursor over the input text."""

    def __init__(self, text: str):

        self.text: str = text
        self.offset: int = 0

    def at_end(self) -> bool:

        return self.offset >= len(self.text)

    def read_colon(self) -> None:

        offset = self.offset
        if self.text[offset:offset + 1] != ':':
            raise ParseError(ErrorKind.EXPECTED_COLON, offset)
        self.offset = offset + 1

    def read_hex_digits(self, count: int) -> int:

        text = self.text
        offset = self.offset
        endex = offset + count

        if endex > len(text) or not HEX_DIGITS_REGEX.fullmatch(text, offset, endex):
            raise ParseError(ErrorKind.EXPECTED_HEX_DIGITS, offset, count=count)

        self.offset = endex
        return int(text[offset:endex], 16)

    def read_hex_bytes(self, size: int) -> bytes:

        text = self.text
        offset = self.offset
        endex = offset + size * 2

        if endex <= len(text) and HEX_DIGITS_REGEX.fullmatch(text, offset, endex):
            self.offset = endex
            return bytes.fromhex(text[offset:endex])

        # Slow path, just to find out the offending byte
        return bytes(self.read_hex_digits(2) for _ in range(size))

    def read_line_break(self) -> None:

        text = self.text
        offset = self.offset
        char = text[offset:offset + 1]

        if char == '\n':
            offset += 1
        elif char == '\r':
            offset += 1
            if text[offset:offset + 1] == '\n':
                offset += 1
        elif char:
            raise ParseError(ErrorKind.EXPECTED_LINE_BREAK, offset)

        self.offset = offset


class HexParser:
    r"""Intel HEX parser.

    It parses the whole input text at once.
    The parser holds nothing but the text, so :meth:`parse` can be called
    many times, even from different threads.

    Args:
        text (str):
            Intel HEX text to parse.

    Examples:
        >>> from ihexparse.parser import HexParser
        >>> parser = HexParser(':0201FE00FF0FF1\n:00000001FF\n')
        >>> parser.parse()
        [<DataRecord address:=<Address16: 0x01FE> data:=b'\xff\x0f'>, <EndOfFileRecord>]
    """

    def __init__(self, text: str):

        if not isinstance(text, str):
            raise TypeError('text must be str')
        self._text: str = text

    @property
    def text(self) -> str:
        r"""str: Input text."""

        return self._text

    def parse(self) -> List[BaseRecord]:
        r"""Parses all the records.

        Returns:
            list of :class:`BaseRecord`: Records, in input order.

        Raises:
            ParseError: The first invalid record.
        """

        scanner = _Scanner(self._text)
        records = []

        while not scanner.at_end():
            record = self._parse_record(scanner)
            records.append(record)

        return records

    @staticmethod
    def _parse_record(scanner: _Scanner) -> BaseRecord:

        scanner.read_colon()
        count_offset = scanner.offset
        count = scanner.read_hex_digits(2)
        address_bytes = scanner.read_hex_bytes(2)

        kind_offset = scanner.offset
        raw_type = scanner.read_hex_digits(2)
        try:
            kind = RecordKind(raw_type)
        except ValueError:
            raise ParseError(ErrorKind.INVALID_RECORD_TYPE, kind_offset, raw_type=raw_type) from None

        data = scanner.read_hex_bytes(count)
        checksum_offset = scanner.offset
        checksum = scanner.read_hex_digits(2)
        scanner.read_line_break()

        total = count + sum(address_bytes) + raw_type + sum(data) + checksum
        if total & 0xFF:
            raise ParseError(ErrorKind.INVALID_CHECKSUM, checksum_offset)

        expected = kind.expected_count
        if expected is not None and count != expected:
            raise ParseError(ErrorKind.EXPECTED_DIFFERENT_BYTE_COUNT, count_offset,
                             expected=expected, actual=count)

        address = int.from_bytes(address_bytes, byteorder='big')
        return RECORD_TYPES[kind].from_payload(address, data)


def parse(text: str) -> List[BaseRecord]:
    r"""Parses Intel HEX text.

    Shortcut for ``HexParser(text).parse()``.

    Args:
        text (str):
            Intel HEX text to parse.

    Returns:
        list of :class:`BaseRecord`: Records, in input order.

    Raises:
        ParseError: The first invalid record.

    Examples:
        >>> from ihexparse.parser import parse
        >>> parse('')
        []
        >>> parse(':00000001FE\n')
        Traceback (most recent call last):
            ...
        ihexparse.parser.ParseError: invalid checksum (at offset 9)
    """

    return HexParser(text).parse()
