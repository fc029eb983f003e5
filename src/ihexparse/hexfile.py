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

r"""Intel HEX file contents."""

import io
import logging
import os
import sys
from typing import IO
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

from .base import AnyBytes
from .base import AnyPath
from .parser import HexParser
from .records import BaseRecord

_logger = logging.getLogger(__name__)


class HexFile:
    r"""Intel HEX file contents.

    It is just the ordered sequence of the records parsed from an Intel HEX
    text, one record per line.
    Records are kept exactly as they appear: address extensions are not
    applied to data records, and nothing is merged or reordered.

    The object cannot be altered after creation.

    Args:
        text (str):
            Intel HEX text to parse.

    Raises:
        :class:`ihexparse.parser.ParseError`: Invalid record within `text`.

    Examples:
        >>> from ihexparse import HexFile
        >>> file = HexFile(':020000040000FA\n:0201FE00FF0FF1\n:00000001FF\n')
        >>> str(file)
        'HexFile (3 records)'
        >>> print(file.describe())
        HexFile (3 records)
          04 extended linear address - 0x0000
          00 data - address: 0x01FE, data: FF 0F
          01 end of file
    """

    __slots__ = ('_records',)

    def __init__(self, text: str = ''):

        self._records: Tuple[BaseRecord, ...] = tuple(HexParser(text).parse())

    def __bool__(self) -> bool:

        return bool(self._records)

    def __eq__(self, other: Any) -> bool:
        r"""Equality test.

        Two files are equal if they hold equal records, in the same order.

        Args:
            other (:class:`HexFile`):
                File to compare to.

        Returns:
            bool: `self` equals `other`.
        """

        if not isinstance(other, HexFile):
            return NotImplemented
        return self._records == other._records

    def __getitem__(self, key: Union[int, slice]) -> Union[BaseRecord, Tuple[BaseRecord, ...]]:

        return self._records[key]

    def __hash__(self) -> int:

        return hash(self._records)

    def __iter__(self) -> Iterator[BaseRecord]:

        return iter(self._records)

    def __len__(self) -> int:

        return len(self._records)

    def __repr__(self) -> str:

        return f'<{type(self).__name__} records:={list(self._records)!r}>'

    def __str__(self) -> str:

        return f'{type(self).__name__} ({len(self._records)} records)'

    def describe(self) -> str:
        r"""Describes the file and each of its records.

        Returns:
            str: Multi-line description, one record per indented line.
        """

        lines = [str(self)]
        lines.extend(f'  {record!s}' for record in self._records)
        return '\n'.join(lines)

    @classmethod
    def from_bytes(cls, data: AnyBytes) -> 'HexFile':
        r"""Parses Intel HEX from bytes.

        The bytes are decoded as UTF-8, replacing undecodable bytes; any
        replacement character would then fail as part of a record.

        Args:
            data (bytes):
                Intel HEX text, as ASCII bytes.

        Returns:
            :class:`HexFile`: Parsed file.

        Raises:
            :class:`ihexparse.parser.ParseError`: Invalid record within `data`.

        Examples:
            >>> from ihexparse import HexFile
            >>> len(HexFile.from_bytes(b':00000001FF\r\n'))
            1
        """

        text = bytes(data).decode('utf-8', errors='replace')
        return cls(text)

    @classmethod
    def from_records(cls, records: Iterable[BaseRecord]) -> 'HexFile':
        r"""Builds a file from records.

        Args:
            records (list of :class:`BaseRecord`):
                Records, in file order.

        Returns:
            :class:`HexFile`: File holding `records`.

        Raises:
            TypeError: Some item is not a record.

        Examples:
            >>> from ihexparse import HexFile
            >>> from ihexparse.records import EndOfFileRecord
            >>> HexFile.from_records([EndOfFileRecord()]) == HexFile(':00000001FF')
            True
        """

        records = tuple(records)
        for record in records:
            if not isinstance(record, BaseRecord):
                raise TypeError(f'not a record: {record!r}')

        file = cls.__new__(cls)
        file._records = records
        return file

    @classmethod
    def from_text(cls, text: str) -> 'HexFile':
        r"""Parses Intel HEX text.

        Args:
            text (str):
                Intel HEX text to parse.

        Returns:
            :class:`HexFile`: Parsed file.

        Raises:
            :class:`ihexparse.parser.ParseError`: Invalid record within `text`.
        """

        return cls(text)

    @classmethod
    def load(
        cls,
        in_path_or_stream: Optional[Union[AnyPath, IO]],
    ) -> 'HexFile':
        r"""Loads a file object from the filesystem.

        Args:
            in_path_or_stream (str or IO):
                Path of the file within the filesystem, or input stream.
                If ``None``, ``sys.stdin.buffer`` is used.

        Returns:
            :class:`HexFile`: Loaded file object.

        Raises:
            :class:`ihexparse.parser.ParseError`: Invalid record.

        See Also:
            :meth:`parse`
        """

        if in_path_or_stream is None:
            in_path_or_stream = sys.stdin.buffer

        if isinstance(in_path_or_stream, io.IOBase) or hasattr(in_path_or_stream, 'read'):
            stream = in_path_or_stream
            return cls.parse(stream)
        else:
            path = os.fspath(in_path_or_stream)
            _logger.debug('loading %s', path)
            with open(path, 'rb') as stream:
                file = cls.parse(stream)
            _logger.debug('loaded %d records from %s', len(file), path)
            return file

    @classmethod
    def parse(cls, stream: Union[str, AnyBytes, IO]) -> 'HexFile':
        r"""Parses a whole text, buffer, or stream.

        Args:
            stream (str, bytes, or IO):
                Text, byte buffer, or stream to read until its end.
                Byte data are handled by :meth:`from_bytes`.

        Returns:
            :class:`HexFile`: Parsed file.

        Raises:
            :class:`ihexparse.parser.ParseError`: Invalid record.

        Examples:
            >>> import io
            >>> from ihexparse import HexFile
            >>> stream = io.BytesIO(b':00000001FF\n')
            >>> HexFile.parse(stream)[0]
            <EndOfFileRecord>
        """

        if isinstance(stream, str):
            return cls.from_text(stream)

        if isinstance(stream, (bytes, bytearray, memoryview)):
            return cls.from_bytes(stream)

        content = stream.read()
        _logger.debug('read %d characters from %r', len(content), stream)
        if isinstance(content, str):
            return cls.from_text(content)
        else:
            return cls.from_bytes(content)

    def print(
        self,
        stream: Optional[IO] = None,
        color: bool = False,
        start: Optional[int] = None,
        stop: Optional[int] = None,
    ) -> 'HexFile':
        r"""Prints record renderings.

        This helper method prints each record of :attr:`records` via
        :meth:`BaseRecord.print`.

        Args:
            stream (byte stream):
                Stream to print onto.
                If ``None``, *stdout* is used.

            color (bool):
                Colorize record tokens with ANSI color codes.

            start (int):
                Inclusive start record index of the specified range.
                If ``None``, start from the first record.

            stop (int):
                Exclusive end record index of the specified range.
                If negative, look back from the last index.
                If ``None``, print up to the last record.

        Returns:
            :class:`HexFile`: *self*.
        """

        for record in self._records[start:stop]:
            record.print(stream=stream, color=color)
        return self

    @property
    def records(self) -> Sequence[BaseRecord]:
        r"""tuple of :class:`BaseRecord`: Records, in file order."""

        return self._records
