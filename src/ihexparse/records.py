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

r"""Intel HEX record model.

Each line of an Intel HEX file decodes into exactly one record, whose class
depends on the record *kind* (the record type field).
Records carry only the fields meaningful to their kind, and cannot be
altered once created.

See Also:
    `<https://en.wikipedia.org/wiki/Intel_HEX>`_
"""

import abc
import enum
import sys
from typing import IO
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import Type

from .base import Address16
from .base import Address32
from .base import AnyBytes
from .base import colorize_tokens
from .utils import hexlify


class RecordKind(enum.IntEnum):
    r"""Intel HEX record kind, as stored in the record type field."""

    DATA = 0x00
    r"""Binary data, with the 16-bit address of its first byte."""

    END_OF_FILE = 0x01
    r"""End Of File; it should be the last record of a file."""

    EXTENDED_SEGMENT_ADDRESS = 0x02
    r"""Extended Segment Address.

    Its value multiplied by 16 is added to the address of the following
    *data* records.
    """

    START_SEGMENT_ADDRESS = 0x03
    r"""Start Segment Address, as the initial ``CS:IP`` of 80x86 processors."""

    EXTENDED_LINEAR_ADDRESS = 0x04
    r"""Extended Linear Address.

    Its value sets the upper 16 bits of the 32-bit address of the following
    *data* records.
    """

    START_LINEAR_ADDRESS = 0x05
    r"""Start Linear Address, as the initial ``EIP`` of 80386+ processors."""

    @property
    def description(self) -> str:
        r"""str: Lowercase descriptive name.

        Examples:
            >>> from ihexparse.records import RecordKind
            >>> RecordKind.EXTENDED_LINEAR_ADDRESS.description
            'extended linear address'
        """

        return self.name.lower().replace('_', ' ')

    @property
    def expected_count(self) -> Optional[int]:
        r"""int: Mandatory byte count, or ``None`` if not fixed.

        Examples:
            >>> from ihexparse.records import RecordKind
            >>> RecordKind.START_LINEAR_ADDRESS.expected_count
            4
            >>> RecordKind.DATA.expected_count is None
            True
        """

        if self.is_extension():
            return 2
        if self.is_start():
            return 4
        return None

    def is_data(self) -> bool:
        r"""Tells whether this is a Data record kind.

        Returns:
            bool: This is a Data record kind.

        Examples:
            >>> from ihexparse.records import RecordKind
            >>> RecordKind.DATA.is_data()
            True
            >>> RecordKind.END_OF_FILE.is_data()
            False
        """

        return self == RecordKind.DATA

    def is_eof(self) -> bool:
        r"""Tells whether this is an End Of File record kind.

        Returns:
            bool: This is an End Of File record kind.

        Examples:
            >>> from ihexparse.records import RecordKind
            >>> RecordKind.END_OF_FILE.is_eof()
            True
            >>> RecordKind.DATA.is_eof()
            False
        """

        return self == RecordKind.END_OF_FILE

    def is_extension(self) -> bool:
        r"""Tells whether this is an Extended Address record kind.

        Returns:
            bool: This is an Extended Address record kind.

        Examples:
            >>> from ihexparse.records import RecordKind
            >>> RecordKind.EXTENDED_LINEAR_ADDRESS.is_extension()
            True
            >>> RecordKind.EXTENDED_SEGMENT_ADDRESS.is_extension()
            True
            >>> RecordKind.DATA.is_extension()
            False
        """

        return ((self == RecordKind.EXTENDED_SEGMENT_ADDRESS) or
                (self == RecordKind.EXTENDED_LINEAR_ADDRESS))

    def is_file_termination(self) -> bool:
        r"""Tells whether this record kind terminates the file.

        Only End Of File terminates an Intel HEX file.

        Returns:
            bool: This record kind terminates the file.

        Examples:
            >>> from ihexparse.records import RecordKind
            >>> RecordKind.END_OF_FILE.is_file_termination()
            True
            >>> RecordKind.START_LINEAR_ADDRESS.is_file_termination()
            False
        """

        return self.is_eof()

    def is_start(self) -> bool:
        r"""Tells whether this is a Start Address record kind.

        Returns:
            bool: This is a Start Address record kind.

        Examples:
            >>> from ihexparse.records import RecordKind
            >>> RecordKind.START_LINEAR_ADDRESS.is_start()
            True
            >>> RecordKind.START_SEGMENT_ADDRESS.is_start()
            True
            >>> RecordKind.DATA.is_start()
            False
        """

        return ((self == RecordKind.START_SEGMENT_ADDRESS) or
                (self == RecordKind.START_LINEAR_ADDRESS))


class BaseRecord(abc.ABC):
    r"""Intel HEX record.

    A record is the decoded content of one line of an Intel HEX file.
    Each child class represents one :class:`RecordKind`, and exposes its
    payload as read-only properties.

    Records are immutable: any attempt to assign an attribute raises
    :obj:`AttributeError`.
    Records compare equal when they are of the same class and their
    :attr:`EQUALITY_KEYS` attributes match.
    """

    __slots__ = ()

    KIND: RecordKind = None  # override
    r"""Record kind handled by the class."""

    EQUALITY_KEYS: Sequence[str] = ()  # override
    r"""Payload attribute names, checked for equality and hashing."""

    def __delattr__(self, key: str) -> None:

        raise AttributeError(f'{type(self).__name__} is immutable')

    def __eq__(self, other: Any) -> bool:
        r"""Equality test.

        Args:
             other (:class:`BaseRecord`):
                Record to compare to.

        Returns:
            bool: `self` equals `other`.

        Examples:
            >>> from ihexparse.records import DataRecord
            >>> record1 = DataRecord(0x1234, b'abc')
            >>> record2 = DataRecord(0x1234, b'abc')
            >>> record1 is record2
            False
            >>> record1 == record2
            True
            >>> record1 == DataRecord(0x1234, b'xyz')
            False
        """

        return not self != other

    def __hash__(self) -> int:

        return hash((self.KIND,) + tuple(getattr(self, key) for key in self.EQUALITY_KEYS))

    def __ne__(self, other: Any) -> bool:

        if type(other) is not type(self):
            return True

        for key in self.EQUALITY_KEYS:
            if getattr(self, key) != getattr(other, key):
                return True

        return False

    def __reduce__(self):

        # Constructor arguments follow EQUALITY_KEYS order
        return type(self), tuple(getattr(self, key) for key in self.EQUALITY_KEYS)

    def __repr__(self) -> str:
        r"""String representation.

        Returns:
            str: String representation, for human understanding only.

        Examples:
            >>> from ihexparse.records import ExtendedLinearAddressRecord
            >>> ExtendedLinearAddressRecord(0x1234)
            <ExtendedLinearAddressRecord upper_bits:=<Address16: 0x1234>>
        """

        text = f'<{type(self).__name__}'
        for key in self.EQUALITY_KEYS:
            text += f' {key!s}:={getattr(self, key)!r}'
        text += '>'
        return text

    def __setattr__(self, key: str, value: Any) -> None:

        raise AttributeError(f'{type(self).__name__} is immutable')

    def __str__(self) -> str:
        r"""Human readable rendering.

        It joins the values of :meth:`to_tokens` without line terminator.

        Returns:
            str: Record rendering, for diagnostics.

        Examples:
            >>> from ihexparse.records import DataRecord
            >>> str(DataRecord(0xABCD, b'\x12\xEF\xC7'))
            '00 data - address: 0xABCD, data: 12 EF C7'
        """

        return b''.join(self.to_tokens(end=b'').values()).decode()

    def _assign(self, **slots: Any) -> None:

        for key, value in slots.items():
            object.__setattr__(self, key, value)

    def _field_tokens(self) -> Mapping[str, bytes]:

        return {}

    def compute_checksum(self, address: int = 0) -> int:
        r"""Computes the checksum field value.

        It computes the two's complement of the byte sum of the fields the
        record would be written with, i.e. byte count, `address`, record type,
        and :meth:`payload`.

        Args:
            address (int):
                Value of the 16-bit address field.
                Data records default to their own :attr:`DataRecord.address`.

        Returns:
            int: Computed checksum value.

        Examples:
            >>> from ihexparse.records import EndOfFileRecord
            >>> hex(EndOfFileRecord().compute_checksum())
            '0xff'
        """

        address = address.__index__()
        if not 0 <= address <= 0xFFFF:
            raise ValueError('address overflow')

        payload = self.payload()
        checksum = (len(payload) + (address >> 8) + (address & 0xFF) +
                    int(self.KIND) + sum(payload))
        checksum = (0x100 - (checksum & 0xFF)) & 0xFF
        return checksum

    @classmethod
    @abc.abstractmethod
    def from_payload(cls, address: int, data: bytes) -> 'BaseRecord':
        r"""Decodes a record from its raw fields.

        The caller is in charge of checking the byte count against
        :attr:`RecordKind.expected_count`.

        Args:
            address (int):
                Value of the 16-bit address field.

            data (bytes):
                Content of the data field.

        Returns:
            :class:`BaseRecord`: Decoded record.
        """
        ...

    @property
    def kind(self) -> RecordKind:
        r""":class:`RecordKind`: Kind of the record."""

        return self.KIND

    @abc.abstractmethod
    def payload(self) -> bytes:
        r"""Data field content.

        Returns:
            bytes: The content of the data field, in big-endian order.
        """
        ...

    def print(
        self,
        stream: Optional[IO] = None,
        color: bool = False,
        end: bytes = b'\n',
    ) -> 'BaseRecord':
        r"""Prints a record.

        The record is converted into tokens (eventually colorized) then joined
        and written onto a byte stream (*stdout* by default).

        Args:
            stream (bytes IO):
                The byte stream where the record tokens are printed.
                If ``None``, *stdout* is selected.

            color (bool):
                Tokens are colorized before printing.

            end (bytes):
                Line terminator.

        Returns:
            :class:`BaseRecord`: *self*.

        See Also:
            :meth:`to_tokens`
            :func:`ihexparse.base.colorize_tokens`
        """

        if stream is None:
            stream = sys.stdout.buffer
        tokens = self.to_tokens(end=end)
        if color:
            tokens = colorize_tokens(tokens)
        stream.writelines(tokens.values())
        return self

    def to_tokens(self, end: bytes = b'\n') -> Mapping[str, bytes]:
        r"""Splits the human readable rendering into tokens.

        Args:
            end (bytes):
                Line terminator, stored with the ``end`` key.

        Returns:
            dict: Token key to byte string, in rendering order.

        Examples:
            >>> from ihexparse.records import StartSegmentAddressRecord
            >>> StartSegmentAddressRecord(0xABCD, 0xCD12).to_tokens()  # doctest: +NORMALIZE_WHITESPACE
            {'tag': b'03', 'name': b' start segment address', 'begin': b' - ',
             'cslabel': b'CS: ', 'codeseg': b'0xABCD',
             'iplabel': b', IP: ', 'ip': b'0xCD12', 'end': b'\n'}
        """

        tokens = {
            'tag': b'%02X' % int(self.KIND),
            'name': b' ' + self.KIND.description.encode(),
        }
        fields = self._field_tokens()
        if fields:
            tokens['begin'] = b' - '
            tokens.update(fields)
        tokens['end'] = end
        return tokens


class DataRecord(BaseRecord):
    r"""Data record.

    Args:
        address (int):
            16-bit address of the first data byte.

        data (bytes):
            Up to 255 data bytes.

    Examples:
        >>> from ihexparse.records import DataRecord
        >>> record = DataRecord(0x01FE, b'\xFF\x0F')
        >>> record.address
        <Address16: 0x01FE>
        >>> record.data
        b'\xff\x0f'
        >>> record.compute_checksum()
        241
    """

    __slots__ = ('_address', '_data')

    KIND = RecordKind.DATA

    EQUALITY_KEYS = ('address', 'data')

    def __init__(self, address: int, data: AnyBytes = b''):

        address = Address16(address)
        data = bytes(data)
        if len(data) > 0xFF:
            raise ValueError('data size overflow')

        self._assign(_address=address, _data=data)

    def _field_tokens(self) -> Mapping[str, bytes]:

        return {
            'addrlabel': b'address: ',
            'address': str(self._address).encode(),
            'datalabel': b', data: ',
            'data': hexlify(self._data, sep=b' '),
        }

    @property
    def address(self) -> Address16:
        r""":class:`Address16`: Address of the first data byte."""

        return self._address

    def compute_checksum(self, address: Optional[int] = None) -> int:
        r"""Computes the checksum field value.

        Args:
            address (int):
                Value of the 16-bit address field; if not ``None``, it must
                match :attr:`address`.

        Returns:
            int: Computed checksum value.

        Raises:
            ValueError: `address` differs from :attr:`address`.
        """

        if address is not None and address != self._address:
            raise ValueError('address mismatch')

        return super().compute_checksum(self._address)

    @property
    def data(self) -> bytes:
        r"""bytes: Data bytes."""

        return self._data

    @classmethod
    def from_payload(cls, address: int, data: bytes) -> 'DataRecord':

        return cls(address, data)

    def payload(self) -> bytes:

        return self._data


class EndOfFileRecord(BaseRecord):
    r"""End Of File record.

    Examples:
        >>> from ihexparse.records import EndOfFileRecord
        >>> str(EndOfFileRecord())
        '01 end of file'
    """

    __slots__ = ()

    KIND = RecordKind.END_OF_FILE

    @classmethod
    def from_payload(cls, address: int, data: bytes) -> 'EndOfFileRecord':

        return cls()

    def payload(self) -> bytes:

        return b''


class ExtendedSegmentAddressRecord(BaseRecord):
    r"""Extended Segment Address record.

    Args:
        segment (int):
            16-bit segment base; multiplied by 16, it is added to the
            addresses of the following data records.

    Examples:
        >>> from ihexparse.records import ExtendedSegmentAddressRecord
        >>> str(ExtendedSegmentAddressRecord(0xABCD))
        '02 extended segment address - 0xABCD'
    """

    __slots__ = ('_segment',)

    KIND = RecordKind.EXTENDED_SEGMENT_ADDRESS

    EQUALITY_KEYS = ('segment',)

    def __init__(self, segment: int):

        self._assign(_segment=Address16(segment))

    def _field_tokens(self) -> Mapping[str, bytes]:

        return {'extension': str(self._segment).encode()}

    @classmethod
    def from_payload(cls, address: int, data: bytes) -> 'ExtendedSegmentAddressRecord':

        return cls(int.from_bytes(data, byteorder='big'))

    def payload(self) -> bytes:

        return self._segment.to_bytes_big()

    @property
    def segment(self) -> Address16:
        r""":class:`Address16`: Segment base."""

        return self._segment


class StartSegmentAddressRecord(BaseRecord):
    r"""Start Segment Address record.

    Args:
        code_segment (int):
            Initial value of the ``CS`` register.

        instruction_pointer (int):
            Initial value of the ``IP`` register.

    Examples:
        >>> from ihexparse.records import StartSegmentAddressRecord
        >>> str(StartSegmentAddressRecord(0xABCD, 0xCD12))
        '03 start segment address - CS: 0xABCD, IP: 0xCD12'
    """

    __slots__ = ('_code_segment', '_instruction_pointer')

    KIND = RecordKind.START_SEGMENT_ADDRESS

    EQUALITY_KEYS = ('code_segment', 'instruction_pointer')

    def __init__(self, code_segment: int, instruction_pointer: int):

        self._assign(_code_segment=Address16(code_segment),
                     _instruction_pointer=Address16(instruction_pointer))

    def _field_tokens(self) -> Mapping[str, bytes]:

        return {
            'cslabel': b'CS: ',
            'codeseg': str(self._code_segment).encode(),
            'iplabel': b', IP: ',
            'ip': str(self._instruction_pointer).encode(),
        }

    @property
    def code_segment(self) -> Address16:
        r""":class:`Address16`: Initial ``CS`` register value."""

        return self._code_segment

    @classmethod
    def from_payload(cls, address: int, data: bytes) -> 'StartSegmentAddressRecord':

        code_segment = int.from_bytes(data[:2], byteorder='big')
        instruction_pointer = int.from_bytes(data[2:], byteorder='big')
        return cls(code_segment, instruction_pointer)

    @property
    def instruction_pointer(self) -> Address16:
        r""":class:`Address16`: Initial ``IP`` register value."""

        return self._instruction_pointer

    def payload(self) -> bytes:

        return (self._code_segment.to_bytes_big() +
                self._instruction_pointer.to_bytes_big())


class ExtendedLinearAddressRecord(BaseRecord):
    r"""Extended Linear Address record.

    Args:
        upper_bits (int):
            Upper 16 bits of the 32-bit address of the following data records.

    Examples:
        >>> from ihexparse.records import ExtendedLinearAddressRecord
        >>> str(ExtendedLinearAddressRecord(0xABCD))
        '04 extended linear address - 0xABCD'
    """

    __slots__ = ('_upper_bits',)

    KIND = RecordKind.EXTENDED_LINEAR_ADDRESS

    EQUALITY_KEYS = ('upper_bits',)

    def __init__(self, upper_bits: int):

        self._assign(_upper_bits=Address16(upper_bits))

    def _field_tokens(self) -> Mapping[str, bytes]:

        return {'extension': str(self._upper_bits).encode()}

    @classmethod
    def from_payload(cls, address: int, data: bytes) -> 'ExtendedLinearAddressRecord':

        return cls(int.from_bytes(data, byteorder='big'))

    def payload(self) -> bytes:

        return self._upper_bits.to_bytes_big()

    @property
    def upper_bits(self) -> Address16:
        r""":class:`Address16`: Upper 16 address bits."""

        return self._upper_bits


class StartLinearAddressRecord(BaseRecord):
    r"""Start Linear Address record.

    Args:
        address (int):
            32-bit start address.

    Examples:
        >>> from ihexparse.records import StartLinearAddressRecord
        >>> str(StartLinearAddressRecord(0xAB3400FF))
        '05 start linear address - 0xAB3400FF'
    """

    __slots__ = ('_address',)

    KIND = RecordKind.START_LINEAR_ADDRESS

    EQUALITY_KEYS = ('address',)

    def __init__(self, address: int):

        self._assign(_address=Address32(address))

    def _field_tokens(self) -> Mapping[str, bytes]:

        return {'address': str(self._address).encode()}

    @property
    def address(self) -> Address32:
        r""":class:`Address32`: Start address."""

        return self._address

    @classmethod
    def from_payload(cls, address: int, data: bytes) -> 'StartLinearAddressRecord':

        return cls(int.from_bytes(data, byteorder='big'))

    def payload(self) -> bytes:

        return self._address.to_bytes_big()


RECORD_TYPES: Mapping[RecordKind, Type[BaseRecord]] = {
    RecordKind.DATA: DataRecord,
    RecordKind.END_OF_FILE: EndOfFileRecord,
    RecordKind.EXTENDED_SEGMENT_ADDRESS: ExtendedSegmentAddressRecord,
    RecordKind.START_SEGMENT_ADDRESS: StartSegmentAddressRecord,
    RecordKind.EXTENDED_LINEAR_ADDRESS: ExtendedLinearAddressRecord,
    RecordKind.START_LINEAR_ADDRESS: StartLinearAddressRecord,
}
r"""Record class for each record kind."""
