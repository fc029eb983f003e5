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

r"""Base types and helpers shared by the whole package."""

import operator
import os
from typing import Any
from typing import Mapping
from typing import Union

import colorama

try:
    from typing import TypeAlias
except ImportError:  # pragma: no cover
    TypeAlias = Any  # Python < 3.10

AnyBytes: TypeAlias = Union[bytes, bytearray, memoryview]
AnyPath: TypeAlias = Union[bytes, bytearray, str, os.PathLike]

TOKEN_COLOR_CODES: Mapping[str, bytes] = {
    '':         colorama.Style.RESET_ALL.encode(),
    '<':        colorama.Style.RESET_ALL.encode(),
    '>':        colorama.Style.RESET_ALL.encode(),
    'address':  colorama.Fore.RED.encode(),
    'codeseg':  colorama.Fore.RED.encode(),
    'data':     colorama.Fore.CYAN.encode(),
    'dataalt':  colorama.Fore.LIGHTCYAN_EX.encode(),
    'end':      colorama.Style.RESET_ALL.encode(),
    'extension': colorama.Fore.YELLOW.encode(),
    'ip':       colorama.Fore.MAGENTA.encode(),
    'name':     colorama.Fore.BLUE.encode(),
    'tag':      colorama.Fore.GREEN.encode(),
}
r"""ANSI color codes for each possible token type.

Tokens whose key is not listed here get the code mapped to the empty key.
"""


def colorize_tokens(
    tokens: Mapping[str, bytes],
    altdata: bool = True,
) -> Mapping[str, bytes]:
    r"""Prepends ANSI color codes to record rendering tokens.

    For each token within `tokens`, its key is used to look up the ANSI color
    code from :data:`TOKEN_COLOR_CODES`.
    The retrieved code (byte string) is prepended to the token.
    All the modified tokens are then collected and returned.

    Args:
        tokens (dict):
            A mapping of each token key name to token byte string.

        altdata (bool):
            If true, it alternates each space-separated byte of the ``data``
            token between the ANSI color codes mapped with keys ``data``
            (even byte index) and ``dataalt`` (odd byte index).
            If false, only the ``data`` code is prepended.

    Returns:
        dict: `tokens` with prepended ANSI color codes.

    Examples:
        >>> from ihexparse.base import colorize_tokens
        >>> from ihexparse.records import EndOfFileRecord
        >>> tokens = EndOfFileRecord().to_tokens()
        >>> tokens
        {'tag': b'01', 'name': b' end of file', 'end': b'\n'}
        >>> colorize_tokens(tokens)  # doctest: +NORMALIZE_WHITESPACE
        {'<': b'\x1b[0m',
         'tag': b'\x1b[32m01',
         'name': b'\x1b[34m end of file',
         'end': b'\x1b[0m\n',
         '>': b'\x1b[0m'}
    """

    codes = TOKEN_COLOR_CODES
    colorized = {}
    colorized.setdefault('<', codes['<'])

    for key, value in tokens.items():
        if value:
            code = codes.get(key, codes[''])

            if key == 'data' and altdata:
                altcode = codes['dataalt']
                buffer = bytearray()

                for index, pair in enumerate(value.split(b' ')):
                    if index:
                        buffer.extend(b' ')
                    buffer.extend(altcode if index & 1 else code)
                    buffer.extend(pair)

                colorized[key] = bytes(buffer)
            else:
                colorized[key] = code + value

    colorized.setdefault('>', codes['>'])
    return colorized


class BaseAddress(int):
    r"""Fixed-width unsigned address.

    An address is just an integer, checked against its bit width when created
    and rendered with a fixed number of uppercase hexadecimal digits.
    Arithmetic on addresses yields plain :obj:`int` values.
    """

    __slots__ = ()

    BITS: int = 0  # override
    r"""Address bit width."""

    DIGITS: int = 0  # override
    r"""Number of hexadecimal digits of the rendering."""

    def __new__(cls, value: int = 0):

        value = operator.index(value)
        if not 0 <= value < (1 << cls.BITS):
            raise ValueError(f'{cls.__name__} overflow')
        return super().__new__(cls, value)

    def __repr__(self) -> str:

        return f'<{type(self).__name__}: {self!s}>'

    def __str__(self) -> str:

        return '0x' + self.hex_digits

    @property
    def hex_digits(self) -> str:
        r"""str: Zero-padded uppercase hexadecimal digits, without prefix."""

        return '%0*X' % (self.DIGITS, int(self))

    def to_bytes_big(self) -> bytes:
        r"""Converts into big-endian bytes of the address width.

        Returns:
            bytes: Big-endian representation.

        Examples:
            >>> from ihexparse.base import Address16
            >>> Address16(0x1234).to_bytes_big()
            b'\x124'
        """

        return int(self).to_bytes(self.BITS // 8, byteorder='big')


class Address16(BaseAddress):
    r"""16-bit unsigned address.

    Examples:
        >>> from ihexparse.base import Address16
        >>> str(Address16(0x1FE))
        '0x01FE'
        >>> Address16(0x1FE)
        <Address16: 0x01FE>
        >>> Address16(0x10000)
        Traceback (most recent call last):
            ...
        ValueError: Address16 overflow
    """

    __slots__ = ()

    BITS = 16
    DIGITS = 4


class Address32(BaseAddress):
    r"""32-bit unsigned address.

    Examples:
        >>> from ihexparse.base import Address32
        >>> str(Address32(0xAB3400FF))
        '0xAB3400FF'
        >>> str(Address32(1))
        '0x00000001'
    """

    __slots__ = ()

    BITS = 32
    DIGITS = 8
