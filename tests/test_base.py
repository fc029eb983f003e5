import pickle

import pytest

import ihexparse.base as _base
from ihexparse.base import TOKEN_COLOR_CODES
from ihexparse.base import Address16
from ihexparse.base import Address32
from ihexparse.base import colorize_tokens


@pytest.fixture
def fake_token_color_codes(request):
    backup = _base.TOKEN_COLOR_CODES
    _base.TOKEN_COLOR_CODES = {key: (b'[%s]' % key.encode()) for key in backup}
    yield
    _base.TOKEN_COLOR_CODES = backup


def test_token_color_codes():
    for key in ('', '<', '>', 'data', 'dataalt', 'end'):
        assert key in TOKEN_COLOR_CODES


def test_colorize_tokens(fake_token_color_codes):
    tokens = {
        'tag': b'00',
        'name': b' data',
        'begin': b' - ',
        'data': b'12 EF C7 00',
        'empty': b'',
        'end': b'\n',
    }
    colorized = colorize_tokens(tokens)
    assert colorized == {
        '<': b'[<]',
        'tag': b'[tag]00',
        'name': b'[name] data',
        'begin': b'[] - ',
        'data': b'[data]12 [dataalt]EF [data]C7 [dataalt]00',
        'end': b'[end]\n',
        '>': b'[>]',
    }
    assert list(colorized) == ['<', 'tag', 'name', 'begin', 'data', 'end', '>']


def test_colorize_tokens_no_altdata(fake_token_color_codes):
    tokens = {'data': b'12 EF C7'}
    colorized = colorize_tokens(tokens, altdata=False)
    assert colorized == {
        '<': b'[<]',
        'data': b'[data]12 EF C7',
        '>': b'[>]',
    }


def test_colorize_tokens_ansi():
    colorized = colorize_tokens({'tag': b'01'})
    assert colorized['tag'] == b'\x1b[32m01'
    assert colorized['<'] == b'\x1b[0m'
    assert colorized['>'] == b'\x1b[0m'


class TestAddress16:

    def test___new__(self):
        address = Address16(0x01FE)
        assert address == 0x01FE
        assert isinstance(address, int)
        assert Address16() == 0
        assert Address16(0xFFFF) == 0xFFFF
        assert Address16(Address32(0x1234)) == 0x1234

    def test___new___raises(self):
        with pytest.raises(ValueError, match='Address16 overflow'):
            Address16(0x10000)
        with pytest.raises(ValueError, match='Address16 overflow'):
            Address16(-1)
        with pytest.raises(TypeError):
            Address16(1.0)
        with pytest.raises(TypeError):
            Address16('1')

    def test___str__(self):
        assert str(Address16(0x0000)) == '0x0000'
        assert str(Address16(0x01FE)) == '0x01FE'
        assert str(Address16(0xabcd)) == '0xABCD'

    def test___repr__(self):
        assert repr(Address16(0x01FE)) == '<Address16: 0x01FE>'

    def test___eq__(self):
        assert Address16(0x1234) == Address16(0x1234)
        assert Address16(0x1234) != Address16(0x1235)
        assert hash(Address16(0x1234)) == hash(0x1234)

    def test_hex_digits(self):
        assert Address16(0x1F).hex_digits == '001F'

    def test_to_bytes_big(self):
        assert Address16(0x1234).to_bytes_big() == b'\x12\x34'
        assert Address16(0x0001).to_bytes_big() == b'\x00\x01'

    def test_pickle(self):
        address = Address16(0x1234)
        clone = pickle.loads(pickle.dumps(address))
        assert clone == address
        assert type(clone) is Address16


class TestAddress32:

    def test___new__(self):
        assert Address32(0xAB3400FF) == 0xAB3400FF
        assert Address32(0xFFFFFFFF) == 0xFFFFFFFF

    def test___new___raises(self):
        with pytest.raises(ValueError, match='Address32 overflow'):
            Address32(0x100000000)
        with pytest.raises(ValueError, match='Address32 overflow'):
            Address32(-1)

    def test___str__(self):
        assert str(Address32(0)) == '0x00000000'
        assert str(Address32(0xab3400ff)) == '0xAB3400FF'

    def test___repr__(self):
        assert repr(Address32(0xCD)) == '<Address32: 0x000000CD>'

    def test_hex_digits(self):
        assert Address32(0xCD).hex_digits == '000000CD'

    def test_to_bytes_big(self):
        assert Address32(0xAB3400FF).to_bytes_big() == b'\xAB\x34\x00\xFF'
