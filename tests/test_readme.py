import io

from ihexparse import HexFile
from ihexparse import ParseError
from ihexparse.parser import ErrorKind


def test_describe():
    file = HexFile(':0201FE00FF0FF1\n:00000001FF\n')
    ans_ref = (
        'HexFile (2 records)\n'
        '  00 data - address: 0x01FE, data: FF 0F\n'
        '  01 end of file'
    )
    assert file.describe() == ans_ref


def test_parse_error():
    text = ':00000001FF\n:00000001FE\n'
    try:
        HexFile(text)
    except ParseError as exc:
        assert exc.kind == ErrorKind.INVALID_CHECKSUM
        assert exc.kind.name == 'INVALID_CHECKSUM'
        assert exc.locate(text) == (2, 10)
    else:
        raise AssertionError('ParseError not raised')


def test_print():
    stream = io.BytesIO()
    HexFile(':0201FE00FF0FF1\n:00000001FF\n').print(stream=stream)
    assert stream.getvalue() == (
        b'00 data - address: 0x01FE, data: FF 0F\n'
        b'01 end of file\n'
    )


def test_rendering_separator():
    from ihexparse import DataRecord
    record = DataRecord(0xABCD, b'\x12\xEF\xC7')
    assert str(record) == '00 data - address: 0xABCD, data: 12 EF C7'
    assert '–' not in str(record)
