import ihexparse


def test_exports():
    for name in (
        'Address16',
        'Address32',
        'DataRecord',
        'EndOfFileRecord',
        'ErrorKind',
        'ExtendedLinearAddressRecord',
        'ExtendedSegmentAddressRecord',
        'HexFile',
        'HexParser',
        'ParseError',
        'RecordKind',
        'StartLinearAddressRecord',
        'StartSegmentAddressRecord',
        'parse',
    ):
        assert hasattr(ihexparse, name)


def test_version():
    assert ihexparse.__version__ == '0.1.0'


def test_parse():
    records = ihexparse.parse(':00000001FF')
    assert records == [ihexparse.EndOfFileRecord()]
    assert ihexparse.HexFile(':00000001FF').records == tuple(records)
