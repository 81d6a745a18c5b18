import struct

import pytest

from pngstash.core import Chunk
from pngstash.common.crc import CRCField, checksum
from pngstash.exceptions import MalformedChunk, InvalidSignature
from pngstash.fields import StructField, StringField, ArrayField, Endianess
from pngstash.streams import Stream


def test_structfield_conversion_raw_value():
    """Check that the attributes "value" and "raw" are the analogous
    of the integers and bytes representation for a field."""
    field = StructField('I')

    assert field.size == 4
    assert field.raw == b'\x00\x00\x00\x00'
    assert field.value == 0

    field.value = 0xcafe

    assert field.value == 0xcafe
    assert field.raw == b'\xfe\xca\x00\x00'


def test_structfield_set_raw():
    field = StructField('I')

    field.raw = b'\x01\x02\x03\x04'
    assert field.value == 0x04030201


def test_structfield_endianess():
    field = StructField('I', default=0xcafe, endianess=Endianess.BIG_ENDIAN)

    assert field.raw == b'\x00\x00\xca\xfe'

    field.unpack(Stream(b'\x01\x02\x03\x04'))
    assert field.value == 0x01020304

    assert StructField('H', default=1, endianess=Endianess.NETWORK).raw == b'\x00\x01'


def test_structfield_short_data():
    field = StructField('I')

    with pytest.raises(MalformedChunk) as e:
        field.unpack(Stream(b'\x01\x02'))

    assert e.value.context == {'expected': 4, 'actual': 2}


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert len(field.raw) == field.size
    assert field.raw == b'\x00' * field.size

    with pytest.raises(ValueError):
        field.value = b'kebab'

    data = b''.join([bytes([_]) for _ in range(0x10)])

    field.value = data

    assert field.value == data
    assert field.raw == data


def test_stringfield_default():
    field = StringField(default=b'kebab')

    assert field.size == 5
    assert field.value == b'kebab'


def test_stringfield_magic():
    field = StringField(4, default=b'MAGI', is_magic=True)

    field.unpack(Stream(b'MAGIC'))
    assert field.value == b'MAGI'

    with pytest.raises(InvalidSignature):
        field.unpack(Stream(b'LOGIC'))

    with pytest.raises(InvalidSignature):
        field.unpack(Stream(b'MA'))


def test_stringfield_short_data():
    field = StringField(8)

    with pytest.raises(MalformedChunk):
        field.unpack(Stream(b'AAAA'))


def test_arrayfield():
    length = 10
    array = ArrayField(StructField('I'), n=length)

    # check some basic property
    assert isinstance(array.value, list)
    assert len(array.value) == length
    assert len(array) == length
    assert array.n == length

    # check that the elements are not duplicated
    assert array[0] is not array[1]
    assert array[0].father is array

    # check the offsets make sense
    assert array.relayout() == 40
    assert array[0].offset == 0
    assert array[1].offset == 4
    assert array[9].offset == 36

    # check the value are all zero
    for field in array:
        assert field.value == 0

    # set one and check is actually changed
    array[3].value = 0xcafebabe
    assert [_.value for _ in array] == [
        0, 0, 0, 0xcafebabe, 0, 0, 0, 0, 0, 0,
    ]

    array.clear()

    assert len(array) == 0


def test_arrayfield_unpack_until_exhausted():
    array = ArrayField(StructField('I'))

    assert len(array) == 0

    array.unpack(Stream(b'AAAABBBBCCCC'))

    assert [_.value for _ in array] == [0x41414141, 0x42424242, 0x43434343]
    assert [_.offset for _ in array] == [0, 4, 8]
    assert array.raw == b'AAAABBBBCCCC'


def test_arrayfield_unpack_fixed_number():
    array = ArrayField(StructField('H'), n=2)
    stream = Stream(b'AABBCC')

    array.unpack(stream)

    assert len(array) == 2
    assert stream.read_all() == b'CC'


def test_arrayfield_unpack_error_has_index():
    array = ArrayField(StructField('I'))

    with pytest.raises(MalformedChunk) as e:
        array.unpack(Stream(b'AAAABB'))

    assert e.value.chain == ['[1]']


def test_arrayfield_append_and_pop():
    array = ArrayField(StructField('B'))

    first, second = StructField('B', default=1), StructField('B', default=2)
    array.append(first)
    array.append(second)

    assert first.father is array
    assert array.pack() == b'\x01\x02'

    assert array.pop(0) is first
    assert first.father is None
    assert array.pack() == b'\x02'


def test_crc32():
    class DummyChunk(Chunk):
        dataA = StructField('I')
        dataB = StructField('I')
        dataC = StructField('I')

        crc   = CRCField([
            'dataA',
            'dataC',
        ], endianess=Endianess.BIG_ENDIAN)

    dummy = DummyChunk()
    dummy.dataA.value = 0x01020304
    dummy.dataB.value = 0x05060708
    dummy.dataC.value = 0x090A0B0C

    assert not dummy.crc.is_valid()

    packed = dummy.pack()

    expected = checksum(b'\x04\x03\x02\x01' + b'\x0c\x0b\x0a\x09')
    assert dummy.crc.value == expected
    assert dummy.crc.is_valid()
    assert packed[-4:] == struct.pack('>I', expected)


def test_checksum():
    # well known values for CRC-32/ISO-HDLC
    assert checksum(b'') == 0
    assert checksum(b'123456789') == 0xcbf43926
    assert checksum(b'IEND') == 0xae426082
