'''
# Chunk types

A chunk type is a 4-byte code restricted to the ASCII letters A-Z and a-z;
bit 5 (value 32) of each byte, i.e. the case of the letter, is a property bit:

 1. ancillary bit (first byte): 0 (uppercase) means critical
 2. private bit (second byte): 0 (uppercase) means public
 3. reserved bit (third byte): must be 0 (uppercase) in files conforming to
    the current version of PNG
 4. safe-to-copy bit (fourth byte): 1 (lowercase) means the chunk can be
    copied by editors that don't recognize it

See <http://www.libpng.org/pub/png/spec/1.2/PNG-Structure.html#Chunk-naming-conventions>.
'''
from bitstring import Bits

from pngstash import fields
from pngstash.exceptions import InvalidChunkType


CHUNK_TYPE_SIZE = 4
# position of the property bit inside each byte, counting from the MSB
PROPERTY_BIT = 2


class ChunkType(object):
    '''Immutable value representing the type of a chunk.'''
    __slots__ = ('_raw', '_bits')

    def __init__(self, raw):
        raw = bytes(raw)

        if len(raw) != CHUNK_TYPE_SIZE or not raw.isalpha():
            raise InvalidChunkType('chunk type must be 4 ASCII letters', raw=raw)

        object.__setattr__(self, '_raw', raw)
        object.__setattr__(self, '_bits', Bits(raw))

    def __setattr__(self, name, value):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __reduce__(self):
        return (self.__class__, (self._raw,))

    @classmethod
    def from_str(cls, value: str) -> "ChunkType":
        if not isinstance(value, str):
            raise InvalidChunkType(
                f'chunk type must be given as str, not {value.__class__.__name__}', value=value)

        if len(value) != CHUNK_TYPE_SIZE:
            raise InvalidChunkType('chunk type must be 4 characters long', value=value)

        try:
            raw = value.encode('ascii')
        except UnicodeEncodeError as e:
            raise InvalidChunkType('chunk type must be 4 ASCII letters', value=value) from e

        return cls(raw)

    @property
    def raw(self) -> bytes:
        return self._raw

    def __bytes__(self):
        return self._raw

    def __str__(self):
        return self._raw.decode('ascii')

    def __repr__(self):
        return f'<{self.__class__.__name__}({self})>'

    def __eq__(self, other):
        if not isinstance(other, ChunkType):
            return NotImplemented

        return self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)

    def _property_bit(self, index: int) -> bool:
        return self._bits[index * 8 + PROPERTY_BIT]

    def is_critical(self) -> bool:
        return not self._property_bit(0)

    def is_public(self) -> bool:
        return not self._property_bit(1)

    def is_reserved_bit_valid(self) -> bool:
        return not self._property_bit(2)

    def is_safe_to_copy(self) -> bool:
        return self._property_bit(3)

    def is_valid(self) -> bool:
        '''Only the reserved bit is taken into account: the other properties
        don't make a chunk type invalid.'''
        return self.is_reserved_bit_valid()


class ChunkTypeField(fields.StringField):
    '''Four bytes field whose value is a ChunkType.

    The value can be set as ChunkType, bytes or str; the conversion raises
    InvalidChunkType for anything that is not made of 4 ASCII letters.'''

    def __init__(self, **kw):
        super().__init__(CHUNK_TYPE_SIZE, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.value)

    def value_from_default(self):
        return self.default

    def _set_value(self, value) -> None:
        if isinstance(value, str):
            value = ChunkType.from_str(value)
        elif value is not None and not isinstance(value, ChunkType):
            value = ChunkType(value)

        self._value = value

    def _get_raw(self):
        if self.value is None:
            raise ValueError(f'field \'{self.name}\' has no chunk type set')

        return self.value.raw
