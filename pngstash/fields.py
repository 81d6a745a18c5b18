"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct

from .meta import FieldBase, Endianess
from .properties import Dependency, PropertyDescriptor
from .streams import Stream
from .exceptions import PNGStashException, MalformedChunk, InvalidSignature


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def get_dependencies(self):
        """Return the dictionary containing as key the attribute's name for each Dependency"""
        instance_dict = self.__dict__
        return {_k: _v for _k, _v in instance_dict.items() if isinstance(_v, Dependency)}

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        self._value = value

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    def _set_raw(self, value) -> None:
        raise NotImplementedError(f"method {self.__class__.__name__}._set_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    def _read(self, stream, size):
        data = stream.read(size)

        if len(data) != size:
            raise MalformedChunk(
                f'not enough data for field \'{self.name}\'', expected=size, actual=len(data))

        return data

    def relayout(self, offset=0):
        self.logger.debug("relayouting %s", self.__class__.__name__)
        self.offset = offset

        return self.size

    def _update_value(self):
        '''This is used to update the binary value before packing'''
        pass

    def pack(self, stream=None, relayout=True):
        '''Write the binary representation of the field into the stream
        (a new one if not given) and return the stream's contents.'''
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        self._update_value()
        stream.write(self.raw)

        return stream.getvalue()

    def unpack(self, stream):
        self.raw = self._read(stream, self.size)


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, formatter='0x%x', **kw):
        self.format = format
        self.formatter = formatter
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.formatter % self.value)

    def get_format(self):
        prefix = {
            Endianess.LITTLE_ENDIAN: '<',
            Endianess.BIG_ENDIAN: '>',
            Endianess.NETWORK: '!',
            Endianess.NATIVE: '=',
        }[self.endianess]

        return '%s%s' % (prefix, self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def _set_raw(self, raw: bytes) -> None:
        try:
            self.value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            self.logger.error(e)
            raise MalformedChunk(str(e), expected=self.size, actual=len(raw)) from e


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be a Dependency, in that case setting a value with a different
    size is allowed and is propagated to the field the length depends on."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if self.default is None else self.default

    def _get_size(self):
        return self.length

    def _set_value(self, value) -> None:
        length = len(value)
        if 'length' not in self.get_dependencies() and length != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = bytes(value)

        self.length = length

    def _get_raw(self):
        return self.value

    def _set_raw(self, raw):
        self.value = raw

    def unpack(self, stream):
        raw = stream.read(self.length)

        if self.is_magic and raw != self.default:
            self.logger.warning('the magic doesn\'t correspond')
            raise InvalidSignature(
                f'magic for field \'{self.name}\' failed', expected=self.default, actual=raw)

        if len(raw) != self.length:
            raise MalformedChunk(
                f'not enough data for field \'{self.name}\'', expected=self.length, actual=len(raw))

        self.raw = raw


class ArrayField(Field):
    '''Un/Pack an array of fields created from the template passed as argument.

    You can indicate an explicit number of elements via the parameter named "n",
    otherwise unpacking goes on until the stream is exhausted.

    This class must behave like a list in python, obviously cannot implement all the methods
    since, for example, slicing what should mean?
    '''

    def __init__(self, field_cls, n=0, **kw):
        if not isinstance(n, int):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self.field_cls = field_cls
        self._n = n

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __iter__(self):
        return iter(self.value)

    def __len__(self):
        return len(self.value)

    @property
    def n(self):
        return len(self.value)

    def value_from_default(self):
        return [self.instance_element() for _ in range(self._n)]

    def _get_raw(self):
        return b''.join([element.raw for element in self.value])

    def _get_size(self):
        return sum([element.size for element in self.value])

    def relayout(self, offset=0):
        self.offset = offset
        size = 0
        for field in self.value:
            size += field.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for element in self.value:
            stream.seek(element.offset)
            element.pack(stream=stream, relayout=False)

        return stream.getvalue()

    def _has_more(self, stream, count):
        if self._n:
            return count < self._n

        return stream.remaining() > 0

    def unpack(self, stream):
        elements = []

        while self._has_more(stream, len(elements)):
            element = self.instance_element()
            offset = stream.tell()

            self.logger.debug('unpacking element #%d of \'%s\' at offset %d' % (len(elements), self.name, offset))

            try:
                element.unpack(stream)
            except PNGStashException as e:
                e.chain.append(f'[{len(elements)}]')
                raise

            element.offset = offset
            elements.append(element)

        self.value = elements

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def append(self, element):
        element.father = self
        self.value.append(element)

    def pop(self, index=-1):
        element = self.value.pop(index)
        element.father = None

        return element

    def clear(self):
        self.value.clear()
