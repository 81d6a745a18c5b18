'''
# Portable Network Graphics

A PNG file is made of a signature followed by a sequence of chunks; here we
don't care about the image itself but only about the chunks, so that it's
possible to hide some data inside a file (and get it back) without touching
the rest of it.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html> and
is available a full test-suite with a lot of PNG images covering all
the possible cases at <http://www.schaik.com/pngsuite/>.

'''
import logging
import struct
from typing import Optional

from pngstash.core import Chunk
from pngstash import (
    fields,
)
from pngstash.common import crc
from pngstash.exceptions import (
    MalformedChunk,
    InvalidTextEncoding,
    ChunkNotFound,
)
from pngstash.properties import Dependency
from pngstash.streams import Stream

from .chunk_type import ChunkType, ChunkTypeField
from .utils import get_chunk_by_name, get_chunk_index_by_name


logger = logging.getLogger(__name__)

PNG_SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'
# length + type + crc, i.e. a chunk without data
PNG_CHUNK_MIN_SIZE = 12


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=PNG_SIGNATURE, is_magic=True)


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    A chunk is defined as critical or ancillary depending on the case of the
    starting letter of the type field.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk
    '''
    length = fields.StructField('I', endianess=fields.Endianess.BIG_ENDIAN, formatter='%d')
    type   = ChunkTypeField()
    data   = fields.StringField(Dependency('.length'))
    crc    = crc.CRCField(['type', 'data'], endianess=fields.Endianess.BIG_ENDIAN)  # network byte order

    @classmethod
    def from_data(cls, chunk_type, data: bytes) -> "PNGChunk":
        '''Build a chunk with the given type (a ChunkType or its string
        representation) and payload; length and crc are derived.'''
        chunk = cls()

        chunk.type.value = chunk_type
        chunk.data.value = data
        chunk.crc.value = chunk.crc.calculate()

        chunk.relayout()

        return chunk

    @classmethod
    def from_bytes(cls, raw: bytes) -> "PNGChunk":
        '''Decode exactly one chunk record, no trailing data allowed.'''
        raw = bytes(raw)

        cls.check_record(raw)

        return cls(raw)

    @staticmethod
    def check_record(raw: bytes) -> None:
        '''Cross-check the length and the crc of a raw record.

        The type is not validated here so that a corrupted record is
        reported as such before complaining about its type.'''
        if len(raw) < PNG_CHUNK_MIN_SIZE:
            raise MalformedChunk('chunk record too short', size=len(raw), minimum=PNG_CHUNK_MIN_SIZE)

        length = struct.unpack('>I', raw[:4])[0]
        if length != len(raw) - PNG_CHUNK_MIN_SIZE:
            raise MalformedChunk(
                'declared length doesn\'t correspond to the data',
                declared=length,
                actual=len(raw) - PNG_CHUNK_MIN_SIZE,
            )

        stored = struct.unpack('>I', raw[-4:])[0]
        computed = crc.checksum(raw[4:-4])
        if stored != computed:
            raise MalformedChunk('CRC mismatch', stored=stored, computed=computed)

    def unpack(self, stream):
        # peek the length so to isolate the whole record
        stream.save()
        header = stream.read(4)
        stream.restore()

        length = struct.unpack('>I', header)[0] if len(header) == 4 else 0

        record = stream.read(PNG_CHUNK_MIN_SIZE + length)
        self.check_record(record)

        super().unpack(Stream(record))

    def data_as_text(self) -> str:
        try:
            return self.data.value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidTextEncoding(
                f'data of chunk \'{self.type.value}\' is not valid UTF-8', position=e.start) from e

    def __str__(self):
        return 'type: %s length: %d crc: 0x%08x data: %s' % (
            self.type.value,
            self.length.value,
            self.crc.value,
            self.data.value.decode('utf-8', errors='replace'),
        )


class PNGFile(Chunk):
    '''The signature and all the chunks in the order they have in the file.

    No check is done on the order of the chunks (IHDR first, IEND last and
    so on): the caller is responsible for that.'''
    header = PNGHeader()
    chunks = fields.ArrayField(PNGChunk())

    @classmethod
    def parse(cls, data: bytes) -> "PNGFile":
        return cls(bytes(data))

    def as_bytes(self) -> bytes:
        return self.pack()

    def append_chunk(self, chunk: PNGChunk) -> None:
        logger.debug('appending chunk \'%s\' after %d chunks' % (chunk.type.value, len(self.chunks)))
        self.chunks.append(chunk)

    def find_chunk(self, chunk_type: str) -> Optional[PNGChunk]:
        return get_chunk_by_name(self.chunks, chunk_type)

    def remove_chunk(self, chunk_type: str) -> PNGChunk:
        '''Remove the first chunk with the given type, the others with
        the same type are left where they are.'''
        index = get_chunk_index_by_name(self.chunks, chunk_type)

        if index is None:
            raise ChunkNotFound(f'no chunk with type \'{chunk_type}\'', chunk_type=chunk_type)

        logger.debug('removing chunk #%d with type \'%s\'' % (index, chunk_type))

        return self.chunks.pop(index)

    def find_text(self, chunk_type: str) -> Optional[str]:
        chunk = self.find_chunk(chunk_type)

        if chunk is None:
            return None

        return chunk.data_as_text()


__all__ = [
    'PNG_SIGNATURE',
    'PNG_CHUNK_MIN_SIZE',
    'ChunkType',
    'PNGHeader',
    'PNGChunk',
    'PNGFile',
]
