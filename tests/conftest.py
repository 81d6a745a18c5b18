import io
import struct
from pathlib import Path

import pytest
from PIL import Image

from pngstash.images.png import PNG_SIGNATURE, PNGChunk


MESSAGE = b'This is where your secret message will be!'
MESSAGE_CRC = 2882656334


def build_record(length, chunk_type, data, crc):
    return struct.pack('>I', length) + chunk_type + data + struct.pack('>I', crc)


def build_png(*chunks):
    return PNG_SIGNATURE + b''.join([_.pack() for _ in chunks])


@pytest.fixture
def test_root_dir():
    return Path(__file__).parent


@pytest.fixture
def message_record():
    return build_record(len(MESSAGE), b'RuSt', MESSAGE, MESSAGE_CRC)


@pytest.fixture
def chunks_png():
    '''A file with only chunks of ours, there is no image at all.'''
    return build_png(
        PNGChunk.from_data('FrSt', b'I am the first chunk'),
        PNGChunk.from_data('miDl', b'I am in the middle'),
        PNGChunk.from_data('RuSt', MESSAGE),
        PNGChunk.from_data('LASt', b''),
    )


@pytest.fixture
def image_png():
    '''A real image produced by pillow.'''
    buffer = io.BytesIO()
    Image.new('RGB', (5, 5), 'red').save(buffer, format='PNG')

    return buffer.getvalue()


@pytest.fixture
def image_path(tmp_path, image_png):
    path = tmp_path / 'red.png'
    path.write_bytes(image_png)

    return path
