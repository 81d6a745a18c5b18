'''
File level operations: load a PNG from disk, work on its chunks and store
the result back.
'''
import logging
from typing import List, Optional

from .exceptions import IOFailure
from .images.png import PNGFile, PNGChunk


logger = logging.getLogger(__name__)


def write_file(path, data: bytes) -> None:
    logger.debug('writing %d bytes to \'%s\'' % (len(data), path))
    try:
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise IOFailure(f'unable to write \'{path}\': {e.strerror}', path=str(path)) from e


def encode(path, chunk_type: str, message: str, out_path=None) -> PNGChunk:
    '''Append a chunk containing the message; the file is overwritten
    if no output path is given.'''
    chunk = PNGChunk.from_data(chunk_type, message.encode('utf-8'))

    png = PNGFile(path)
    png.append_chunk(chunk)

    write_file(out_path if out_path is not None else path, png.as_bytes())

    return chunk


def decode(path, chunk_type: str) -> Optional[str]:
    return PNGFile(path).find_text(chunk_type)


def remove(path, chunk_type: str) -> PNGChunk:
    png = PNGFile(path)
    chunk = png.remove_chunk(chunk_type)

    write_file(path, png.as_bytes())

    return chunk


def print_chunks(path) -> List[str]:
    return [str(chunk.type.value) for chunk in PNGFile(path).chunks]
