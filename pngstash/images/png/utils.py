import logging


logger = logging.getLogger(__name__)


def get_chunk_index_by_name(chunks, name):
    '''Position of the first chunk having the type named "name", None if missing.'''
    for idx, chunk in enumerate(chunks):
        if str(chunk.type.value) == name:
            return idx

    logger.debug(f'no chunk with name {name}')

    return None


def get_chunk_by_name(chunks, name):
    idx = get_chunk_index_by_name(chunks, name)

    return chunks[idx] if idx is not None else None