from enum import Enum, auto


class ErrorKind(Enum):
    '''The closed set of failures a caller can get back from pngstash.'''
    INVALID_CHUNK_TYPE    = auto()
    MALFORMED_CHUNK       = auto()
    INVALID_TEXT_ENCODING = auto()
    CHUNK_NOT_FOUND       = auto()
    INVALID_SIGNATURE     = auto()
    IO_FAILURE            = auto()


class PNGStashException(Exception):
    '''Base class to extend in order to throw exception in pngstash.

    Each subclass is tagged with its own ErrorKind. The "chain" is the list of
    the layers that caused the exception (innermost first) and it's filled
    while the exception bubbles up through the chunks; "context" keeps the
    details useful for diagnostics (offending bytes, expected vs actual
    values and so on).
    '''
    kind = None

    def __init__(self, message='', chain=None, **context):
        self.chain = chain if chain is not None else []
        self.context = context
        super().__init__(message)

    def __str__(self):
        msg = super().__str__() or self.kind.name.lower().replace('_', ' ')
        if self.chain:
            msg = '%s (at %s)' % (msg, '.'.join(self.chain[::-1]))
        if self.context:
            msg = '%s [%s]' % (msg, ', '.join('%s=%r' % _ for _ in self.context.items()))
        return msg


class InvalidChunkType(PNGStashException):
    kind = ErrorKind.INVALID_CHUNK_TYPE


class MalformedChunk(PNGStashException):
    '''Raised for records that are too short, have a length that doesn't
    correspond to the payload or a wrong CRC.'''
    kind = ErrorKind.MALFORMED_CHUNK


class InvalidTextEncoding(PNGStashException):
    kind = ErrorKind.INVALID_TEXT_ENCODING


class ChunkNotFound(PNGStashException):
    kind = ErrorKind.CHUNK_NOT_FOUND


class InvalidSignature(PNGStashException):
    '''The magic of the format doesn't correspond.'''
    kind = ErrorKind.INVALID_SIGNATURE


class IOFailure(PNGStashException):
    kind = ErrorKind.IO_FAILURE
