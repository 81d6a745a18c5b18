import io
import logging

from .exceptions import IOFailure


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file objects to
    uniform their properties: the fields only need read(), seek(), tell()
    and write() without caring where the data comes from.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        # during copy/pickle the instance has no 'obj' yet
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self._type.__name__)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        try:
            self.obj = open(self.obj, 'rb')
        except OSError as e:
            raise IOFailure(f'unable to open \'{self.obj}\': {e.strerror}', path=str(self.obj)) from e

    def init_PosixPath(self):
        self.obj = str(self.obj)
        self.init_str()

    init_WindowsPath = init_PosixPath

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    init_bytearray = init_bytes

    def init_file(self):
        '''Anything else must already behave like a binary file object'''
        if not hasattr(self.obj, 'read'):
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self._type.__name__)

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    def remaining(self):
        '''Number of bytes between the actual position and the end of the stream.'''
        current = self.obj.tell()
        end = self.obj.seek(0, io.SEEK_END)
        self.obj.seek(current)

        return end - current

    def read_all(self):
        '''Returns all the data from the actual position.'''
        return self.obj.read()

    def write(self, data):
        return self.obj.write(data)

    def close(self):
        self.obj.close()

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)
