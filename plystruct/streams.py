import io
import logging


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file objects to
    uniform their properties: mainly we need seek() and read() to behave
    the same whatever the source of the data is.

    A Stream created from a path owns the underlying file and closes it,
    a file object passed by the caller is only borrowed.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.owned = False
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            if not hasattr(self.obj, 'read') or not hasattr(self.obj, 'seek'):
                raise ValueError('\'%s\' cannot be used as a stream' % self.obj.__class__.__name__)
            init_method = self.init_file

        init_method()

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.obj)

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __del__(self):
        if self.__dict__.get('owned'):
            self.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')
        self.owned = True

    init_PosixPath = init_WindowsPath = init_str

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)
        self.owned = True

    init_bytearray = init_bytes

    def init_file(self):
        logger.debug('borrowing file object %r' % self.obj)

    @property
    def closed(self):
        return self.obj.closed

    def close(self):
        if self.owned and not self.obj.closed:
            logger.debug('closing %r' % self.obj)
            self.obj.close()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

        return self

    def read(self, size=-1):
        return self.obj.read(size)

    def read_exactly(self, size):
        '''Read size bytes, looping over short reads: it returns less data only
        when the end of the stream is reached.'''
        chunks = []
        missing = size
        while missing > 0:
            chunk = self.obj.read(missing)
            if not chunk:
                break
            chunks.append(chunk)
            missing -= len(chunk)

        return b''.join(chunks)

