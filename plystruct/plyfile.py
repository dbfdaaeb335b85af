'''
# Polygon File Format

Format created at Stanford to store three dimensional data from 3D scanners:
a textual header describes the elements (vertices, faces, ...) and their
properties, the body contains the records.

The specification is at <http://paulbourke.net/dataformats/ply/>; here only
the binary little endian flavour is supported and only the elements made of
scalar properties can be read.
'''
import logging

from .enum import Compliant
from .exceptions import (
    UnknownElementError,
    UnsupportedFormatError,
    VariableSizeElementError,
)
from .header import Header, BINARY_LITTLE_ENDIAN, HEADER_CHUNK_SIZE
from .reader import ElementReader
from .streams import Stream


class PlyFile(object):
    '''Handle to an opened PLY file.

    The source can be a path, raw bytes or a binary file object; the header
    is parsed right away in the constructor.'''

    def __init__(self, source, compliant=Compliant.STRICT, chunk_size=HEADER_CHUNK_SIZE):
        self.logger = logging.getLogger(__name__)
        self.stream = Stream(source)

        self.logger.debug('parsing header from %s' % self.stream)
        try:
            self.header = Header.from_stream(self.stream, compliant=compliant, chunk_size=chunk_size)

            if not self.header.is_supported:
                raise UnsupportedFormatError(
                    f'{BINARY_LITTLE_ENDIAN} support only, found format {self.header.format!r}')
        except Exception:
            self.stream.close()
            raise

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.header)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __contains__(self, name):
        return self.has_element(name)

    @property
    def elements(self):
        return self.header.elements

    @property
    def comment(self):
        return self.header.comment

    def has_element(self, name: str) -> bool:
        return self.header.has(name)

    def element_reader(self, name: str) -> ElementReader:
        element = self.header.get_element(name)
        if element is None:
            raise UnknownElementError(f"unknown element '{name}'", chain=[name])

        if not element.is_fixed_size:
            raise VariableSizeElementError(
                f"element '{name}' has list properties, its records cannot be read", chain=[name])

        return ElementReader(self.stream, self.header.body_offset_of(name), element)

    def close(self):
        self.stream.close()


def open_ply(source, compliant=Compliant.STRICT, chunk_size=HEADER_CHUNK_SIZE) -> PlyFile:
    return PlyFile(source, compliant=compliant, chunk_size=chunk_size)
