'''
# PLY header

The header is a textual preamble describing the layout of the binary body

    ply
    format binary_little_endian 1.0
    comment made by somebody
    element vertex 8
    property float x
    property float y
    property float z
    element face 6
    property list uchar int vertex_indices
    end_header

The body follows immediately after the newline of the terminator: the elements
are concatenated in declaration order, the records of an element are concatenated
and the properties of a record too, without any padding. It means that the offset
of anything in the body is derived only by the sizes of what precedes it.

A list property has a size known only while reading the body: the element
declaring it and all the elements after it have no position derivable from the
header, while the elements before it are unaffected.
'''
import logging
import re
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple, Union

from .enum import Compliant
from .exceptions import (
    HeaderReadError,
    InvalidFileError,
    MalformedHeaderError,
    UnknownElementError,
    VariableSizeElementError,
)
from .properties import ListProperty, Property, PropertyType


logger = logging.getLogger(__name__)

HEADER_END = 'end_header'
HEADER_CHUNK_SIZE = 100
BINARY_LITTLE_ENDIAN = 'binary_little_endian'

regexp_terminator = re.compile(rb'(?:^|\n)end_header\r?\n')
regexp_format = re.compile(r'^format (\S+)(?: (\S+))?')
regexp_comment = re.compile(r'^comment(?:$| (.*))')
regexp_element = re.compile(r'^element (\S+)(?: (\S*))?')
regexp_list = re.compile(r'^property list(?: (\S+))?(?: (\S+))?(?: (\S+))?')
regexp_property = re.compile(r'^property (\S+)(?: (\S+))?')


class Element(object):
    '''A named sequence of count records, each one made of the properties.'''

    def __init__(self, name: str, count: int = 0,
                 properties: Optional[List[Union[Property, ListProperty]]] = None):
        self.name = name
        self.count = count
        self.properties = properties if properties is not None else []

    def __repr__(self):
        return '<%s(%s, count=%d, size=%s)>' % (
            self.__class__.__name__,
            self.name,
            self.count,
            self.size if self.is_fixed_size else 'variable',
        )

    def add_property(self, prop: Union[Property, ListProperty]):
        self.properties.append(prop)

    @property
    def is_fixed_size(self) -> bool:
        return all(prop.size is not None for prop in self.properties)

    @property
    def size(self) -> int:
        '''the size of one record MUST be derived from the properties'''
        size = 0
        for prop in self.properties:
            if prop.size is None:
                raise VariableSizeElementError(
                    f'element \'{self.name}\' has the list property \'{prop.name}\'', chain=[self.name])
            size += prop.size

        return size

    @property
    def body_size(self) -> int:
        return self.count * self.size

    def property_offset(self, name: str) -> int:
        '''Offset of the named property inside a record.'''
        offset = 0
        for prop in self.properties:
            if prop.name == name:
                return offset
            if prop.size is None:
                raise VariableSizeElementError(
                    f'property \'{name}\' of element \'{self.name}\' follows the list property \'{prop.name}\'',
                    chain=[self.name, name])
            offset += prop.size

        raise KeyError(f'element \'{self.name}\' has no property named \'{name}\'')


def read_header_bytes(stream, chunk_size: int = HEADER_CHUNK_SIZE) -> bytes:
    '''Accumulate chunks from the stream until the terminator line is found.

    It returns the header including the newline of the terminator, so that its
    length is the offset of the body. The stream is left somewhere past the
    header, the readers always seek() before reading.'''
    data = b''

    while True:
        try:
            chunk = stream.read(chunk_size)
        except OSError as e:
            raise HeaderReadError('failed read header') from e

        if not chunk:
            raise HeaderReadError('end of stream reached before \'%s\'' % HEADER_END)

        data += chunk

        match = regexp_terminator.search(data)
        if match:
            logger.debug('header terminator found at offset %d' % match.end())
            return data[:match.end()]


class Header(object):
    '''The schema of a PLY file.'''

    def __init__(self, compliant: Compliant = Compliant.STRICT):
        self.logger = logging.getLogger(__name__)
        self.compliant = compliant
        self.format: Optional[str] = None
        self.version: Optional[str] = None
        self.comment: Optional[str] = None
        self.elements: List[Element] = []
        self.body_offset = 0

    def __repr__(self):
        return '<%s(%s, elements=%r)>' % (self.__class__.__name__, self.format, self.elements)

    @classmethod
    def from_stream(cls, stream, compliant: Compliant = Compliant.STRICT,
                    chunk_size: int = HEADER_CHUNK_SIZE) -> 'Header':
        raw = read_header_bytes(stream, chunk_size=chunk_size)

        header = cls.parse(raw.decode('latin-1'), compliant=compliant)
        header.body_offset = len(raw)

        return header

    @classmethod
    def parse(cls, text: str, compliant: Compliant = Compliant.STRICT) -> 'Header':
        header = cls(compliant=compliant)
        header.parse_lines(text.split('\n'))

        return header

    @property
    def is_supported(self) -> bool:
        return self.format == BINARY_LITTLE_ENDIAN

    def parse_lines(self, lines: List[str]):
        lines = [_.rstrip('\r') for _ in lines]

        if not any(_.strip() for _ in lines if _ != HEADER_END):
            raise InvalidFileError('the header is empty')

        if lines[0] != 'ply':
            self.logger.warning('the header doesn\'t start with the \'ply\' magic')

        # the format decides if the rest of the header is worth checking
        for line in lines:
            if line == HEADER_END:
                break
            match = regexp_format.match(line)
            if match:
                self.format, self.version = match.groups()
                break

        if not self.is_supported:
            self.logger.debug('format %r is not supported, skipping the checks' % self.format)
            self.compliant = Compliant.NONE

        element = None

        for lineno, line in enumerate(lines, start=1):
            if line == HEADER_END:
                break

            if regexp_format.match(line):
                continue

            match = regexp_comment.match(line)
            if match:
                self.comment = match.group(1) or ''
                continue

            match = regexp_element.match(line)
            if match:
                if element is not None:
                    self.elements.append(element)

                element = Element(match.group(1), count=self._parse_count(match.group(2), lineno))
                self.logger.debug('opened element \'%s\' with count %d' % (element.name, element.count))
                continue

            match = regexp_list.match(line)
            if match:
                prop = self._parse_list(match.groups(), lineno)
            else:
                match = regexp_property.match(line)
                if not match:
                    continue
                prop = self._parse_property(match.groups(), lineno)

            if prop is None:
                continue

            if element is None:
                if self.compliant & Compliant.ORPHAN:
                    raise MalformedHeaderError(
                        f'line {lineno}: property \'{prop.name}\' declared outside of an element')
                self.logger.warning('line %d: dropping property \'%s\' outside of an element' % (lineno, prop.name))
                continue

            element.add_property(prop)

        if element is not None:
            self.elements.append(element)

    def _parse_count(self, token: Optional[str], lineno: int) -> int:
        try:
            count = int(token)
        except (TypeError, ValueError):
            count = -1

        if count < 0:
            if self.compliant & Compliant.COUNT:
                raise MalformedHeaderError(f'line {lineno}: invalid element count {token!r}')
            self.logger.warning('line %d: invalid element count %r, using 0' % (lineno, token))
            count = 0

        return count

    def _parse_property(self, groups: Tuple[str, Optional[str]], lineno: int) -> Optional[Property]:
        token, name = groups
        _type = PropertyType.from_token(token)

        if _type is None or name is None:
            if self.compliant & Compliant.TYPE:
                raise MalformedHeaderError(f'line {lineno}: unsupported property declaration ({token!r}, {name!r})')
            self.logger.warning('line %d: ignoring property declaration (%r, %r)' % (lineno, token, name))
            return None

        return Property(name, _type)

    def _parse_list(self, groups: Tuple[Optional[str], ...], lineno: int) -> Optional[ListProperty]:
        count_token, item_token, name = groups
        count_type = PropertyType.from_token(count_token) if count_token else None
        item_type = PropertyType.from_token(item_token) if item_token else None

        if count_type is None or count_type.is_float or item_type is None or name is None:
            if self.compliant & Compliant.TYPE:
                raise MalformedHeaderError(
                    f'line {lineno}: unsupported list declaration ({count_token!r}, {item_token!r}, {name!r})')
            self.logger.warning('line %d: ignoring list declaration (%r, %r, %r)' % (
                lineno, count_token, item_token, name))
            return None

        return ListProperty(name, count_type, item_type)

    def has(self, name: str) -> bool:
        return self.get_element(name) is not None

    def get_element(self, name: str) -> Optional[Element]:
        for element in self.elements:
            if element.name == name:
                return element

        return None

    def body_offset_of(self, name: str) -> int:
        '''Absolute offset in the file of the first record of the named element.

        The offset is unknown, and VariableSizeElementError raised, when an element
        before it has list properties.'''
        if not self.has(name):
            raise UnknownElementError(f'unknown element \'{name}\'', chain=[name])

        offset = self.body_offset
        for element in self.elements:
            if element.name == name:
                return offset
            offset += element.body_size

    @property
    def layout(self) -> Dict[str, Tuple[Optional[int], Optional[int]]]:
        '''Offset and size of each element: None where they cannot be derived.'''
        result = OrderedDict()
        offset = self.body_offset
        for element in self.elements:
            size = element.body_size if element.is_fixed_size else None
            result.setdefault(element.name, (offset, size))
            if offset is not None and size is not None:
                offset += size
            else:
                offset = None

        return result
