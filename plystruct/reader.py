import logging
from typing import Callable, Iterator

from .core import decode_record
from .exceptions import (
    EndOfElementError,
    SeekOutOfRangeError,
    TruncatedRecordError,
)
from .header import Element


class ElementReader(object):
    '''Reads the records of a single element.

    The position of each record is computed from the cursor and not from the
    position of the stream, so more readers can share the same stream as long
    as the seek+read of each one is not interleaved with the others.

    The cursor goes from 0 to count, the latter meaning that the element
    is exhausted.'''

    def __init__(self, stream, offset: int, element: Element):
        self.logger = logging.getLogger(__name__)
        self.stream = stream
        self.offset = offset
        self.element = element
        self._cursor = 0

    def __repr__(self):
        return '<%s(%s, %d/%d)>' % (
            self.__class__.__name__,
            self.element.name,
            self._cursor,
            self.element.count,
        )

    def __len__(self):
        return self.element.count

    def seek(self, pos: int):
        if pos < 0 or pos > self.element.count:
            raise SeekOutOfRangeError(
                f"can't seek at position {pos} of element '{self.element.name}' with {self.element.count} records",
                chain=[self.element.name])

        self._cursor = pos

    def reset(self):
        self.seek(0)

    def read_next(self, target) -> int:
        '''Decode the record under the cursor into target and advance.

        It returns the number of records read so far.'''
        if self._cursor >= self.element.count:
            raise EndOfElementError(f"element '{self.element.name}' exhausted", chain=[self.element.name])

        size = self.element.size
        position = self.offset + self._cursor * size

        self.logger.debug('reading %s[%d] at offset %d' % (self.element.name, self._cursor, position))

        self.stream.seek(position)
        raw = self.stream.read_exactly(size)

        if len(raw) != size:
            raise TruncatedRecordError(
                f"record {self._cursor} of element '{self.element.name}' is truncated: "
                f"{len(raw)} bytes instead of {size}",
                chain=[self.element.name])

        decode_record(raw, self.element.properties, target)

        self._cursor += 1

        return self._cursor

    def read_at(self, pos: int, target):
        '''Random access read: the cursor is left untouched.'''
        cursor = self._cursor
        self.seek(pos)
        try:
            self.read_next(target)
        finally:
            self._cursor = cursor

    def read_first(self, target):
        self.read_at(0, target)

    def current_position(self) -> int:
        return self._cursor

    def total_count(self) -> int:
        return self.element.count

    def records(self, factory: Callable) -> Iterator:
        '''Yields a new instance from factory for each record of the element,
        starting from the first one.'''
        self.reset()
        while True:
            target = factory()
            try:
                self.read_next(target)
            except EndOfElementError:
                return
            yield target
