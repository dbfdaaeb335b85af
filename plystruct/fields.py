"""
A Field is the slot of a Record that receives the value of a property.

The field decides how the decoded scalar is stored: the conversion mimics
the one between fixed width numeric types, so a float64 property read into
a 'f' field loses precision and an int32 property read into a 'B' field
wraps around.
"""
import logging
import math
import struct

from .meta import FieldBase
from .exceptions import UnpackException


class Field(FieldBase):
    """Base class to subclass from.

    The argument "bind" is the name of the property that fills the field,
    when not indicated is the name of the attribute in the Record."""

    def __init__(self, bind=None, default=None, father=None):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = None
        self.bind = bind
        self.father = father
        self.default = default

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.value)

    def __eq__(self, other):
        if isinstance(other, Field):
            return self.value == other.value

        return self.value == other

    __hash__ = None

    @property
    def binding(self):
        return self.bind if self.bind is not None else self.name

    def convert(self, value):
        return value

    def set(self, value):
        self.value = self.convert(value)


class StructField(Field):
    """
    Mimic the struct module: the format is one of the numeric format characters
    and establishes the width of the value stored.
    """
    formats = 'bBhHiIqQfd'

    def __init__(self, format, default=0, **kw):
        if len(format) != 1 or format not in self.formats:
            raise ValueError(f"format '{format}' is not one of '{self.formats}'")
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s, %r)>' % (self.__class__.__name__, self.format, self.value)

    def get_format(self):
        return '<%s' % self.format

    @property
    def size(self):
        return struct.calcsize(self.get_format())

    @property
    def is_float(self):
        return self.format in 'fd'

    def value_from_default(self):
        return self.convert(self.default)

    def convert(self, value):
        if self.is_float:
            return self._convert_float(value)

        return self._convert_int(value)

    def _convert_float(self, value):
        value = float(value)
        if self.format == 'd':
            return value

        try:
            return struct.unpack('<f', struct.pack('<f', value))[0]
        except OverflowError:
            return math.copysign(math.inf, value)

    def _convert_int(self, value):
        if isinstance(value, float):
            if not math.isfinite(value):
                raise UnpackException(
                    f"cannot store {value} into the integer field '{self.name}'", chain=[self.name])
            value = int(value)

        # keep only the low bits and reinterpret them with the signedness of the field
        mask = (1 << (8 * self.size)) - 1
        raw = struct.pack('<%s' % self.format.upper(), value & mask)

        return struct.unpack(self.get_format(), raw)[0]
