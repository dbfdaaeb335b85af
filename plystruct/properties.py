'''
Registry of the scalar types a PLY property can have.

Each type has a fixed width in bytes and a token used to read its
little-endian representation out of a bitstring stream.
'''
from enum import Enum
from typing import Optional


class PropertyType(Enum):
    INT8    = ('int8', 1, 'int:8')
    UINT8   = ('uint8', 1, 'uint:8')
    INT16   = ('int16', 2, 'intle:16')
    UINT16  = ('uint16', 2, 'uintle:16')
    INT32   = ('int32', 4, 'intle:32')
    UINT32  = ('uint32', 4, 'uintle:32')
    FLOAT32 = ('float32', 4, 'floatle:32')
    FLOAT64 = ('float64', 8, 'floatle:64')

    def __init__(self, label, size, token):
        self.label = label
        self.size = size
        self.token = token

    def __repr__(self):
        return f'<{self.__class__.__name__}.{self.name}>'

    @property
    def is_float(self) -> bool:
        return self in (PropertyType.FLOAT32, PropertyType.FLOAT64)

    @classmethod
    def from_token(cls, token: str) -> Optional['PropertyType']:
        '''Returns the type named by the header token or None if unknown.'''
        return type2property.get(token)


# header tokens, with the PLY 1.0 names and their sized aliases
type2property = {
    'char':   PropertyType.INT8,
    'uchar':  PropertyType.UINT8,
    'short':  PropertyType.INT16,
    'ushort': PropertyType.UINT16,
    'int':    PropertyType.INT32,
    'uint':   PropertyType.UINT32,
    'float':  PropertyType.FLOAT32,
    'double': PropertyType.FLOAT64,
}
type2property.update({_.label: _ for _ in PropertyType})


class Property(object):
    '''A named scalar inside the record of an element.'''

    __slots__ = ('name', 'type', 'size')

    def __init__(self, name: str, type: PropertyType):
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'type', type)
        object.__setattr__(self, 'size', type.size)

    def __setattr__(self, name, value):
        raise AttributeError(f"'{self.__class__.__name__}' is immutable")

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.type.label} {self.name})>'

    def __eq__(self, other):
        if not isinstance(other, Property):
            return NotImplemented

        return (self.name, self.type) == (other.name, other.type)

    def __hash__(self):
        return hash((self.name, self.type))


class ListProperty(object):
    '''A variable length property: a count followed by that many items.

    Its size is not known from the header, so it has no size at all.'''

    __slots__ = ('name', 'count_type', 'item_type')

    size = None

    def __init__(self, name: str, count_type: PropertyType, item_type: PropertyType):
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'count_type', count_type)
        object.__setattr__(self, 'item_type', item_type)

    def __setattr__(self, name, value):
        raise AttributeError(f"'{self.__class__.__name__}' is immutable")

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.count_type.label} {self.item_type.label} {self.name})>'

    def __eq__(self, other):
        if not isinstance(other, ListProperty):
            return NotImplemented

        return (self.name, self.count_type, self.item_type) == (other.name, other.count_type, other.item_type)

    def __hash__(self):
        return hash((self.name, self.count_type, self.item_type))
