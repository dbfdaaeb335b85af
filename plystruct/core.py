"""
Core module for the decoding of records.

A Record declares, as class attributes, the fields it wants to be filled:
the binding between a property of the element and a field is by name, so
the order in which fields are declared doesn't matter and there is no need
to declare a field for each property

    class Vertex(Record):
        z = fields.StructField('f')
        x = fields.StructField('f')
        r = fields.StructField('B', bind='red')

The binary layout instead is dictated only by the properties of the element:
each property consumes its size in bytes, bound or not.
"""
import logging
from collections import OrderedDict
from collections.abc import MutableMapping
from typing import Dict, Iterator, List, Optional, Set, Tuple

from bitstring import ConstBitStream

from .exceptions import TruncatedRecordError, UnpackException
from .fields import Field
from .meta import MetaRecord
from .properties import Property


logger = logging.getLogger(__name__)


def iter_properties(raw: bytes, properties: List[Property],
                    wanted: Optional[Set[str]] = None) -> Iterator[Tuple[Property, object]]:
    '''Walk the buffer property by property yielding the decoded values.

    If "wanted" is indicated the properties not named in it are skipped
    without decoding them.'''
    size = sum(_.size for _ in properties)
    if len(raw) < size:
        raise TruncatedRecordError(f'record needs {size} bytes but only {len(raw)} are available')

    stream = ConstBitStream(bytes=raw)

    for prop in properties:
        if wanted is not None and prop.name not in wanted:
            stream.bytepos += prop.size
            continue

        yield prop, stream.read(prop.type.token)


def unpack_properties(raw: bytes, properties: List[Property]) -> Dict[str, object]:
    '''Returns the values of all the properties of a record indexed by name.'''
    return OrderedDict((prop.name, value) for prop, value in iter_properties(raw, properties))


def decode_record(raw: bytes, properties: List[Property], target):
    '''Fill the target with the values of the properties in the raw record.

    The target can be a Record, in which case only the properties bound to a field
    are decoded, or a mutable mapping that receives all the properties.'''
    if isinstance(target, MutableMapping):
        target.update(unpack_properties(raw, properties))
        return target

    if not isinstance(target, Record):
        raise TypeError(f'cannot decode a record into an instance of {target.__class__.__name__}')

    target.unpack(raw, properties)

    return target


class Record(metaclass=MetaRecord):
    """
    Target of the decoding of the records of an element.

    Subclasses declare the fields, the values passed as keyword arguments
    to the constructor are set into them.
    """

    def __init__(self, **kwargs):
        for name, value in kwargs.items():
            if name not in self._meta.fields:
                raise AttributeError(f"{self.__class__.__name__} has no field named '{name}'")
            setattr(self, name, value)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def get_bindings(self) -> Dict[str, Field]:
        '''It returns the field instance bound to each property name.'''
        return {prop_name: getattr(self, field_name) for prop_name, field_name in self._meta.bindings.items()}

    def as_dict(self) -> Dict[str, object]:
        return OrderedDict((name, field.value) for name, field in self.get_fields())

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%r' % (field_name, field.value))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __eq__(self, other):
        if not isinstance(other, Record):
            return NotImplemented

        return self.__class__ is other.__class__ and self.as_dict() == other.as_dict()

    __hash__ = None

    def unpack(self, raw: bytes, properties: List[Property]):
        bindings = self.get_bindings()

        for prop, value in iter_properties(raw, properties, wanted=set(bindings)):
            field = bindings[prop.name]
            logger.debug('unpacking %s.%s from property %r' % (self.__class__.__name__, field.name, prop))
            try:
                field.set(value)
            except UnpackException as e:
                e.chain.insert(0, self.__class__.__name__)
                raise
