'''
Shortcut for the most common case: a cloud of colored points.
'''
from typing import List, Optional

from . import fields
from .core import Record
from .exceptions import UnknownElementError
from .plyfile import PlyFile


class Point(Record):
    x = fields.StructField('d')
    y = fields.StructField('d')
    z = fields.StructField('d')
    r = fields.StructField('B', bind='red')
    g = fields.StructField('B', bind='green')
    b = fields.StructField('B', bind='blue')

    def __str__(self):
        return '{x: %.16f, y: %.16f, z: %.16f, r: %d, g: %d, b: %d}' % (
            self.x.value, self.y.value, self.z.value,
            self.r.value, self.g.value, self.b.value,
        )


def read_all_points(source, element: Optional[str] = None, **kwargs) -> List[Point]:
    '''Read all the records of an element as points; when element is not
    indicated the first one declared in the header is used.'''
    with PlyFile(source, **kwargs) as ply:
        if element is None:
            if not ply.elements:
                raise UnknownElementError('the file doesn\'t declare any element')
            element = ply.elements[0].name

        return list(ply.element_reader(element).records(Point))
