"""
# plystruct: PLY files for humans.

A PLY file is made of a textual header describing a sequence of named
"elements" (vertices, faces, ...), each with an ordered list of fixed-width
scalar properties, followed by a binary body with the records of each element.

The decoding happens in three steps:

 1. the header is parsed into a schema (plystruct.header): from the schema
    alone we know where each element starts and how big its records are.

 2. an ElementReader (plystruct.reader) is bound to a single element and
    moves over its records, sequentially or at random.

 3. each raw record is decoded into a Record (plystruct.core) matching the
    name of each property with the fields declared by the Record class:
    properties without a field are skipped, fields without a property are
    left alone.

    from plystruct import fields
    from plystruct.core import Record
    from plystruct.plyfile import open_ply

    class Vertex(Record):
        x = fields.StructField('f')
        y = fields.StructField('f')
        z = fields.StructField('f')

    with open_ply('bunny.ply') as ply:
        for vertex in ply.element_reader('vertex').records(Vertex):
            print(vertex)

Only the binary little endian flavour with scalar properties is supported.
"""
