import io

import pytest

from plystruct.enum import Compliant
from plystruct.exceptions import (
    HeaderReadError,
    InvalidFileError,
    MalformedHeaderError,
    UnknownElementError,
    VariableSizeElementError,
)
from plystruct.header import Header, read_header_bytes
from plystruct.properties import ListProperty, Property, PropertyType
from plystruct.streams import Stream

from conftest import build_header


def test_header_from_stream(vertex_ply):
    data, vertices, edges = vertex_ply
    header = Header.from_stream(Stream(data))

    assert header.format == 'binary_little_endian'
    assert header.version == '1.0'
    assert header.comment == 'made by plystruct'
    assert [_.name for _ in header.elements] == ['vertex', 'edge']

    vertex, edge = header.elements

    assert vertex.count == 5
    assert [(_.name, _.type) for _ in vertex.properties] == [
        ('x', PropertyType.FLOAT64),
        ('y', PropertyType.FLOAT64),
        ('z', PropertyType.FLOAT32),
        ('red', PropertyType.UINT8),
        ('green', PropertyType.UINT8),
        ('blue', PropertyType.UINT8),
    ]
    assert vertex.size == 23
    assert edge.size == 12

    assert header.body_offset == data.index(b'end_header\n') + len(b'end_header\n')


def test_header_offsets(vertex_ply):
    data, vertices, edges = vertex_ply
    header = Header.from_stream(Stream(data))

    assert header.body_offset_of('vertex') == header.body_offset
    assert header.body_offset_of('edge') == header.body_offset + 5 * 23
    assert header.layout == {
        'vertex': (header.body_offset, 5 * 23),
        'edge': (header.body_offset + 5 * 23, 2 * 12),
    }
    # the last element ends exactly at the end of the file
    assert header.body_offset_of('edge') + 2 * 12 == len(data)

    with pytest.raises(UnknownElementError):
        header.body_offset_of('face')


def test_header_property_offset(vertex_ply):
    header = Header.from_stream(Stream(vertex_ply[0]))
    vertex = header.get_element('vertex')

    assert vertex.property_offset('x') == 0
    assert vertex.property_offset('z') == 16
    assert vertex.property_offset('blue') == 22

    with pytest.raises(KeyError):
        vertex.property_offset('alpha')


def test_header_size_follows_properties():
    header = Header.parse('format binary_little_endian 1.0\nelement vertex 3\nproperty short a\nend_header\n')
    vertex = header.get_element('vertex')

    assert vertex.size == 2

    vertex.add_property(Property('b', PropertyType.FLOAT64))

    assert vertex.size == 10
    assert vertex.body_size == 30


@pytest.mark.parametrize('chunk_size', [1, 7, 100, 4096])
def test_read_header_bytes_chunk_size(vertex_ply, chunk_size):
    data, _, _ = vertex_ply

    raw = read_header_bytes(io.BytesIO(data), chunk_size=chunk_size)

    assert raw.endswith(b'end_header\n')
    assert data.startswith(raw)


def test_read_header_bytes_crlf():
    data = b'ply\r\nformat binary_little_endian 1.0\r\nelement vertex 0\r\nend_header\r\n\x00\x01'

    raw = read_header_bytes(io.BytesIO(data))
    header = Header.parse(raw.decode('latin-1'))

    assert raw == data[:-2]
    assert header.format == 'binary_little_endian'
    assert header.elements[0].name == 'vertex'


def test_read_header_bytes_without_terminator():
    with pytest.raises(HeaderReadError):
        read_header_bytes(io.BytesIO(b'ply\nformat binary_little_endian 1.0\nelement vertex 1\n'))

    with pytest.raises(HeaderReadError):
        read_header_bytes(io.BytesIO(b''))

    # the terminator needs its newline
    with pytest.raises(HeaderReadError):
        read_header_bytes(io.BytesIO(b'ply\nend_header'))


def test_read_header_bytes_failing_source():
    class Broken(io.RawIOBase):
        def readable(self):
            return True

        def readinto(self, b):
            raise OSError('device not ready')

    with pytest.raises(HeaderReadError) as excinfo:
        read_header_bytes(Broken())

    assert isinstance(excinfo.value.__cause__, OSError)


def test_header_terminator_only_at_line_start():
    data = build_header('comment not the end_header', 'element vertex 1', 'property uchar a') + b'\x07'

    raw = read_header_bytes(io.BytesIO(data))

    assert len(raw) == len(data) - 1


def test_header_empty():
    with pytest.raises(InvalidFileError):
        Header.parse('end_header\n')

    with pytest.raises(InvalidFileError):
        Header.parse('\n\nend_header\n')


def test_header_first_format_wins_last_comment_wins():
    header = Header.parse(
        'ply\n'
        'format binary_little_endian 1.0\n'
        'comment one\n'
        'format ascii 1.0\n'
        'comment two\n'
        'end_header\n'
    )

    assert header.format == 'binary_little_endian'
    assert header.comment == 'two'
    assert header.elements == []


def test_header_ignores_unknown_lines():
    header = Header.parse(
        'ply\n'
        'format binary_little_endian 1.0\n'
        'obj_info scanned by somebody\n'
        'element vertex 1\n'
        'whatever this is\n'
        'property int a\n'
        'end_header\n'
    )

    assert [_.name for _ in header.elements[0].properties] == ['a']


def test_header_elements_without_properties():
    header = Header.parse(
        'format binary_little_endian 1.0\n'
        'element empty 10\n'
        'element vertex 2\n'
        'property float x\n'
        'end_header\n'
    )

    assert header.layout == {
        'empty': (0, 0),
        'vertex': (0, 8),
    }


@pytest.mark.parametrize('line', [
    'element vertex many',
    'element vertex -1',
    'element vertex',
])
def test_header_invalid_count(line):
    text = 'format binary_little_endian 1.0\n%s\nproperty float x\nend_header\n' % line

    with pytest.raises(MalformedHeaderError):
        Header.parse(text)

    header = Header.parse(text, compliant=Compliant.NONE)

    assert header.elements[0].count == 0
    assert header.elements[0].size == 4


def test_header_orphan_property():
    text = 'format binary_little_endian 1.0\nproperty float x\nelement vertex 1\nproperty float y\nend_header\n'

    with pytest.raises(MalformedHeaderError):
        Header.parse(text)

    header = Header.parse(text, compliant=Compliant.NONE)

    assert [_.name for _ in header.elements[0].properties] == ['y']


@pytest.mark.parametrize('line', [
    'property long x',
    'property list float int vertex_indices',
    'property list uchar quad vertex_indices',
    'property list uchar int',
    'property float',
])
def test_header_unsupported_property(line):
    text = 'format binary_little_endian 1.0\nelement face 1\n%s\nproperty uchar flags\nend_header\n' % line

    with pytest.raises(MalformedHeaderError):
        Header.parse(text)

    header = Header.parse(text, compliant=Compliant.STRICT & ~Compliant.TYPE)

    assert [_.name for _ in header.elements[0].properties] == ['flags']


def test_malformed_header_is_invalid_file():
    assert issubclass(MalformedHeaderError, InvalidFileError)


MESH_HEADER = (
    'ply\n'
    'format binary_little_endian 1.0\n'
    'element vertex 3\n'
    'property float x\n'
    'property ushort flags\n'
    'element face 1\n'
    'property uchar material\n'
    'property list uchar int vertex_indices\n'
    'property float area\n'
    'element edge 2\n'
    'property int vertex1\n'
    'end_header\n'
)


def test_header_list_property():
    header = Header.parse(MESH_HEADER)
    vertex, face, edge = header.elements

    assert face.properties[1] == ListProperty('vertex_indices', PropertyType.UINT8, PropertyType.INT32)
    assert face.properties[1].size is None

    assert vertex.is_fixed_size
    assert not face.is_fixed_size
    assert edge.is_fixed_size

    with pytest.raises(VariableSizeElementError):
        face.size

    assert face.property_offset('material') == 0
    assert face.property_offset('vertex_indices') == 1
    with pytest.raises(VariableSizeElementError):
        face.property_offset('area')


def test_header_list_property_offsets():
    header = Header.parse(MESH_HEADER)

    # the elements up to the one with the list are where they are expected
    assert header.body_offset_of('vertex') == 0
    assert header.body_offset_of('face') == 3 * 6

    with pytest.raises(VariableSizeElementError):
        header.body_offset_of('edge')

    with pytest.raises(UnknownElementError):
        header.body_offset_of('material')

    assert header.layout == {
        'vertex': (0, 18),
        'face': (18, None),
        'edge': (None, 8),
    }


@pytest.mark.parametrize('fmt', ['ascii', 'binary_big_endian'])
def test_header_unsupported_format_is_not_checked(fmt):
    header = Header.parse(
        'ply\n'
        'property float orphan\n'
        'format %s 1.0\n'
        'element vertex many\n'
        'property long x\n'
        'element face 1\n'
        'property list uchar int vertex_indices\n'
        'end_header\n' % fmt
    )

    assert header.format == fmt
    assert not header.is_supported
    assert [(_.name, _.count) for _ in header.elements] == [('vertex', 0), ('face', 1)]


def test_header_without_format_is_not_supported():
    header = Header.parse('ply\nelement vertex 1\nproperty float x\nend_header\n')

    assert header.format is None
    assert not header.is_supported
