import struct

import pytest


def build_header(*lines, fmt='binary_little_endian 1.0'):
    header = ['ply']
    if fmt is not None:
        header.append(f'format {fmt}')
    header.extend(lines)
    header.append('end_header')

    return ('\n'.join(header) + '\n').encode()


def pack_records(format, records):
    return b''.join(struct.pack('<' + format, *record) for record in records)


@pytest.fixture
def vertex_ply():
    """Two elements: five colored vertices followed by two "edges"."""
    vertices = [
        (0.5, -1.25, 3.0, 255, 128, 1),
        (1.0, 2.0, 3.0, 10, 20, 30),
        (-0.0, 1e10, -7.5, 0, 0, 0),
        (0.1, 0.2, 0.3, 1, 2, 3),
        (4.0, 5.0, 6.0, 40, 50, 60),
    ]
    edges = [
        (0, 1, -3),
        (3, 4, 70000),
    ]
    header = build_header(
        'comment first',
        'comment made by plystruct',
        'element vertex %d' % len(vertices),
        'property double x',
        'property double y',
        'property float z',
        'property uchar red',
        'property uchar green',
        'property uchar blue',
        'element edge %d' % len(edges),
        'property int vertex1',
        'property int vertex2',
        'property int crease',
    )

    return header + pack_records('ddfBBB', vertices) + pack_records('iii', edges), vertices, edges


@pytest.fixture
def write_ply(tmp_path):
    def _write(data, name='test.ply'):
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)

    return _write
