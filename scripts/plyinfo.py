#!/usr/bin/env python3
import sys
import os
import logging

from plystruct.plyfile import open_ply
from plystruct.properties import ListProperty


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.setLevel(level=logging.INFO if 'DEBUG' not in os.environ else logging.DEBUG)
if 'DEBUG' in os.environ:
    logging.getLogger('plystruct').setLevel(logging.DEBUG)


def usage(progname):
    print('usage: %s <ply file> [<element> [<n records>]]' % progname)
    sys.exit(1)


def dump_header(header):
    print(f'''PLY Header:
  Format:                            {header.format} {header.version or ''}
  Comment:                           {header.comment or ''}
  Start of body:                     {header.body_offset} (bytes into file)''')
    print('''Elements:
  Name                Count      Record size  Offset''')
    for name, (offset, _) in header.layout.items():
        element = header.get_element(name)
        record_size = element.size if element.is_fixed_size else '?'
        print(f'''  {name:<20}{element.count:<11d}{record_size!s:<13}{offset if offset is not None else '?'}''')
        prop_offset = 0
        for prop in element.properties:
            if isinstance(prop, ListProperty):
                print(f'''      list {prop.count_type.label} {prop.item_type.label:<5} {prop.name:<20} +{prop_offset}''')
                prop_offset = '?'
                continue
            print(f'''      {prop.type.label:<15} {prop.name:<20} +{prop_offset}''')
            if prop_offset != '?':
                prop_offset += prop.size


def dump_records(reader, n):
    for idx in range(min(n, reader.total_count())):
        record = {}
        reader.read_at(idx, record)
        print(f'''  [{idx: >4d}] {record}''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    with open_ply(path) as ply:
        dump_header(ply.header)

        if len(sys.argv) > 2:
            name = sys.argv[2]
            n = int(sys.argv[3]) if len(sys.argv) > 3 else 10

            dump_records(ply.element_reader(name), n)
