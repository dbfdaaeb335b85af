from enum import Flag


class Compliant(Flag):
    '''It indicates which degree of compliantness the header must reflect the format'''
    NONE   = 0
    COUNT  = 1 << 0  # element count must be a non-negative integer
    ORPHAN = 1 << 1  # property lines must follow an element line
    TYPE   = 1 << 2  # property types must be scalar types
    STRICT = COUNT | ORPHAN | TYPE
