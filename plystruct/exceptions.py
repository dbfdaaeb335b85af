class PlyStructException(Exception):
    '''Base class to extend in order to throw exception in plystruct.

    Besides the message it takes an optional argument that represents the chain
    of the layers (element, field) that caused the exception.
    '''

    def __init__(self, message='', chain=None):
        self.chain = chain if chain is not None else []
        super().__init__(message)


class HeaderReadError(PlyStructException):
    '''The terminator of the header was never found.'''
    pass


class InvalidFileError(PlyStructException):
    pass


class MalformedHeaderError(InvalidFileError):
    '''A header line violates the syntax required by the compliance level.'''
    pass


class UnsupportedFormatError(PlyStructException):
    pass


class UnknownElementError(PlyStructException, KeyError):
    pass


class SeekOutOfRangeError(PlyStructException, IndexError):
    pass


class EndOfElementError(PlyStructException, EOFError):
    '''Raised by sequential reads when all the records have been consumed:
    use it as the loop terminator.'''
    pass


class TruncatedRecordError(PlyStructException):
    pass


class UnpackException(PlyStructException):
    pass


class VariableSizeElementError(PlyStructException):
    '''The element, or one preceding it, has list properties so its position
    and the size of its records cannot be derived from the header.'''
    pass
