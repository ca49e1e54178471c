# -*- coding: utf-8 -*-
"""
Error codes and the Status object threaded through the noise loading
routines.

Every routine accepting a Status checks it on entry and returns without doing
anything if an error has already been recorded. Errors are never raised
across those routines, callers inspect the status after each call.
"""
from enum import IntEnum
from typing import Union


class ErrorCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGUMENT = 1
    FILE_IO = 2
    BAD_LOCATION = 3
    TYPE_MISMATCH = 4
    DIMENSION_MISMATCH = 5
    BAD_DATA_TYPE = 6
    SETTINGS_INTERFEROMETER_NOISE = 7
    SETTINGS_IONOSPHERE = 8
    SETUP_FAIL_TELESCOPE = 9
    MEMORY_ALLOC_FAILURE = 10
    EOF = 11


_ERROR_STRINGS = {
    ErrorCode.SUCCESS: "no error",
    ErrorCode.INVALID_ARGUMENT: "invalid function argument",
    ErrorCode.FILE_IO: "file I/O error",
    ErrorCode.BAD_LOCATION: "unsupported pointer location",
    ErrorCode.TYPE_MISMATCH: "data type mismatch",
    ErrorCode.DIMENSION_MISMATCH: "data dimension mismatch",
    ErrorCode.BAD_DATA_TYPE: "unsupported data type",
    ErrorCode.SETTINGS_INTERFEROMETER_NOISE:
        "invalid interferometer system noise settings",
    ErrorCode.SETTINGS_IONOSPHERE: "invalid ionosphere settings",
    ErrorCode.SETUP_FAIL_TELESCOPE: "telescope model setup failed",
    ErrorCode.MEMORY_ALLOC_FAILURE: "memory allocation failure",
    ErrorCode.EOF: "end of file",
}


def error_string(code: Union[int, ErrorCode]) -> str:
    """
    Human-readable description of an error code
    """
    try:
        return _ERROR_STRINGS[ErrorCode(code)]
    except ValueError:
        return "unknown error ({})".format(code)


class Status:
    """
    Mutable error status, passed by reference to every routine of a noise
    loading pass. The first error recorded wins, later errors are ignored so
    that the originating failure is the one reported.
    """
    def __init__(self):
        self._code = ErrorCode.SUCCESS
        self._message = None

    def __repr__(self):
        return "Status(code={}, message={})".format(self.code.name,
                                                     self.message.__repr__())

    def __str__(self):
        if self.message:
            return "{} ({})".format(self.error_string, self.message)
        return self.error_string

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def message(self) -> Union[None, str]:
        return self._message

    @property
    def failed(self) -> bool:
        return self._code != ErrorCode.SUCCESS

    @property
    def error_string(self) -> str:
        return error_string(self._code)

    def set(self, code: ErrorCode, message: Union[None, str] = None) -> None:
        """
        Record an error, unless one has been recorded already
        """
        if self.failed or code == ErrorCode.SUCCESS:
            return
        self._code = ErrorCode(code)
        self._message = message

    def reset(self) -> None:
        self._code = ErrorCode.SUCCESS
        self._message = None
