# cover_errors.py
# Error kinds raised by the encoders, the CNF emitter and the decoders


class CoverEncodingError(Exception):
    """Base class for all errors of the encoding/decoding layer"""
    pass


class InvalidBound(CoverEncodingError, ValueError):
    """Block count B is smaller than 1"""
    pass


class GraphTooLarge(CoverEncodingError, OverflowError):
    """Variable ranges would exceed the largest representable variable id"""
    pass


class IndexOutOfRange(CoverEncodingError, IndexError):
    """Query outside the declared sizes of an encoding"""
    pass


class EmptyInput(CoverEncodingError):
    """
    Degenerate instance with nothing to encode.

    Callers treat this as a benign "no work to do" outcome, not as a failure.
    """
    pass


class InconsistentAssignment(CoverEncodingError, ValueError):
    """Assignment does not match the encoding it is decoded against"""
    pass


class InputFormatError(CoverEncodingError, ValueError):
    """Malformed graph, cubing or DIMACS text"""
    pass


class ClauseCountMismatch(CoverEncodingError, RuntimeError):
    """Declared and actually emitted clause counts differ"""

    def __init__(self, declared, emitted):
        super().__init__(f"Declared {declared} clauses, but emitted {emitted}")
        self.declared = declared
        self.emitted = emitted


class IOFailure(CoverEncodingError, OSError):
    """A file or directory could not be opened, created or written"""

    def __init__(self, path, reason=""):
        message = f"Cannot access \"{path}\""
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path
        self.reason = reason

    def __str__(self):
        return self.args[0]
