"""Exceptions raised by the HTML serializer."""


class SerializerError(Exception):
    """Base class for serializer failures."""


class MalformedInputError(SerializerError, ValueError):
    """Input tree cannot be walked safely.

    Raised when the recursion bound is exceeded, a rule hands ``next`` something
    that is not a child sequence, a rule returns an unsupported value, or a
    document node turns up inside another node.
    """
