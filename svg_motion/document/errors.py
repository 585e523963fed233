"""Document error taxonomy.

All document problems are fatal: the conversion aborts before any output is
produced.  ``element`` names the offending node (``svg > g#layer1 > path``)
when it is known.
"""

from __future__ import annotations

from svg_motion.configs.loader import ConfigError


class DocumentError(Exception):
    """Raised when the input document cannot be converted."""

    def __init__(self, message: str, element: str | None = None) -> None:
        self.message = message
        self.element = element
        if element:
            message = f"{element}: {message}"
        super().__init__(message)

    def with_element(self, element: str) -> "DocumentError":
        """Copy of this error annotated with *element* (if not already)."""
        if self.element is not None:
            return self
        return type(self)(self.message, element=element)


class ParseError(DocumentError):
    """Malformed path data, transform, length or XML."""

    pass


class MissingDimensionsError(DocumentError, ConfigError):
    """The document has no usable size and the caller supplied no override."""

    pass
